from __future__ import annotations
import imaplib
import re
from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger

from mailrelay.application.ports.mailbox import Mailbox, MailboxSession, RawFetchedMessage
from mailrelay.domain.entities.mail_credentials import MailCredentials
from mailrelay.domain.errors import MailConnectionError, MailRelayError, ProtocolError
from mailrelay.infrastructure.email.providers.imap.auth import ImapAuthenticator, ImapConfig

# MIME headers ride along with the display headers so the body can be parsed structurally
HEADER_FIELDS = "FROM TO SUBJECT DATE MIME-VERSION CONTENT-TYPE CONTENT-TRANSFER-ENCODING"
FETCH_ITEMS = f"(UID BODY.PEEK[HEADER.FIELDS ({HEADER_FIELDS})] BODY.PEEK[TEXT])"
DELETED_FLAG = "(\\Deleted)"

_SEQ_RE = re.compile(rb"^\s*(\d+) \(")
_UID_RE = re.compile(rb"UID (\d+)")


def parse_fetch_response(
    data: list, start: Optional[int] = None, end: Optional[int] = None
) -> list[RawFetchedMessage]:
    """Group an imaplib FETCH response into one record per message.

    imaplib returns a flat list mixing ``(meta, literal)`` tuples and bare
    ``bytes`` trailers; a meta starting with ``<seq> (`` opens a new message.
    Unsolicited FETCH updates (e.g. ``* 2 FETCH (FLAGS (\\Seen))`` after another
    client changed flags) land in the same list, so sequence numbers outside
    ``start:end`` are skipped when a window is given.
    """
    parts: dict[int, dict] = {}
    current: Optional[dict] = None
    for item in data:
        if isinstance(item, tuple):
            meta, payload = item[0], item[1]
        else:
            meta, payload = item, None
        if not meta:
            continue

        seq_match = _SEQ_RE.match(meta)
        if seq_match:
            seq = int(seq_match.group(1))
            if (start is not None and seq < start) or (end is not None and seq > end):
                current = None
                continue
            current = parts.setdefault(seq, {"uid": None, "header": b"", "text": b""})
        if current is None:
            continue

        uid_match = _UID_RE.search(meta)
        if uid_match:
            current["uid"] = int(uid_match.group(1))
        if payload is not None:
            upper = meta.upper()
            if b"HEADER" in upper:
                current["header"] = payload
            elif b"TEXT" in upper:
                current["text"] = payload

    return [
        RawFetchedMessage(sequence_number=seq, uid=p["uid"], header_block=p["header"], text=p["text"])
        for seq, p in parts.items()
    ]


class ImapMailboxSession(MailboxSession):
    def __init__(self, conn: imaplib.IMAP4, folder: str, readonly: bool, total: int) -> None:
        self._conn = conn
        self.folder = folder
        self.readonly = readonly
        self._total = total

    def message_count(self) -> int:
        return self._total

    def fetch_range(self, start: int, end: int) -> list[RawFetchedMessage]:
        typ, data = self._conn.fetch(f"{start}:{end}", FETCH_ITEMS)
        if typ != "OK":
            raise ProtocolError(f"FETCH {start}:{end} failed in {self.folder}: {data!r}")
        messages = parse_fetch_response(data or [], start, end)
        logger.debug(f"Fetched {len(messages)} messages ({start}:{end}) from {self.folder}")
        return messages

    def delete(self, uid: int) -> None:
        """Flag a message deleted and expunge it. The flag is not undone if expunge fails."""
        if self.readonly:
            raise ProtocolError(f"Cannot delete UID {uid}: {self.folder} is open read-only")

        typ, data = self._conn.uid("STORE", str(uid), "+FLAGS", DELETED_FLAG)
        if typ != "OK":
            raise ProtocolError(f"Failed to flag UID {uid} as deleted: {data!r}")

        typ, data = self._conn.expunge()
        if typ != "OK":
            raise ProtocolError(f"Expunge failed after flagging UID {uid}: {data!r}")

        logger.info(f"Deleted UID {uid} from {self.folder}")


class ImapMailbox(Mailbox):
    """Opens one fresh, authenticated connection per operation."""

    def __init__(self, cfg: ImapConfig, authenticator: Optional[ImapAuthenticator] = None) -> None:
        self.cfg = cfg
        self.authenticator = authenticator or ImapAuthenticator(cfg)

    @contextmanager
    def open(self, credentials: MailCredentials, *, readonly: bool) -> Iterator[ImapMailboxSession]:
        conn = self.authenticator.login(credentials)
        selected = False
        try:
            try:
                typ, data = conn.select(self.cfg.folder, readonly=readonly)
                if typ != "OK":
                    raise ProtocolError(f"Failed to select folder {self.cfg.folder}: {data!r}")
                selected = True
                total = int(data[0]) if data and data[0] else 0
                yield ImapMailboxSession(conn, self.cfg.folder, readonly, total)
            except MailRelayError:
                raise
            except imaplib.IMAP4.abort as e:
                raise MailConnectionError(f"IMAP connection aborted: {e}") from e
            except imaplib.IMAP4.error as e:
                raise ProtocolError(f"IMAP error in {self.cfg.folder}: {e}") from e
            except OSError as e:
                raise MailConnectionError(f"IMAP connection failed: {e}") from e
        finally:
            self._disconnect(conn, selected and not readonly)

    def _disconnect(self, conn: imaplib.IMAP4, close_folder: bool) -> None:
        try:
            if close_folder:
                conn.close()
            conn.logout()
        except (imaplib.IMAP4.error, OSError) as e:
            logger.debug(f"IMAP disconnect failed: {e}")
