from __future__ import annotations

from mailrelay.domain import ForwardedEmail, MailCredentials
from mailrelay.infrastructure.email.providers.imap import ImapConfig, ImapMailbox

CREDENTIALS = MailCredentials(account="relay@example.test", password="app-password")


def make_header_block(
    *,
    sender: str = "Sender <sender@example.test>",
    subject: str = "Test message",
    date: str = "Mon, 16 Feb 2026 10:00:00 +0900",
    content_type: str | None = "text/plain; charset=utf-8",
    extra: tuple[str, ...] = (),
) -> bytes:
    lines = [f"From: {sender}", "To: relay@example.test", f"Subject: {subject}", f"Date: {date}"]
    if content_type:
        lines.append(f"Content-Type: {content_type}")
    lines.extend(extra)
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


def make_original(**overrides: str) -> ForwardedEmail:
    fields = {
        "sender": "Sender <sender@example.test>",
        "subject": "Quarterly report",
        "date": "Mon, 16 Feb 2026 10:00:00 +0900",
        "body": "See attached numbers.",
    }
    fields.update(overrides)
    return ForwardedEmail(**fields)


class FakeIMAP:
    """Stands in for an authenticated imaplib.IMAP4_SSL connection.

    ``messages`` maps sequence number -> (uid, header block, text).
    """

    def __init__(
        self,
        messages: dict[int, tuple[int, bytes, bytes]] | None = None,
        *,
        select_status: str = "OK",
        fetch_status: str = "OK",
        store_status: str = "OK",
        expunge_status: str = "OK",
        fetch_error: Exception | None = None,
        reverse_fetch_order: bool = False,
        unsolicited: tuple[bytes, ...] = (),
    ) -> None:
        self.messages = dict(messages or {})
        self.select_status = select_status
        self.fetch_status = fetch_status
        self.store_status = store_status
        self.expunge_status = expunge_status
        self.fetch_error = fetch_error
        self.reverse_fetch_order = reverse_fetch_order
        self.unsolicited = unsolicited
        self.calls: list[tuple] = []
        self.flagged: set[int] = set()

    def select(self, mailbox: str = "INBOX", readonly: bool = False):
        self.calls.append(("SELECT", mailbox, readonly))
        if self.select_status != "OK":
            return self.select_status, [b"[NONEXISTENT] no such mailbox"]
        return "OK", [str(len(self.messages)).encode("ascii")]

    def fetch(self, message_set: str, items: str):
        self.calls.append(("FETCH", message_set, items))
        if self.fetch_error is not None:
            raise self.fetch_error
        start, end = (int(x) for x in message_set.split(":"))
        seqs = list(range(start, end + 1))
        if self.reverse_fetch_order:
            seqs.reverse()

        data: list = []
        for seq in seqs:
            uid, header, text = self.messages[seq]
            data.append((f"{seq} (UID {uid} BODY[HEADER.FIELDS (FROM TO SUBJECT DATE)] {{{len(header)}}}".encode(), header))
            data.append((f" BODY[TEXT] {{{len(text)}}}".encode(), text))
            data.append(b")")
        # Flag updates from other clients arrive under the same FETCH key
        data.extend(self.unsolicited)
        return self.fetch_status, data

    def uid(self, command: str, *args):
        self.calls.append(("UID", command, *args))
        if command != "STORE":
            raise AssertionError(f"Unsupported UID command in test fake: {command}")
        if self.store_status != "OK":
            return self.store_status, [b"store failed"]
        self.flagged.add(int(args[0]))
        return "OK", [b""]

    def expunge(self):
        self.calls.append(("EXPUNGE",))
        if self.expunge_status != "OK":
            return self.expunge_status, [b"expunge failed"]
        self.messages = {seq: m for seq, m in self.messages.items() if m[0] not in self.flagged}
        return "OK", [b""]

    def close(self):
        self.calls.append(("CLOSE",))
        return "OK", [b""]

    def logout(self):
        self.calls.append(("LOGOUT",))
        return "BYE", [b""]

    def commands(self) -> list[str]:
        return [call[0] if call[0] != "UID" else f"UID {call[1]}" for call in self.calls]

    def uids(self) -> set[int]:
        return {m[0] for m in self.messages.values()}


class FakeAuthenticator:
    def __init__(self, conn: FakeIMAP | None = None, error: Exception | None = None) -> None:
        self.conn = conn or FakeIMAP()
        self.error = error
        self.logins: list[MailCredentials] = []

    def login(self, creds: MailCredentials) -> FakeIMAP:
        self.logins.append(creds)
        if self.error is not None:
            raise self.error
        return self.conn


def make_mailbox(conn: FakeIMAP | None = None, error: Exception | None = None) -> tuple[ImapMailbox, FakeAuthenticator]:
    auth = FakeAuthenticator(conn, error)
    return ImapMailbox(ImapConfig(), authenticator=auth), auth


def make_messages(count: int, *, body: bytes = b"Hello there.\r\n") -> dict[int, tuple[int, bytes, bytes]]:
    return {
        seq: (1000 + seq, make_header_block(subject=f"Message {seq}"), body)
        for seq in range(1, count + 1)
    }


class RecordingSender:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[tuple[MailCredentials, str, ForwardedEmail]] = []

    def forward(self, credentials: MailCredentials, recipient: str, original: ForwardedEmail) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((credentials, recipient, original))
