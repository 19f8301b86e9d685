from __future__ import annotations
from dataclasses import dataclass
import imaplib
from typing import Optional

from loguru import logger

from mailrelay.domain.entities.mail_credentials import MailCredentials
from mailrelay.domain.errors import AuthenticationError, MailConnectionError

DEFAULT_IMAP_HOST = "imap.naver.com"
DEFAULT_IMAP_PORT = 993


@dataclass(frozen=True)
class ImapConfig:
    host: str = DEFAULT_IMAP_HOST
    port: int = DEFAULT_IMAP_PORT
    folder: str = "INBOX"
    timeout: Optional[float] = None


class ImapAuthenticator:
    """
    Responsible ONLY for establishing an authenticated IMAP connection.
    No folder logic, no fetching, no parsing.
    """

    def __init__(self, cfg: ImapConfig) -> None:
        self.cfg = cfg

    def login(self, creds: MailCredentials) -> imaplib.IMAP4:
        """
        Returns an authenticated IMAP4_SSL connection (implicit TLS).
        """
        try:
            conn = imaplib.IMAP4_SSL(host=self.cfg.host, port=self.cfg.port, timeout=self.cfg.timeout)
        except OSError as e:  # DNS, refused, timeout, TLS
            raise MailConnectionError(f"Cannot reach IMAP server {self.cfg.host}:{self.cfg.port}: {e}") from e

        try:
            conn.login(creds.account, creds.password)
        except imaplib.IMAP4.abort as e:
            _safe_shutdown(conn)
            raise MailConnectionError(f"IMAP connection dropped during login: {e}") from e
        except imaplib.IMAP4.error as e:
            _safe_logout(conn)
            raise AuthenticationError(f"IMAP login rejected for {creds.account}") from e
        except OSError as e:
            _safe_shutdown(conn)
            raise MailConnectionError(f"IMAP connection lost during login: {e}") from e

        logger.debug(f"IMAP login ok for {creds.account} at {self.cfg.host}")
        return conn


def _safe_logout(conn: imaplib.IMAP4) -> None:
    try:
        conn.logout()
    except (imaplib.IMAP4.error, OSError) as e:
        logger.debug(f"IMAP logout failed: {e}")


def _safe_shutdown(conn: imaplib.IMAP4) -> None:
    # Connection is already broken; LOGOUT would only fail again
    try:
        conn.shutdown()
    except OSError as e:
        logger.debug(f"IMAP socket shutdown failed: {e}")
