"""IMAP mailbox adapter (fetch by sequence range, delete by UID)."""

from mailrelay.infrastructure.email.providers.imap.auth import ImapAuthenticator, ImapConfig
from mailrelay.infrastructure.email.providers.imap.client import ImapMailbox, ImapMailboxSession

__all__ = [
    "ImapAuthenticator",
    "ImapConfig",
    "ImapMailbox",
    "ImapMailboxSession",
]
