"""List the newest messages in the mailbox."""

from __future__ import annotations

from typing import Optional

from loguru import logger

from mailrelay.application.ports.mailbox import Mailbox
from mailrelay.domain.entities.email_summary import EmailSummary
from mailrelay.domain.entities.mail_credentials import MailCredentials
from mailrelay.infrastructure.email.providers.imap.mapper import to_email_summary

DEFAULT_FETCH_LIMIT = 10


def fetch_window(total: int, limit: int) -> Optional[tuple[int, int]]:
    """Sequence range ``(start, end)`` covering the newest ``limit`` messages.

    Returns None for an empty mailbox.
    """
    if total <= 0:
        return None
    return max(1, total - limit + 1), total


class FetchEmailsUseCase:
    """Fetch the newest messages, newest first.

    Flow:
    1. Open the folder read-only (listing never mutates the mailbox)
    2. Resolve the sequence window from the message count
    3. Fetch headers + text for the window in one round trip
    4. Decode and sort descending by sequence number

    Any connection, auth or protocol error aborts the fetch; nothing partial
    is returned.
    """

    def __init__(self, mailbox: Mailbox, default_limit: int = DEFAULT_FETCH_LIMIT) -> None:
        self.mailbox = mailbox
        self.default_limit = default_limit

    def run(self, credentials: MailCredentials, limit: Optional[int] = None) -> list[EmailSummary]:
        if not limit or limit < 1:
            limit = self.default_limit

        with self.mailbox.open(credentials, readonly=True) as session:
            total = session.message_count()
            window = fetch_window(total, limit)
            if window is None:
                logger.info("Mailbox is empty")
                return []

            start, end = window
            raws = session.fetch_range(start, end)

        emails = [to_email_summary(raw) for raw in raws]
        emails.sort(key=lambda e: e.sequence_number, reverse=True)
        logger.info(f"Fetched {len(emails)} of {total} messages (range {start}:{end})")
        return emails
