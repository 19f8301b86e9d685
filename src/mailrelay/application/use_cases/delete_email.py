"""Remove one message from the mailbox by UID."""

from __future__ import annotations

from loguru import logger

from mailrelay.application.ports.mailbox import Mailbox
from mailrelay.domain.entities.mail_credentials import MailCredentials


class DeleteEmailUseCase:
    def __init__(self, mailbox: Mailbox) -> None:
        self.mailbox = mailbox

    def run(self, credentials: MailCredentials, uid: int) -> None:
        """Flag + expunge in a read-write session. Raises on the first failed step."""
        with self.mailbox.open(credentials, readonly=False) as session:
            session.delete(uid)
        logger.debug(f"Delete of UID {uid} committed")
