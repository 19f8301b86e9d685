"""Forward a message to a visitor, then delete the original."""

from __future__ import annotations

from loguru import logger

from mailrelay.application.ports.mailbox import MailSender
from mailrelay.application.use_cases.delete_email import DeleteEmailUseCase
from mailrelay.domain.entities.mail_credentials import ForwardedEmail, MailCredentials
from mailrelay.domain.errors import MailRelayError, PartialForwardError


class ForwardEmailUseCase:
    """Forward then delete, in that order.

    The two steps are not atomic: if the delete fails the forward has already
    been sent and the original stays in the mailbox. That case is raised as
    PartialForwardError for manual cleanup.
    """

    def __init__(self, sender: MailSender, deleter: DeleteEmailUseCase) -> None:
        self.sender = sender
        self.deleter = deleter

    def run(self, credentials: MailCredentials, recipient: str, uid: int, original: ForwardedEmail) -> None:
        self.sender.forward(credentials, recipient, original)

        try:
            self.deleter.run(credentials, uid)
        except MailRelayError as e:
            logger.error(f"Forwarded UID {uid} to {recipient} but delete failed: {e}")
            raise PartialForwardError(f"UID {uid} forwarded to {recipient} but not deleted") from e

        logger.info(f"Forwarded UID {uid} to {recipient} and deleted the original")
