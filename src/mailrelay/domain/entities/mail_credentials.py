from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MailCredentials:
    """
    Credentials for the single relayed mailbox. Used for both IMAP and SMTP.
    """
    account: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ForwardedEmail:
    """Original message fields as resubmitted by the browser."""
    sender: str
    subject: str
    date: str
    body: str
