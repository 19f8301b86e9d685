"""Domain entities and errors."""

from mailrelay.domain.entities.email_summary import (
    BODY_EXCERPT_LIMIT,
    NO_CONTENT_PLACEHOLDER,
    EmailSummary,
)
from mailrelay.domain.entities.mail_credentials import ForwardedEmail, MailCredentials
from mailrelay.domain.errors import (
    AuthenticationError,
    ConfigurationError,
    MailConnectionError,
    MailRelayError,
    PartialForwardError,
    ProtocolError,
)

__all__ = [
    "BODY_EXCERPT_LIMIT",
    "NO_CONTENT_PLACEHOLDER",
    "EmailSummary",
    "ForwardedEmail",
    "MailCredentials",
    # Errors
    "MailRelayError",
    "ConfigurationError",
    "MailConnectionError",
    "AuthenticationError",
    "ProtocolError",
    "PartialForwardError",
]
