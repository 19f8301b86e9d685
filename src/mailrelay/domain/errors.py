"""Error taxonomy shared by the mailbox and mail transport adapters."""


class MailRelayError(Exception):
    """Base class for every failure surfaced to request handlers."""


class ConfigurationError(MailRelayError):
    """Required settings (mailbox credentials) are missing."""


class MailConnectionError(MailRelayError):
    """Mail server unreachable: DNS failure, refused connection, timeout or TLS error."""


class AuthenticationError(MailRelayError):
    """Mail server rejected the configured credentials."""


class ProtocolError(MailRelayError):
    """Any other IMAP/SMTP failure (folder select, fetch, store, recipient refused)."""


class PartialForwardError(MailRelayError):
    """The forward was sent but the original could not be deleted."""
