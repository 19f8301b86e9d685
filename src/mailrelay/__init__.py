"""Mail relay: browse a mailbox over IMAP and forward messages on request."""

__version__ = "0.1.0"
