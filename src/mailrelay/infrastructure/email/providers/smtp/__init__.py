"""SMTP transport for outbound forwards."""

from mailrelay.infrastructure.email.providers.smtp.forwarder import (
    SmtpConfig,
    SmtpForwarder,
    compose_forward,
)

__all__ = [
    "SmtpConfig",
    "SmtpForwarder",
    "compose_forward",
]
