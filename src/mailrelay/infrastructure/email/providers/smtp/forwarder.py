"""SMTP forwarder for relaying a fetched message to a visitor-supplied address."""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from loguru import logger

from mailrelay.domain.entities.mail_credentials import ForwardedEmail, MailCredentials
from mailrelay.domain.errors import AuthenticationError, MailConnectionError, ProtocolError

DEFAULT_SMTP_HOST = "smtp.naver.com"
DEFAULT_SMTP_PORT = 465
DEFAULT_FORWARD_PREFIX = "[Fwd]"

RULE = "━" * 34

FORWARD_TEMPLATE = """
{rule}
📧 Forwarded message
{rule}

From: {sender}
Subject: {subject}
Date: {date}

{rule}
Message:
{rule}

{body}

{rule}
This message was forwarded automatically.
{rule}
"""


@dataclass(frozen=True)
class SmtpConfig:
    host: str = DEFAULT_SMTP_HOST
    port: int = DEFAULT_SMTP_PORT
    timeout: float = 10.0
    subject_prefix: str = DEFAULT_FORWARD_PREFIX


def compose_forward(sender: str, recipient: str, original: ForwardedEmail, prefix: str = DEFAULT_FORWARD_PREFIX) -> EmailMessage:
    """Build the plain-text forward. The original body is embedded verbatim."""
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = recipient
    # Header values may not carry line breaks
    subject = original.subject.replace("\r", " ").replace("\n", " ")
    msg["Subject"] = f"{prefix} {subject}"
    msg.set_content(
        FORWARD_TEMPLATE.format(
            rule=RULE,
            sender=original.sender,
            subject=original.subject,
            date=original.date,
            body=original.body,
        )
    )
    return msg


class SmtpForwarder:
    """Sends forwards over implicit-TLS SMTP, one connection per message."""

    def __init__(self, cfg: SmtpConfig) -> None:
        self.cfg = cfg

    def forward(self, credentials: MailCredentials, recipient: str, original: ForwardedEmail) -> None:
        msg = compose_forward(credentials.account, recipient, original, self.cfg.subject_prefix)

        try:
            smtp = smtplib.SMTP_SSL(self.cfg.host, self.cfg.port, timeout=self.cfg.timeout)
            try:
                smtp.login(credentials.account, credentials.password)
                smtp.send_message(msg)
            finally:
                _quit(smtp)
        except smtplib.SMTPAuthenticationError as e:
            raise AuthenticationError(f"SMTP login rejected for {credentials.account}") from e
        except (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as e:
            raise MailConnectionError(f"SMTP connection to {self.cfg.host} failed: {e}") from e
        except smtplib.SMTPException as e:
            raise ProtocolError(f"SMTP send to {recipient} failed: {e}") from e
        except OSError as e:  # DNS, refused, timeout, TLS
            raise MailConnectionError(f"Cannot reach SMTP server {self.cfg.host}:{self.cfg.port}: {e}") from e

        logger.info(f"Forwarded '{original.subject[:50]}' to {recipient}")


def _quit(smtp: smtplib.SMTP) -> None:
    """End the session. Once DATA is accepted the message is sent, so a failed QUIT is only logged."""
    try:
        smtp.quit()
    except (smtplib.SMTPException, OSError) as e:
        logger.debug(f"SMTP quit failed: {e}")
    finally:
        smtp.close()
