"""Application settings using Pydantic Settings for configuration management."""

from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from mailrelay.domain.entities.mail_credentials import MailCredentials
from mailrelay.domain.errors import ConfigurationError
from mailrelay.infrastructure.email.providers.imap.auth import ImapConfig
from mailrelay.infrastructure.email.providers.smtp.forwarder import SmtpConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Application
    app_name: str = "Mail Relay"
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=3000, validation_alias=AliasChoices("api_port", "port"))

    # Mailbox account (shared by IMAP and SMTP)
    mail_account: str | None = Field(default=None, validation_alias=AliasChoices("mail_account", "test_email"))
    mail_password: SecretStr | None = Field(
        default=None, validation_alias=AliasChoices("mail_password", "test_password")
    )

    # IMAP
    imap_host: str = "imap.naver.com"
    imap_port: int = 993
    imap_folder: str = "INBOX"
    imap_timeout: float | None = None

    # SMTP
    smtp_host: str = "smtp.naver.com"
    smtp_port: int = 465
    smtp_timeout: float = 10.0
    forward_subject_prefix: str = "[Fwd]"

    # Fetch
    default_fetch_limit: int = Field(default=10, ge=1)

    def mail_credentials(self) -> MailCredentials:
        """Credentials for the relayed mailbox; raises before any network attempt if unset."""
        password = self.mail_password.get_secret_value() if self.mail_password else ""
        if not self.mail_account or not password:
            raise ConfigurationError("Set MAIL_ACCOUNT and MAIL_PASSWORD in the environment")
        return MailCredentials(account=self.mail_account, password=password)

    def imap_config(self) -> ImapConfig:
        return ImapConfig(
            host=self.imap_host,
            port=self.imap_port,
            folder=self.imap_folder,
            timeout=self.imap_timeout,
        )

    def smtp_config(self) -> SmtpConfig:
        return SmtpConfig(
            host=self.smtp_host,
            port=self.smtp_port,
            timeout=self.smtp_timeout,
            subject_prefix=self.forward_subject_prefix,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
