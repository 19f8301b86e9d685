"""
API routes for the mail relay: list the inbox, forward + delete, health,
and the static viewer page.
"""

import re
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from mailrelay.application.ports.mailbox import Mailbox, MailSender
from mailrelay.application.use_cases import DeleteEmailUseCase, FetchEmailsUseCase, ForwardEmailUseCase
from mailrelay.domain import ConfigurationError, EmailSummary, ForwardedEmail, MailCredentials
from mailrelay.infrastructure import Settings, get_settings
from mailrelay.infrastructure.email.providers.imap import ImapMailbox
from mailrelay.infrastructure.email.providers.smtp import SmtpForwarder

router = APIRouter()

STATIC_DIR = Path(__file__).parent / "static"
_RECIPIENT_RE = re.compile(r"[^@\s<>]+@[^@\s<>]+")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


# ============================================================================
# Request/Response Models
# ============================================================================


class EmailView(BaseModel):
    """One fetched message as the browser sees it."""

    model_config = ConfigDict(populate_by_name=True)

    seqno: int
    uid: int | None = None
    from_display: str = Field(alias="from")
    from_email: str = Field(alias="fromEmail")
    from_name: str = Field(alias="fromName")
    subject: str
    date: str
    body: str

    @classmethod
    def from_summary(cls, summary: EmailSummary) -> "EmailView":
        return cls(
            seqno=summary.sequence_number,
            uid=summary.uid,
            from_display=summary.from_display,
            from_email=summary.from_address,
            from_name=summary.from_name,
            subject=summary.subject,
            date=summary.date,
            body=summary.body,
        )


class FetchEmailsResponse(BaseModel):
    success: bool = True
    emails: list[EmailView]
    count: int


class SendEmailRequest(BaseModel):
    """Forward request. The browser resubmits the original fields; nothing is cached server side."""

    model_config = ConfigDict(populate_by_name=True)

    user_email: str | None = Field(None, alias="userEmail")
    uid: int | str | None = None
    email_index: int | str | None = Field(None, alias="emailIndex")
    original_from: str | None = Field(None, alias="originalFrom")
    original_subject: str | None = Field(None, alias="originalSubject")
    original_date: str | None = Field(None, alias="originalDate")
    original_body: str | None = Field(None, alias="originalBody")


class SendEmailResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    environment: str


# ============================================================================
# Dependencies
# ============================================================================


def get_mailbox(settings: Settings = Depends(get_settings)) -> Mailbox:
    return ImapMailbox(settings.imap_config())


def get_mail_sender(settings: Settings = Depends(get_settings)) -> MailSender:
    return SmtpForwarder(settings.smtp_config())


def _require_credentials(settings: Settings) -> MailCredentials:
    try:
        return settings.mail_credentials()
    except ConfigurationError as e:
        logger.error(f"Mailbox credentials missing: {e}")
        raise HTTPException(status_code=400, detail="Mailbox credentials are not configured.")


def _parse_limit(raw: str | None) -> int | None:
    """Leading integer of the query value (``"5abc"`` is 5); None when there is none."""
    match = _LEADING_INT_RE.match(raw or "")
    return int(match.group(1)) if match else None


def _parse_uid(raw: int | str) -> int | None:
    try:
        uid = int(raw)
    except ValueError:
        return None
    return uid if uid > 0 else None


# ============================================================================
# Email Endpoints
# ============================================================================


@router.get("/api/fetch-emails", response_model=FetchEmailsResponse, tags=["emails"])
def fetch_emails(
    limit: str | None = Query(default=None, description="Number of newest messages to fetch"),
    settings: Settings = Depends(get_settings),
    mailbox: Mailbox = Depends(get_mailbox),
) -> FetchEmailsResponse:
    """Newest messages first. Each call opens its own IMAP session."""
    credentials = _require_credentials(settings)
    use_case = FetchEmailsUseCase(mailbox, default_limit=settings.default_fetch_limit)

    try:
        emails = use_case.run(credentials, _parse_limit(limit))
    except Exception as e:
        logger.exception(f"Fetch failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch emails.")

    views = [EmailView.from_summary(e) for e in emails]
    return FetchEmailsResponse(emails=views, count=len(views))


@router.post("/api/send-email", response_model=SendEmailResponse, tags=["emails"])
def send_email(
    request: SendEmailRequest,
    settings: Settings = Depends(get_settings),
    mailbox: Mailbox = Depends(get_mailbox),
    sender: MailSender = Depends(get_mail_sender),
) -> SendEmailResponse:
    """
    Forward the selected message to the visitor, then delete the original.

    Any failure, including a delete failure after a successful forward, is
    reported as a plain 500.
    """
    if not request.user_email or not request.uid or request.email_index is None:
        raise HTTPException(status_code=400, detail="Required fields are missing.")

    uid = _parse_uid(request.uid)
    if uid is None:
        raise HTTPException(status_code=400, detail="Invalid message uid.")

    recipient = request.user_email.strip()
    if not _RECIPIENT_RE.fullmatch(recipient):
        raise HTTPException(status_code=400, detail="Invalid recipient address.")

    credentials = _require_credentials(settings)
    original = ForwardedEmail(
        sender=request.original_from or "",
        subject=request.original_subject or "",
        date=request.original_date or "",
        body=request.original_body or "",
    )
    use_case = ForwardEmailUseCase(sender, DeleteEmailUseCase(mailbox))

    logger.info(f"Forwarding UID {uid} (card #{request.email_index}) to {recipient}")
    try:
        use_case.run(credentials, recipient, uid, original)
    except Exception as e:
        logger.exception(f"Send/delete failed for UID {uid}: {e}")
        raise HTTPException(status_code=500, detail="Processing failed.")

    return SendEmailResponse(message="The email was forwarded and the original deleted.")


# ============================================================================
# Health Endpoint
# ============================================================================


@router.get("/api/health", response_model=HealthResponse, tags=["health"])
def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.environment,
    )


# ============================================================================
# Viewer Page
# ============================================================================


@router.get("/", include_in_schema=False)
def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


@router.get("/app.js", include_in_schema=False)
def app_script() -> FileResponse:
    return FileResponse(STATIC_DIR / "app.js", media_type="application/javascript")
