from __future__ import annotations
from email import policy
from email.message import EmailMessage as MimeMessage
from email.parser import BytesParser
from typing import Optional

from loguru import logger

from mailrelay.application.ports.mailbox import RawFetchedMessage
from mailrelay.domain.entities.email_summary import (
    BODY_EXCERPT_LIMIT,
    NO_CONTENT_PLACEHOLDER,
    EmailSummary,
)
from mailrelay.infrastructure.email.headers import decode_header, extract_email, extract_name


def parse_header_block(block: str) -> dict[str, str]:
    """Split a header block into ``{lower-cased name: trimmed value}``.

    Folded continuation lines are joined onto the header they belong to.
    Later duplicates win.
    """
    lines: list[str] = []
    for line in block.splitlines():
        if line[:1] in (" ", "\t") and lines:
            lines[-1] += " " + line.strip()
        else:
            lines.append(line)

    headers: dict[str, str] = {}
    for line in lines:
        colon = line.find(":")
        if colon > 0:
            headers[line[:colon].strip().lower()] = line[colon + 1:].strip()
    return headers


def _as_text(msg: MimeMessage) -> Optional[str]:
    # Prefer text/plain; fall back to raw HTML
    part = msg.get_body(preferencelist=("plain",))
    if part is None:
        part = msg.get_body(preferencelist=("html",))
    if part is None:
        return None
    return part.get_content()


def body_excerpt(header_block: bytes, text: bytes) -> str:
    """Readable body text, at most ``BODY_EXCERPT_LIMIT`` characters.

    Falls back to the undecoded text buffer when the MIME structure cannot be
    parsed (unknown charset, broken transfer encoding, ...).
    """
    try:
        head = header_block.rstrip(b"\r\n") + b"\r\n\r\n" if header_block.strip() else b"\r\n"
        em = BytesParser(policy=policy.default).parsebytes(head + text)
        body = (_as_text(em) or "").strip() or NO_CONTENT_PLACEHOLDER
    except Exception as e:
        logger.debug(f"Structured body parse failed, using raw text: {e}")
        body = text.decode("utf-8", errors="replace")
    return body[:BODY_EXCERPT_LIMIT]


def to_email_summary(raw: RawFetchedMessage) -> EmailSummary:
    headers = parse_header_block(raw.header_block.decode("utf-8", errors="replace"))

    raw_from = headers.get("from", "")
    from_display = decode_header(raw_from)

    return EmailSummary(
        sequence_number=raw.sequence_number,
        uid=raw.uid,
        from_display=from_display,
        from_address=extract_email(raw_from),
        from_name=extract_name(from_display) if from_display else "",
        subject=decode_header(headers.get("subject")),
        date=headers.get("date", ""),
        body=body_excerpt(raw.header_block, raw.text),
    )
