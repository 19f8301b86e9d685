from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

BODY_EXCERPT_LIMIT = 500
NO_CONTENT_PLACEHOLDER = "(no content)"


@dataclass(frozen=True)
class EmailSummary:
    sequence_number: int  # position at fetch time, only meaningful for ordering
    uid: Optional[int]
    from_display: str
    from_address: str
    from_name: str
    subject: str
    date: str  # raw Date header, formatted by the browser
    body: str
