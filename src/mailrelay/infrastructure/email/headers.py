"""Regex based header helpers.

Mail clients send ``From`` and ``Subject`` in a loose, informal grammar, so
these helpers match patterns instead of parsing RFC 5322 strictly. Callers
only depend on the three functions below; a real MIME header grammar can be
swapped in behind them.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Optional

ENCODED_WORD_RE = re.compile(r"=\?([^?]+)\?([BQ])\?([^?]+)\?=", re.IGNORECASE)
_Q_ESCAPE_RE = re.compile(r"=([0-9A-F]{2})", re.IGNORECASE)
_Q_BAD_ESCAPE_RE = re.compile(r"=(?![0-9A-F]{2})", re.IGNORECASE)

_ANGLE_ADDR_RE = re.compile(r"<(.+?)>")
_BARE_ADDR_RE = re.compile(r"([^\s<>]+@[^\s<>]+)")
_LEADING_NAME_RE = re.compile(r'^\s*"?([^"<]+?)"?\s*<')
_LOCAL_PART_RE = re.compile(r"([^@<\s]+)@")


def _decode_b(payload: str) -> str:
    return base64.b64decode(payload, validate=True).decode("utf-8")


def _decode_q(payload: str) -> str:
    # Each =XX becomes one character; multi-byte UTF-8 sequences are not reassembled.
    text = payload.replace("_", " ")
    if _Q_BAD_ESCAPE_RE.search(text):
        raise ValueError(f"malformed Q escape in {payload!r}")
    return _Q_ESCAPE_RE.sub(lambda m: chr(int(m.group(1), 16)), text)


def _decode_encoded_word(match: re.Match) -> str:
    _charset, encoding, payload = match.groups()
    try:
        if encoding.lower() == "b":
            return _decode_b(payload)
        return _decode_q(payload)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return match.group(0)


def decode_header(value: Optional[str]) -> str:
    """Replace every ``=?charset?B|Q?text?=`` segment with its decoded text.

    Segments that fail to decode are left exactly as they were; the rest of
    the header is still decoded.
    """
    if not value:
        return ""
    return ENCODED_WORD_RE.sub(_decode_encoded_word, value)


def extract_email(value: str) -> str:
    """Bare address from a From-style value: ``"Name" <a@b.com>`` -> ``a@b.com``.

    Returns the input unchanged when nothing address-like is found.
    """
    match = _ANGLE_ADDR_RE.search(value) or _BARE_ADDR_RE.search(value)
    return match.group(1) if match else value


def extract_name(value: str) -> str:
    """Display name for a sender.

    ``"Jane Doe" <jane@x.com>`` -> ``Jane Doe``; without a name the local part
    of the address is used (``jane@x.com`` -> ``jane``).
    """
    match = _LEADING_NAME_RE.search(value)
    if match and match.group(1).strip():
        return match.group(1).strip()
    match = _LOCAL_PART_RE.search(value)
    if match:
        return match.group(1)
    return value
