from __future__ import annotations

from mailrelay.application.ports.mailbox import RawFetchedMessage
from mailrelay.domain import BODY_EXCERPT_LIMIT, NO_CONTENT_PLACEHOLDER
from mailrelay.infrastructure.email.providers.imap.mapper import (
    body_excerpt,
    parse_header_block,
    to_email_summary,
)
from tests.helpers import make_header_block


def test_parse_header_block_lowercases_keys_and_trims_values() -> None:
    headers = parse_header_block("FROM:   Jane <jane@example.test>  \r\nSubject: Hi\r\nX-Odd: a: b\r\n\r\n")

    assert headers == {"from": "Jane <jane@example.test>", "subject": "Hi", "x-odd": "a: b"}


def test_parse_header_block_skips_lines_without_a_key() -> None:
    headers = parse_header_block(": no key\r\nnot a header\r\nDate: Tue, 1 Jan 2030 00:00:00 +0000\r\n")

    assert headers == {"date": "Tue, 1 Jan 2030 00:00:00 +0000"}


def test_parse_header_block_unfolds_continuation_lines() -> None:
    block = "Subject: =?UTF-8?Q?first?=\r\n =?UTF-8?Q?second?=\r\nDate: x\r\n"

    assert parse_header_block(block)["subject"] == "=?UTF-8?Q?first?= =?UTF-8?Q?second?="


def test_body_excerpt_prefers_plain_text() -> None:
    header = make_header_block(content_type='multipart/alternative; boundary="XX"')
    text = (
        b"--XX\r\nContent-Type: text/html; charset=utf-8\r\n\r\n<p>html version</p>\r\n"
        b"--XX\r\nContent-Type: text/plain; charset=utf-8\r\n\r\nplain version\r\n"
        b"--XX--\r\n"
    )

    assert body_excerpt(header, text) == "plain version"


def test_body_excerpt_falls_back_to_html() -> None:
    header = make_header_block(content_type="text/html; charset=utf-8")

    assert body_excerpt(header, b"<p>Only HTML</p>\r\n") == "<p>Only HTML</p>"


def test_body_excerpt_decodes_transfer_encoding() -> None:
    header = make_header_block(extra=("Content-Transfer-Encoding: base64",))

    assert body_excerpt(header, b"7JWI64WV7ZWY7IS47JqU\r\n") == "안녕하세요"


def test_body_excerpt_placeholder_when_no_text_part() -> None:
    header = make_header_block(content_type='multipart/mixed; boundary="XX"')
    text = b"--XX\r\nContent-Type: application/pdf\r\n\r\nJVBERi0=\r\n--XX--\r\n"

    assert body_excerpt(header, text) == NO_CONTENT_PLACEHOLDER


def test_body_excerpt_placeholder_for_blank_body() -> None:
    assert body_excerpt(make_header_block(), b"   \r\n") == NO_CONTENT_PLACEHOLDER


def test_body_excerpt_truncates_to_limit() -> None:
    body = body_excerpt(make_header_block(), b"x" * 1200)

    assert len(body) == BODY_EXCERPT_LIMIT == 500


def test_body_excerpt_parse_failure_uses_raw_text_truncated() -> None:
    header = make_header_block(content_type="text/plain; charset=x-no-such-charset")
    raw = b"raw-" + b"y" * 800

    body = body_excerpt(header, raw)

    assert body == raw.decode("ascii")[:500]
    assert len(body) == 500


def test_body_excerpt_without_header_block_reads_text_as_plain() -> None:
    assert body_excerpt(b"", b"Subject-looking: line") == "Subject-looking: line"


def test_to_email_summary_decodes_headers() -> None:
    header = make_header_block(
        sender='"=?UTF-8?B?7ZmN6ri464+Z?=" <gildong@example.test>',
        subject="=?UTF-8?Q?Meeting_notes?=",
        date="Tue, 17 Feb 2026 09:30:00 +0900",
    )
    raw = RawFetchedMessage(sequence_number=7, uid=4242, header_block=header, text=b"Agenda attached.\r\n")

    summary = to_email_summary(raw)

    assert summary.sequence_number == 7
    assert summary.uid == 4242
    assert summary.from_display == '"홍길동" <gildong@example.test>'
    assert summary.from_address == "gildong@example.test"
    assert summary.from_name == "홍길동"
    assert summary.subject == "Meeting notes"
    assert summary.date == "Tue, 17 Feb 2026 09:30:00 +0900"
    assert summary.body == "Agenda attached."


def test_to_email_summary_tolerates_missing_headers() -> None:
    raw = RawFetchedMessage(sequence_number=1, uid=None, header_block=b"", text=b"")

    summary = to_email_summary(raw)

    assert summary.from_display == ""
    assert summary.from_address == ""
    assert summary.from_name == ""
    assert summary.subject == ""
    assert summary.date == ""
    assert summary.body == NO_CONTENT_PLACEHOLDER
