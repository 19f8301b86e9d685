from __future__ import annotations
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Optional, Protocol

from mailrelay.domain.entities.mail_credentials import ForwardedEmail, MailCredentials


@dataclass(frozen=True)
class RawFetchedMessage:
    # One message from a sequence-range fetch, before header/body decoding
    sequence_number: int
    uid: Optional[int]
    header_block: bytes
    text: bytes


class MailboxSession:
    """An open, selected mailbox. Lives for a single operation."""

    readonly: bool

    def message_count(self) -> int:
        raise NotImplementedError

    def fetch_range(self, start: int, end: int) -> list[RawFetchedMessage]:
        raise NotImplementedError

    def delete(self, uid: int) -> None:
        raise NotImplementedError


class Mailbox:
    def open(self, credentials: MailCredentials, *, readonly: bool) -> AbstractContextManager[MailboxSession]:
        raise NotImplementedError


class MailSender(Protocol):
    def forward(self, credentials: MailCredentials, recipient: str, original: ForwardedEmail) -> None: ...
