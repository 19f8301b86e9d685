from mailrelay.application.use_cases.delete_email import DeleteEmailUseCase
from mailrelay.application.use_cases.fetch_emails import FetchEmailsUseCase, fetch_window
from mailrelay.application.use_cases.forward_email import ForwardEmailUseCase

__all__ = [
    "DeleteEmailUseCase",
    "FetchEmailsUseCase",
    "ForwardEmailUseCase",
    "fetch_window",
]
