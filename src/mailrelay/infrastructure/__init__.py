"""Infrastructure layer - mail protocol adapters and configuration."""

from mailrelay.infrastructure.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
