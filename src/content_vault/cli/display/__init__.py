"""CLI display and formatting utilities."""

from .formatters import display_links, display_status, display_sync_result

__all__ = [
    "display_links",
    "display_status",
    "display_sync_result",
]
