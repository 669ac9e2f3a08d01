"""CLI command modules."""

from .database import links_command, reset_command, status_command
from .sync import sync_command

__all__ = [
    "links_command",
    "reset_command",
    "status_command",
    "sync_command",
]
