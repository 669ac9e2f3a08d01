"""Content Vault.

Incrementally synchronizes a remote content space (assets, entries and the
links between them) into a local SQLite store using continuation tokens.
"""

__version__ = "1.0.0"

from .config import Config
from .core.sync import SyncConfig, SyncFailure, SyncOrchestrator, SyncResult
from .vault import SyncInProgressError, Vault

__all__ = [
    "Config",
    "SyncConfig",
    "SyncFailure",
    "SyncInProgressError",
    "SyncOrchestrator",
    "SyncResult",
    "Vault",
]
