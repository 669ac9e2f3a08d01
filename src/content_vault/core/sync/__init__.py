"""Synchronization module.

Handles the delta-sync cycle: field encoding, link maintenance, resource
writes, deletion propagation, orchestration and completion notification.
"""

from .deletion_processor import DeletionProcessor
from .field_codec import (
    EncodingError,
    decode_blob,
    encode_blob,
    encode_boolean,
    encode_scalar,
)
from .link_tracker import LinkTracker
from .notifier import SyncNotifier, SyncObserver
from .orchestrator import (
    SpaceFetcher,
    StorageError,
    SyncConfig,
    SyncFailure,
    SyncOrchestrator,
    SyncResult,
)
from .resource_writer import ResourceWriter, canonicalize_url

__all__ = [
    # Field codec
    "EncodingError",
    "decode_blob",
    "encode_blob",
    "encode_boolean",
    "encode_scalar",
    # Store writes
    "DeletionProcessor",
    "LinkTracker",
    "ResourceWriter",
    "canonicalize_url",
    # Orchestration
    "SpaceFetcher",
    "StorageError",
    "SyncConfig",
    "SyncFailure",
    "SyncOrchestrator",
    "SyncResult",
    # Notification
    "SyncNotifier",
    "SyncObserver",
]
