"""Database package for the local content store.

Contains the pure database layer: fixed table models, the content type
registry and the service owning engine and sessions. Sync logic lives in
core/.
"""

from .models import AssetRecord, Base, EntryType, Link, SyncInfo
from .registry import ContentTypeModel, FieldDescriptor, ModelRegistry
from .service import DatabaseService, delete_where, upsert_replace

__all__ = [
    # Models
    "Base",
    "AssetRecord",
    "EntryType",
    "Link",
    "SyncInfo",
    # Registry
    "ContentTypeModel",
    "FieldDescriptor",
    "ModelRegistry",
    # Database service
    "DatabaseService",
    "delete_where",
    "upsert_replace",
]
