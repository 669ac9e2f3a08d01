"""Data models for resources delivered by the remote content API."""

from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, ConfigDict, Field


class ResourceType(str, Enum):
    """Kinds of items a sync response can carry."""

    ASSET = "Asset"
    ENTRY = "Entry"
    DELETED_ASSET = "DeletedAsset"
    DELETED_ENTRY = "DeletedEntry"

    @classmethod
    def from_link_type(cls, link_type: str) -> "ResourceType":
        """Resolve the target kind of a link object.

        Link types are matched case-insensitively against the asset and entry
        tags only.

        Raises:
            ValueError: If the link type names neither an asset nor an entry
        """
        for member in (cls.ASSET, cls.ENTRY):
            if member.value.lower() == link_type.lower():
                return member
        raise ValueError(f"Unknown link type: {link_type!r}")


class Resource(BaseModel):
    """Common part of assets and entries.

    ``raw_fields`` keeps the payload's storage untouched: a mapping from field
    id to a mapping from locale code to value.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    type: ResourceType
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    locale: Optional[str] = None
    raw_fields: Dict[str, Any] = Field(default_factory=dict, alias="fields")

    @classmethod
    def _sys_values(cls, item: Dict[str, Any]) -> Dict[str, Any]:
        sys = item.get("sys") or {}
        return {
            "id": sys["id"],
            "type": sys["type"],
            "created_at": sys.get("createdAt"),
            "updated_at": sys.get("updatedAt"),
            "locale": sys.get("locale"),
            "raw_fields": item.get("fields") or {},
        }

    def raw_value(self, field_id: str, locale: str) -> Any:
        """Return the value stored for ``field_id`` in ``locale``, if any."""
        localized = self.raw_fields.get(field_id)
        if not isinstance(localized, dict):
            return None
        return localized.get(locale)


class Asset(Resource):
    """Binary attachment with metadata."""

    @classmethod
    def from_payload(cls, item: Dict[str, Any]) -> "Asset":
        """Build an asset from a raw sync item."""
        return cls.model_validate(cls._sys_values(item))

    def file(self, locale: str) -> Optional[Dict[str, Any]]:
        """Return the file metadata map (url, contentType, details...)."""
        return self.raw_value("file", locale)

    def title(self, locale: str) -> Optional[str]:
        return self.raw_value("title", locale)

    def description(self, locale: str) -> Optional[str]:
        return self.raw_value("description", locale)

    def url(self, locale: str) -> Optional[str]:
        file = self.file(locale)
        return file.get("url") if file else None

    def mime_type(self, locale: str) -> Optional[str]:
        file = self.file(locale)
        return file.get("contentType") if file else None


class Entry(Resource):
    """Structured content item of a given content type."""

    content_type_id: Optional[str] = None

    @classmethod
    def from_payload(cls, item: Dict[str, Any]) -> "Entry":
        """Build an entry from a raw sync item."""
        values = cls._sys_values(item)
        content_type = (item.get("sys") or {}).get("contentType") or {}
        values["content_type_id"] = (content_type.get("sys") or {}).get("id")
        return cls.model_validate(values)


class SynchronizedSpace(BaseModel):
    """One page of changes plus the continuation URL for the next cycle."""

    assets: List[Asset] = Field(default_factory=list)
    entries: List[Entry] = Field(default_factory=list)
    deleted_assets: List[str] = Field(default_factory=list)
    deleted_entries: List[str] = Field(default_factory=list)
    next_sync_url: str

    @classmethod
    def from_items(
        cls, items: List[Dict[str, Any]], next_sync_url: str
    ) -> "SynchronizedSpace":
        """Sort raw sync items by resource type.

        A resource appearing more than once keeps its last version.
        """
        assets: Dict[str, Asset] = {}
        entries: Dict[str, Entry] = {}
        deleted_assets: List[str] = []
        deleted_entries: List[str] = []

        for item in items:
            sys = item.get("sys") or {}
            resource_type = ResourceType(sys.get("type"))
            if resource_type == ResourceType.ASSET:
                asset = Asset.from_payload(item)
                assets[asset.id] = asset
            elif resource_type == ResourceType.ENTRY:
                entry = Entry.from_payload(item)
                entries[entry.id] = entry
            elif resource_type == ResourceType.DELETED_ASSET:
                deleted_assets.append(sys["id"])
            elif resource_type == ResourceType.DELETED_ENTRY:
                deleted_entries.append(sys["id"])

        return cls(
            assets=list(assets.values()),
            entries=list(entries.values()),
            deleted_assets=deleted_assets,
            deleted_entries=deleted_entries,
            next_sync_url=next_sync_url,
        )

    @property
    def sync_token(self) -> Optional[str]:
        """Continuation token carried by the ``sync_token`` query parameter."""
        values = parse_qs(urlparse(self.next_sync_url).query).get("sync_token")
        return values[0] if values else None
