"""Writes fetched assets and entries into the local store."""

import logging
from typing import Any, Dict, Optional, Sequence

from sqlalchemy.orm import Session

from ...database.models import (
    CREATED_AT,
    REMOTE_ID,
    UPDATED_AT,
    AssetRecord,
    EntryType,
)
from ...database.registry import FieldDescriptor, ModelRegistry
from ...database.service import upsert_replace
from ...models import Asset, Entry, Resource
from .field_codec import EncodingError, encode_blob, encode_boolean, encode_scalar
from .link_tracker import LinkTracker

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"
DEFAULT_URL_SCHEME = "http"


def canonicalize_url(
    url: Optional[str], scheme: str = DEFAULT_URL_SCHEME
) -> Optional[str]:
    """Give protocol-relative URLs (``//host/path``) an explicit scheme."""
    if url and url.startswith("//"):
        return f"{scheme}:{url}"
    return url


class ResourceWriter:
    """Stages row and link writes for single resources.

    Rows are written with upsert-replace: the last writer wins and no
    individual columns are merged.
    """

    def __init__(
        self,
        session: Session,
        registry: ModelRegistry,
        link_tracker: LinkTracker,
        locale: Optional[str] = None,
    ) -> None:
        """Initialize resource writer.

        Args:
            session: Session of the running sync transaction
            registry: Content type registry resolving table names
            link_tracker: Link tracker bound to the same session
            locale: Locale to extract field values in. Falls back to each
                resource's own locale, then to DEFAULT_LOCALE.
        """
        self.session = session
        self.registry = registry
        self.link_tracker = link_tracker
        self.locale = locale

    def active_locale(self, resource: Resource) -> str:
        return self.locale or resource.locale or DEFAULT_LOCALE

    @staticmethod
    def _resource_fields(resource: Resource) -> Dict[str, Any]:
        return {
            REMOTE_ID: resource.id,
            CREATED_AT: resource.created_at,
            UPDATED_AT: resource.updated_at,
        }

    def write_asset(self, asset: Asset) -> None:
        """Write or overwrite an asset row.

        Raises:
            EncodingError: If the file map cannot be encoded
        """
        locale = self.active_locale(asset)
        values = self._resource_fields(asset)
        values["url"] = canonicalize_url(asset.url(locale))
        values["mime_type"] = asset.mime_type(locale)
        values["title"] = asset.title(locale)
        values["description"] = asset.description(locale)

        file_map = asset.file(locale)
        blob = None
        if file_map is not None:
            try:
                blob = encode_blob(file_map)
            except EncodingError as e:
                raise EncodingError(
                    f"Failed converting field map for asset with id '{asset.id}'."
                ) from e
        values["file"] = blob

        upsert_replace(
            self.session, AssetRecord.__table__, values  # type: ignore[arg-type]
        )
        logger.debug("Wrote asset %s", asset.id)

    def write_entry(
        self, entry: Entry, table_name: str, fields: Sequence[FieldDescriptor]
    ) -> None:
        """Write or overwrite an entry row, its links and its type index row.

        Args:
            entry: Fetched entry
            table_name: Table of the entry's content type
            fields: Field descriptors of the entry's content type

        Raises:
            EncodingError: If a BLOB field cannot be encoded
            ValueError: If a link carries an unknown link type
        """
        locale = self.active_locale(entry)
        values = self._resource_fields(entry)

        for field in fields:
            value = entry.raw_value(field.id, locale)
            if field.is_link:
                self.link_tracker.update_link_field(entry.id, field.id, value)
            elif field.is_array:
                self._process_array(entry, values, field, value)
            elif field.sql_type == "BLOB":
                values[field.name] = self._encode_field(entry, field, value)
            elif field.sql_type == "BOOL":
                values[field.name] = encode_boolean(value)
            else:
                values[field.name] = encode_scalar(value)

        table = self.registry.get_table(table_name)
        upsert_replace(self.session, table, values)

        upsert_replace(
            self.session,
            EntryType.__table__,  # type: ignore[arg-type]
            {REMOTE_ID: entry.id, "type_id": entry.content_type_id},
        )
        logger.debug("Wrote entry %s into %s", entry.id, table_name)

    def _process_array(
        self,
        entry: Entry,
        values: Dict[str, Any],
        field: FieldDescriptor,
        value: Any,
    ) -> None:
        if not field.is_array_of_links:
            values[field.name] = self._encode_field(entry, field, value or [])
            return

        self.link_tracker.clear_field(entry.id, field.id)
        for link in value or []:
            self.link_tracker.add_link(entry.id, field.id, link)

    @staticmethod
    def _encode_field(
        entry: Entry, field: FieldDescriptor, value: Any
    ) -> Optional[bytes]:
        if value is None:
            return None
        try:
            return encode_blob(value)
        except EncodingError as e:
            raise EncodingError(
                f"Failed converting value to BLOB for entry id {entry.id} "
                f"field {field.name}."
            ) from e
