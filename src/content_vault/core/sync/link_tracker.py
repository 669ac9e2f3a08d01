"""Maintenance of the link edge table.

Edges are ``(parent, field, child, is_asset)`` rows. The edge set of a
``(parent, field)`` pair always mirrors the last written value of that field.
"""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...database.models import Link
from ...database.service import delete_where, upsert_replace
from ...models import ResourceType

logger = logging.getLogger(__name__)

LINKS_TABLE = Link.__table__


class LinkTracker:
    """Stages link edge writes on a session owned by the caller."""

    def __init__(self, session: Session) -> None:
        """Initialize link tracker.

        Args:
            session: Session of the running sync transaction
        """
        self.session = session

    def replace_link(
        self, parent_id: str, field_id: str, link_type: str, target_id: str
    ) -> None:
        """Upsert one edge.

        Raises:
            ValueError: If link_type names neither an asset nor an entry
        """
        is_asset = ResourceType.from_link_type(link_type) == ResourceType.ASSET
        upsert_replace(
            self.session,
            LINKS_TABLE,  # type: ignore[arg-type]
            {
                "parent": parent_id,
                "field": field_id,
                "child": target_id,
                "is_asset": is_asset,
            },
        )

    def clear_field(self, parent_id: str, field_id: str) -> int:
        """Delete all edges of ``(parent_id, field_id)``."""
        return delete_where(
            self.session,
            LINKS_TABLE,  # type: ignore[arg-type]
            Link.parent == parent_id,
            Link.field == field_id,
        )

    def add_link(
        self, parent_id: str, field_id: str, raw_link: Optional[Mapping[str, Any]]
    ) -> bool:
        """Add the edge described by a raw link object.

        Link objects look like ``{"sys": {"type": "Link", "linkType": "Entry",
        "id": "..."}}``. Objects missing the link type or target id are
        ignored.

        Returns:
            True if an edge was written
        """
        if not isinstance(raw_link, Mapping):
            return False
        link_info = raw_link.get("sys")
        if not isinstance(link_info, Mapping):
            return False

        link_type = link_info.get("linkType")
        target_id = link_info.get("id")
        if link_type is None or target_id is None:
            logger.debug("Ignoring incomplete link on %s.%s", parent_id, field_id)
            return False

        self.replace_link(parent_id, field_id, link_type, target_id)
        return True

    def update_link_field(
        self, parent_id: str, field_id: str, raw_link: Optional[Mapping[str, Any]]
    ) -> None:
        """Apply the value of a single-link field.

        A present link replaces the existing edge of the field, None clears it.
        """
        self.clear_field(parent_id, field_id)
        if raw_link is not None:
            self.add_link(parent_id, field_id, raw_link)

    def delete_node(self, resource_id: str) -> int:
        """Delete every edge where ``resource_id`` is parent or child."""
        return delete_where(
            self.session,
            LINKS_TABLE,  # type: ignore[arg-type]
            or_(Link.parent == resource_id, Link.child == resource_id),
        )
