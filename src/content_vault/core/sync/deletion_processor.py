"""Propagation of remote deletions into the local store."""

import logging

from sqlalchemy.orm import Session

from ...database.models import REMOTE_ID, AssetRecord, EntryType
from ...database.registry import ModelRegistry
from ...database.service import DatabaseService, delete_where
from .link_tracker import LinkTracker

logger = logging.getLogger(__name__)


class DeletionProcessor:
    """Removes deleted resources together with their edges.

    Deleting a resource that was never stored locally is a no-op.
    """

    def __init__(
        self, session: Session, registry: ModelRegistry, link_tracker: LinkTracker
    ) -> None:
        """Initialize deletion processor.

        Args:
            session: Session of the running sync transaction
            registry: Content type registry resolving table names
            link_tracker: Link tracker bound to the same session
        """
        self.session = session
        self.registry = registry
        self.link_tracker = link_tracker

    def delete_asset(self, remote_id: str) -> bool:
        """Delete an asset row and every edge touching it.

        Returns:
            True if a stored asset row was removed
        """
        removed = delete_where(
            self.session,
            AssetRecord.__table__,  # type: ignore[arg-type]
            AssetRecord.remote_id == remote_id,
        )
        self.link_tracker.delete_node(remote_id)
        if removed:
            logger.debug("Deleted asset %s", remote_id)
        return removed > 0

    def delete_entry(self, remote_id: str) -> bool:
        """Delete an entry row, its edges and its type index row.

        Entries whose type was never indexed, or whose type is no longer
        modeled locally, are left alone.

        Returns:
            True if a stored entry row was removed
        """
        content_type_id = DatabaseService.fetch_entry_type(self.session, remote_id)
        if content_type_id is None:
            return False

        table_name = self.registry.resolve_table(content_type_id)
        if table_name is None:
            return False

        table = self.registry.get_table(table_name)
        removed = delete_where(self.session, table, table.c[REMOTE_ID] == remote_id)
        self.link_tracker.delete_node(remote_id)
        delete_where(
            self.session,
            EntryType.__table__,  # type: ignore[arg-type]
            EntryType.remote_id == remote_id,
        )
        logger.debug("Deleted entry %s from %s", remote_id, table_name)
        return removed > 0
