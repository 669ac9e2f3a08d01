"""Sync orchestrator owning one delta-sync cycle.

A cycle reads the stored continuation token, decides between a full and a
delta fetch, and applies the fetched changes in a single transaction:
deletions first (assets, then entries), then upserts (assets, then entries),
then the new token. Any failure rolls the whole cycle back. The outcome is
always reported through the SyncNotifier.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...database.service import DatabaseService
from ...models import Resource, ResourceType, SynchronizedSpace
from .deletion_processor import DeletionProcessor
from .link_tracker import LinkTracker
from .notifier import SyncNotifier
from .resource_writer import ResourceWriter

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a write or the transaction itself fails."""

    pass


class SyncFailure(Exception):
    """Failed sync cycle, wrapping the error that caused it."""

    def __init__(self, cause: BaseException) -> None:
        """Initialize failure.

        Args:
            cause: FetchError, EncodingError, StorageError or any other error
                raised while running the cycle
        """
        super().__init__(f"Sync failed: {cause}")
        self.cause = cause
        self.__cause__ = cause


class SpaceFetcher(Protocol):
    """Remote side of a sync: full fetch or delta since a token."""

    def fetch_full_space(self) -> SynchronizedSpace: ...

    def fetch_delta(self, token: str) -> SynchronizedSpace: ...


@dataclass
class SyncConfig:
    """Options for one sync cycle.

    Attributes:
        fetcher: Client delivering the remote changes
        locale: Locale to store field values in (None = resource default)
        invalidate: Discard all local content and run a full sync
    """

    fetcher: SpaceFetcher
    locale: Optional[str] = None
    invalidate: bool = False


@dataclass
class SyncResult:
    """Outcome of a sync cycle."""

    tag: Optional[str] = None
    error: Optional[SyncFailure] = None
    full_sync: bool = False
    invalidated: bool = False
    token: Optional[str] = None
    assets_written: int = 0
    entries_written: int = 0
    entries_skipped: int = 0
    assets_deleted: int = 0
    entries_deleted: int = 0

    @property
    def success(self) -> bool:
        return self.error is None

    def discard_changes(self) -> None:
        """Forget the token and counts of a cycle that was rolled back."""
        self.token = None
        self.assets_written = 0
        self.entries_written = 0
        self.entries_skipped = 0
        self.assets_deleted = 0
        self.entries_deleted = 0

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of the sync cycle."""
        summary: Dict[str, Any] = {
            "success": self.success,
            "mode": "full" if self.full_sync else "delta",
            "invalidated": self.invalidated,
        }
        if self.error is not None:
            summary["error"] = str(self.error.cause)
            return summary

        summary["assets"] = {
            "written": self.assets_written,
            "deleted": self.assets_deleted,
        }
        summary["entries"] = {
            "written": self.entries_written,
            "deleted": self.entries_deleted,
            "skipped": self.entries_skipped,
        }
        return summary


class SyncOrchestrator:
    """Runs sync cycles against one local store.

    Callers must not run two cycles against the same store at once; see
    Vault for a serialized entry point.
    """

    def __init__(
        self, db_service: DatabaseService, notifier: Optional[SyncNotifier] = None
    ) -> None:
        """Initialize sync orchestrator.

        Args:
            db_service: Database service of the local store
            notifier: Receives the result of every cycle
        """
        self.db_service = db_service
        self.registry = db_service.registry
        self.notifier = notifier if notifier is not None else SyncNotifier()

    def run_sync_cycle(
        self, config: SyncConfig, tag: Optional[str] = None
    ) -> SyncResult:
        """Run one complete sync cycle.

        Args:
            config: Options for this cycle
            tag: Identifies the callback to notify on completion

        Returns:
            SyncResult, failed cycles carry the SyncFailure in ``error``
        """
        result = SyncResult(tag=tag)

        try:
            with self.db_service.get_session() as session:
                self._run(session, config, result)
            logger.info("Sync complete: %s", result.get_summary())
        except Exception as e:
            result.discard_changes()
            result.error = SyncFailure(self._classify_error(e))
            logger.exception("Sync cycle failed: %s", e)

        self.notifier.notify(result)
        return result

    def _run(self, session: Session, config: SyncConfig, result: SyncResult) -> None:
        token = None
        if config.invalidate:
            logger.info("Invalidation requested, discarding local content")
            result.invalidated = True
        else:
            token = self._fetch_sync_token(session)

        if token is not None and not self._check_locale(session, config.locale):
            result.invalidated = True
            token = None

        if token is None:
            logger.info("Fetching full space...")
            result.full_sync = True
            space = config.fetcher.fetch_full_space()
        else:
            logger.info("Fetching changes since last sync...")
            space = config.fetcher.fetch_delta(token)

        # Reading the state left an implicit transaction open
        session.rollback()

        with session.begin():
            if result.invalidated:
                self.db_service.clear_records(session)

            links = LinkTracker(session)
            self._process_deleted(
                space, DeletionProcessor(session, self.registry, links), result
            )
            self._process_resources(
                space,
                ResourceWriter(session, self.registry, links, config.locale),
                result,
            )

            next_token = space.sync_token
            self.db_service.save_sync_info(session, next_token, config.locale)

        result.token = next_token

    def _fetch_sync_token(self, session: Session) -> Optional[str]:
        info = self.db_service.read_sync_info(session)
        return info.token if info else None

    def _check_locale(self, session: Session, locale: Optional[str]) -> bool:
        """Check that stored content was synced in ``locale``.

        Field values are snapshots of a single locale, so a locale change
        invalidates everything stored so far.
        """
        info = self.db_service.read_sync_info(session)
        if info is None or info.locale == locale:
            return True
        logger.info(
            "Locale changed from %s to %s, discarding local content",
            info.locale,
            locale,
        )
        return False

    def _process_deleted(
        self,
        space: SynchronizedSpace,
        processor: DeletionProcessor,
        result: SyncResult,
    ) -> None:
        for remote_id in space.deleted_assets:
            if processor.delete_asset(remote_id):
                result.assets_deleted += 1
        for remote_id in space.deleted_entries:
            if processor.delete_entry(remote_id):
                result.entries_deleted += 1

    def _process_resources(
        self, space: SynchronizedSpace, writer: ResourceWriter, result: SyncResult
    ) -> None:
        for asset in space.assets:
            self._process_resource(asset, writer, result)
        for entry in space.entries:
            self._process_resource(entry, writer, result)

    def _process_resource(
        self, resource: Resource, writer: ResourceWriter, result: SyncResult
    ) -> None:
        if resource.type == ResourceType.ASSET:
            writer.write_asset(resource)  # type: ignore[arg-type]
            result.assets_written += 1
        elif resource.type == ResourceType.ENTRY:
            content_type_id = getattr(resource, "content_type_id", None)
            table_name = self.registry.resolve_table(content_type_id)
            fields = self.registry.resolve_fields(content_type_id)
            if table_name is None or fields is None:
                logger.debug(
                    "Skipping entry %s of unmodeled content type %s",
                    resource.id,
                    content_type_id,
                )
                result.entries_skipped += 1
                return
            writer.write_entry(resource, table_name, fields)  # type: ignore[arg-type]
            result.entries_written += 1

    @staticmethod
    def _classify_error(error: Exception) -> Exception:
        if isinstance(error, SQLAlchemyError):
            storage_error = StorageError(str(error))
            storage_error.__cause__ = error
            return storage_error
        return error
