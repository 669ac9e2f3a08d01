"""Serialized entry point for syncing one local store.

At most one sync cycle runs against a store at a time. ``request_sync``
queues cycles on a single worker thread, ``sync`` runs one on the calling
thread and refuses to start while another cycle is in flight.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .config import Config
from .core.delivery import DeliveryClient
from .core.sync import (
    SyncConfig,
    SyncNotifier,
    SyncObserver,
    SyncOrchestrator,
    SyncResult,
)
from .database import DatabaseService, ModelRegistry

logger = logging.getLogger(__name__)


class SyncInProgressError(Exception):
    """Raised when a blocking sync is requested while another one runs."""

    pass


class Vault:
    """Owns the store, its notifier and the sync worker."""

    def __init__(
        self, db_service: DatabaseService, notifier: Optional[SyncNotifier] = None
    ) -> None:
        """Initialize vault.

        Args:
            db_service: Database service of the local store
            notifier: Completion notifier, a fresh one if omitted
        """
        self.db_service = db_service
        self.notifier = notifier if notifier is not None else SyncNotifier()
        self.orchestrator = SyncOrchestrator(db_service, self.notifier)
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="content-vault-sync"
        )
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Config) -> "Vault":
        """Build a vault for the store and content types named in ``config``."""
        registry = (
            ModelRegistry.from_file(config.models_file)
            if config.models_file
            else ModelRegistry()
        )
        return cls(DatabaseService(config.database_path, registry))

    @staticmethod
    def sync_config(
        config: Config, locale: Optional[str] = None, invalidate: bool = False
    ) -> SyncConfig:
        """Build a SyncConfig fetching from the delivery API in ``config``."""
        client = DeliveryClient(
            space_id=config.space_id,
            access_token=config.access_token,
            environment=config.environment,
            api_url=config.api_url,
            timeout=config.timeout,
        )
        return SyncConfig(
            fetcher=client, locale=locale or config.locale, invalidate=invalidate
        )

    @property
    def is_syncing(self) -> bool:
        return self._lock.locked()

    def observe(self, observer: SyncObserver) -> None:
        """Subscribe to the results of every sync cycle."""
        self.notifier.subscribe(observer)

    def cancel(self, tag: str) -> bool:
        """Drop the callback of a requested sync that has not finished yet."""
        return self.notifier.cancel_callback(tag)

    def request_sync(
        self,
        config: SyncConfig,
        tag: Optional[str] = None,
        callback: Optional[SyncObserver] = None,
    ) -> "Future[SyncResult]":
        """Queue a sync cycle on the worker thread.

        Args:
            config: Options for the cycle
            tag: Identifies the cycle's callback
            callback: Called once with the cycle's result

        Returns:
            Future resolving to the SyncResult
        """
        if callback is not None:
            if tag is None:
                raise ValueError("A callback needs a tag")
            self.notifier.register_callback(tag, callback)
        logger.debug("Queued sync (tag=%s)", tag)
        return self._executor.submit(self._run, config, tag)

    def sync(self, config: SyncConfig, tag: Optional[str] = None) -> SyncResult:
        """Run a sync cycle on the calling thread.

        Raises:
            SyncInProgressError: If another cycle is running on this store
        """
        if not self._lock.acquire(blocking=False):
            raise SyncInProgressError(
                f"A sync is already running for {self.db_service.db_path}"
            )
        try:
            return self.orchestrator.run_sync_cycle(config, tag)
        finally:
            self._lock.release()

    def _run(self, config: SyncConfig, tag: Optional[str]) -> SyncResult:
        with self._lock:
            return self.orchestrator.run_sync_cycle(config, tag)

    def close(self) -> None:
        """Wait for queued cycles, then release the store."""
        self._executor.shutdown(wait=True)
        self.db_service.close()
