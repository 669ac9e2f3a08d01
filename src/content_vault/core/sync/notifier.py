"""Completion signal fan-out for sync cycles.

Every finished cycle is reported to all subscribed observers and to at most
one callback registered under the cycle's tag. Delivery never raises.
"""

import logging
import threading
from concurrent.futures import Executor
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from .orchestrator import SyncResult

logger = logging.getLogger(__name__)

# Type alias for sync completion listeners
SyncObserver = Callable[["SyncResult"], None]


class SyncNotifier:
    """Delivers sync results to observers and tagged callbacks."""

    def __init__(self, executor: Optional[Executor] = None) -> None:
        """Initialize notifier.

        Args:
            executor: If given, each delivery is submitted to it instead of
                running on the caller's thread
        """
        self.executor = executor
        self._observers: List[SyncObserver] = []
        self._callbacks: Dict[str, SyncObserver] = {}
        self._lock = threading.Lock()

    def subscribe(self, observer: SyncObserver) -> None:
        with self._lock:
            self._observers.append(observer)

    def unsubscribe(self, observer: SyncObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def register_callback(self, tag: str, callback: SyncObserver) -> None:
        """Register the one-shot callback for the cycle tagged ``tag``.

        A later registration under the same tag replaces the earlier one.
        """
        with self._lock:
            self._callbacks[tag] = callback

    def cancel_callback(self, tag: str) -> bool:
        """Drop the callback registered under ``tag``.

        Returns:
            True if a callback was registered
        """
        with self._lock:
            return self._callbacks.pop(tag, None) is not None

    def notify(self, result: "SyncResult") -> None:
        """Deliver ``result`` to every observer and the tagged callback."""
        with self._lock:
            targets = list(self._observers)
            if result.tag is not None:
                callback = self._callbacks.pop(result.tag, None)
                if callback is not None:
                    targets.append(callback)

        for target in targets:
            if self.executor is not None:
                try:
                    self.executor.submit(self._deliver, target, result)
                except RuntimeError as e:
                    logger.warning("Could not schedule sync notification: %s", e)
            else:
                self._deliver(target, result)

    @staticmethod
    def _deliver(target: SyncObserver, result: "SyncResult") -> None:
        try:
            target(result)
        except Exception:
            logger.exception("Sync listener %r failed", target)
