"""Tests for sync completion notification."""

import logging
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

from content_vault.core.sync import SyncNotifier, SyncResult


class TestSyncNotifier:
    """Test SyncNotifier fan-out."""

    def test_notifies_all_observers(self):
        """Test every subscribed observer receives the result."""
        notifier = SyncNotifier()
        first, second = Mock(), Mock()
        notifier.subscribe(first)
        notifier.subscribe(second)
        result = SyncResult(tag="t1")

        notifier.notify(result)

        first.assert_called_once_with(result)
        second.assert_called_once_with(result)

    def test_unsubscribe(self):
        """Test unsubscribed observers are not notified."""
        notifier = SyncNotifier()
        observer = Mock()
        notifier.subscribe(observer)
        notifier.unsubscribe(observer)
        notifier.unsubscribe(observer)

        notifier.notify(SyncResult())

        observer.assert_not_called()

    def test_callback_is_one_shot(self):
        """Test a tagged callback fires once for its own tag only."""
        notifier = SyncNotifier()
        callback = Mock()
        notifier.register_callback("t1", callback)

        notifier.notify(SyncResult(tag="other"))
        notifier.notify(SyncResult(tag=None))
        callback.assert_not_called()

        result = SyncResult(tag="t1")
        notifier.notify(result)
        notifier.notify(SyncResult(tag="t1"))

        callback.assert_called_once_with(result)

    def test_later_registration_replaces_callback(self):
        """Test registering under a used tag replaces the callback."""
        notifier = SyncNotifier()
        old, new = Mock(), Mock()
        notifier.register_callback("t1", old)
        notifier.register_callback("t1", new)

        notifier.notify(SyncResult(tag="t1"))

        old.assert_not_called()
        new.assert_called_once()

    def test_cancel_callback(self):
        """Test a cancelled callback is never called."""
        notifier = SyncNotifier()
        callback = Mock()
        notifier.register_callback("t1", callback)

        assert notifier.cancel_callback("t1") is True
        assert notifier.cancel_callback("t1") is False

        notifier.notify(SyncResult(tag="t1"))
        callback.assert_not_called()

    def test_failing_listener_does_not_stop_delivery(self, caplog):
        """Test a raising listener is logged and the others still run."""
        notifier = SyncNotifier()
        failing = Mock(side_effect=RuntimeError("listener broke"))
        healthy = Mock()
        notifier.subscribe(failing)
        notifier.subscribe(healthy)

        with caplog.at_level(logging.ERROR):
            notifier.notify(SyncResult())

        healthy.assert_called_once()
        assert "listener broke" in caplog.text

    def test_delivers_on_executor(self):
        """Test deliveries are submitted to the configured executor."""
        executor = ThreadPoolExecutor(max_workers=1)
        notifier = SyncNotifier(executor=executor)
        observer = Mock()
        callback = Mock()
        notifier.subscribe(observer)
        notifier.register_callback("t1", callback)
        result = SyncResult(tag="t1")

        notifier.notify(result)
        executor.shutdown(wait=True)

        observer.assert_called_once_with(result)
        callback.assert_called_once_with(result)

    def test_shut_down_executor(self):
        """Test notifying after the executor shut down does not raise."""
        executor = ThreadPoolExecutor(max_workers=1)
        executor.shutdown(wait=True)
        notifier = SyncNotifier(executor=executor)
        observer = Mock()
        notifier.subscribe(observer)

        notifier.notify(SyncResult())

        observer.assert_not_called()
