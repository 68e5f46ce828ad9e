"""Tests for the change notifier."""

from unittest.mock import MagicMock

import pytest

from job_filters.events import GLOBAL_FILTER_CHANGED, ChangeNotifier, get_notifier


class TestChangeNotifier:
    """Test ChangeNotifier."""

    def test_emit_calls_subscribers_in_order(self):
        """Test callbacks receive the payload in subscription order."""
        notifier = ChangeNotifier()
        calls = []
        notifier.subscribe("evt", lambda **kw: calls.append(("first", kw)))
        notifier.subscribe("evt", lambda **kw: calls.append(("second", kw)))

        assert notifier.emit("evt", state=1) == 2
        assert calls == [("first", {"state": 1}), ("second", {"state": 1})]

    def test_emit_without_subscribers(self):
        """Test emitting an unknown event is a no-op."""
        assert ChangeNotifier().emit("nothing") == 0

    def test_unsubscribe(self):
        """Test unsubscribed callbacks are not called, twice is harmless."""
        notifier = ChangeNotifier()
        callback = MagicMock()
        unsubscribe = notifier.subscribe(GLOBAL_FILTER_CHANGED, callback)

        unsubscribe()
        unsubscribe()
        notifier.emit(GLOBAL_FILTER_CHANGED)

        callback.assert_not_called()

    def test_callback_errors_propagate(self):
        """Test an exception in a callback reaches the emitter."""
        notifier = ChangeNotifier()
        notifier.subscribe("evt", MagicMock(side_effect=RuntimeError("boom")))
        with pytest.raises(RuntimeError, match="boom"):
            notifier.emit("evt")

    def test_events_are_independent(self):
        """Test subscribers only see their own event."""
        notifier = ChangeNotifier()
        callback = MagicMock()
        notifier.subscribe("a", callback)
        notifier.emit("b")
        callback.assert_not_called()

    def test_default_notifier_is_shared(self):
        """Test get_notifier returns one process-wide instance."""
        assert get_notifier() is get_notifier()
