"""Process-wide change notifications for filter consumers."""

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

logger = logging.getLogger(__name__)

# Emitted once per distinct filter recomputation, with state=FilterState
GLOBAL_FILTER_CHANGED = "filtersChanged"

EventCallback = Callable[..., None]


class ChangeNotifier:
    """
    Minimal publish/subscribe hub.

    Callbacks run synchronously, in subscription order, on the emitting
    thread. An exception raised by a callback propagates to the emitter.
    """

    def __init__(self):
        self._subscribers: DefaultDict[str, List[EventCallback]] = defaultdict(list)

    def subscribe(self, event: str, callback: EventCallback) -> Callable[[], None]:
        """
        Subscribe to an event.

        Args:
            event: Event name (e.g. GLOBAL_FILTER_CHANGED)
            callback: Called with the keyword payload passed to emit()

        Returns:
            Function that unsubscribes the callback
        """
        self._subscribers[event].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[event]:
                self._subscribers[event].remove(callback)

        return unsubscribe

    def emit(self, event: str, **payload: Any) -> int:
        """
        Publish an event.

        Returns:
            Number of callbacks notified
        """
        callbacks = list(self._subscribers.get(event, []))
        logger.debug(f"Emitting {event} to {len(callbacks)} subscriber(s)")
        for callback in callbacks:
            callback(**payload)
        return len(callbacks)


_default_notifier = ChangeNotifier()


def get_notifier() -> ChangeNotifier:
    """Process-wide notifier used when none is injected."""
    return _default_notifier
