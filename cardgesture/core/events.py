"""
Per-session event bus for handing debounced gestures to UI code.

Each GestureSession owns its own bus, so independent sessions never see
each other's events.

Usage:
    bus = EventBus()
    bus.subscribe(Events.GESTURE_DETECTED, on_gesture)
    bus.emit(Events.GESTURE_DETECTED, gesture=Gesture.FIST, source="geometry", timestamp=now)
"""

import time
import logging
from collections import defaultdict, deque
from typing import Callable

logger = logging.getLogger(__name__)


def _callback_name(callback: Callable) -> str:
    return getattr(callback, "__name__", repr(callback))


class EventBus:
    """Synchronous publish/subscribe bus with priority ordering.

    Listener exceptions are logged and swallowed so a faulty UI handler
    cannot stop the frame loop.
    """

    def __init__(self, max_history: int = 100):
        self._listeners = defaultdict(list)  # event_name -> [(priority, callback)]
        self._history = deque(maxlen=max_history)

    def subscribe(self, event_name: str, callback: Callable, priority: int = 0):
        """Register a listener for an event.

        Args:
            event_name: One of the ``Events`` names
            callback: Called with the keyword arguments given to emit()
            priority: Higher priority callbacks run first (default 0)
        """
        listeners = self._listeners[event_name]
        listeners.append((priority, callback))
        # Stable sort keeps subscription order among equal priorities
        listeners.sort(key=lambda entry: -entry[0])
        logger.debug("Subscribed %s to '%s' (priority=%d)", _callback_name(callback), event_name, priority)

    def unsubscribe(self, event_name: str, callback: Callable):
        remaining = [entry for entry in self._listeners.get(event_name, []) if entry[1] is not callback]
        if remaining:
            self._listeners[event_name] = remaining
        else:
            self._listeners.pop(event_name, None)

    def emit(self, event_name: str, **kwargs):
        """Deliver an event to every listener, highest priority first."""
        self._history.append({
            "event": event_name,
            "time": time.time(),
            "data_keys": list(kwargs),
        })

        for _, callback in list(self._listeners.get(event_name, [])):
            try:
                callback(**kwargs)
            except Exception as e:
                logger.error("Listener %s failed on '%s': %s", _callback_name(callback), event_name, e)

    def clear(self, event_name: str = None):
        """Remove all listeners, optionally for a specific event only."""
        if event_name:
            self._listeners.pop(event_name, None)
        else:
            self._listeners.clear()

    @property
    def listener_count(self) -> int:
        return sum(len(entries) for entries in self._listeners.values())

    def get_history(self, last_n: int = 10) -> list:
        """Most recent emitted events, oldest first."""
        return list(self._history)[-last_n:]

    def reset(self):
        """Drop listeners and history."""
        self._listeners.clear()
        self._history.clear()


class Events:
    """Event names published by a gesture session."""

    HAND_DETECTED = "hand_detected"          # timestamp
    HAND_LOST = "hand_lost"                  # no data
    GESTURE_DETECTED = "gesture_detected"    # gesture, source, timestamp
    GESTURE_SUPPRESSED = "gesture_suppressed"  # gesture, source, timestamp
