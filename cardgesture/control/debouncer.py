"""
Single-shot debounce gate with a global cooldown.

Lifecycle:
    Idle(none) --non-none gesture--> Locked(G, t0)
    Locked: everything is suppressed while now - t0 < cooldown
    After the cooldown a *different* gesture is accepted (new Locked state);
    the *same* gesture stays suppressed until a NONE input re-arms the gate.
    Idle is reachable from any state via a NONE input or reset().
"""

import time
import logging
from typing import Optional

from cardgesture.core.types import Gesture

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_MS = 500


def now_ms() -> float:
    return time.time() * 1000


class DebounceGate:
    """Turns a raw per-frame gesture stream into isolated discrete events."""

    def __init__(self, cooldown_ms: float = DEFAULT_COOLDOWN_MS):
        if cooldown_ms < 0:
            raise ValueError(f"cooldown_ms must be >= 0, got {cooldown_ms}")
        self._cooldown_ms = cooldown_ms
        self._last_gesture = Gesture.NONE
        self._last_timestamp: Optional[float] = None  # None = no cooldown running

    def process_gesture(self, gesture: Gesture, now: Optional[float] = None) -> Optional[Gesture]:
        """Return ``gesture`` if it should fire as an event, otherwise None.

        Args:
            gesture: Raw gesture for this frame
            now: Timestamp in milliseconds (defaults to wall clock)
        """
        if now is None:
            now = now_ms()

        if gesture is Gesture.NONE:
            if self._last_gesture is not Gesture.NONE:
                logger.debug("Gesture released (was %s), gate re-armed", self._last_gesture.value)
            self._last_gesture = Gesture.NONE
            return None

        if gesture is self._last_gesture:
            return None

        remaining = self.cooldown_remaining(now)
        if remaining > 0:
            logger.debug("Suppressed %s: %.0fms of cooldown left", gesture.value, remaining)
            return None

        self._last_gesture = gesture
        self._last_timestamp = now
        logger.debug("Gesture '%s' fired, locked for %sms", gesture.value, self._cooldown_ms)
        return gesture

    def cooldown_remaining(self, now: Optional[float] = None) -> float:
        """Milliseconds left in the cooldown window (0 if not in cooldown)."""
        if now is None:
            now = now_ms()
        if self._last_timestamp is None:
            return 0.0
        return max(0.0, self._cooldown_ms - (now - self._last_timestamp))

    def reset(self) -> None:
        """Clear all state; the next non-none gesture fires immediately."""
        self._last_gesture = Gesture.NONE
        self._last_timestamp = None

    @property
    def cooldown_ms(self) -> float:
        return self._cooldown_ms

    @property
    def last_gesture(self) -> Gesture:
        return self._last_gesture

    @property
    def last_timestamp(self) -> Optional[float]:
        return self._last_timestamp
