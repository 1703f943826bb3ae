"""
Accumulated palm motion tracker.

Integrates palm-center deltas across frames to catch slower, deliberate
swipes that never exceed the per-frame threshold in a single step.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from cardgesture.core.types import Point, SwipeDirection

logger = logging.getLogger(__name__)

SWIPE_THRESHOLD = 0.06  # Accumulated palm travel needed to emit a swipe
MAX_FRAMES = 10         # Frames allowed per attempt before it is discarded as stale


def dominant_direction(dx: float, dy: float) -> Optional[SwipeDirection]:
    """Instantaneous dominant direction of a single palm delta.

    Raw camera x grows to the right of the camera, and the user sees a
    mirrored feed, so positive dx is reported as LEFT.
    """
    if abs(dy) > abs(dx) and dy < 0:
        return SwipeDirection.UP
    if dx > 0:
        return SwipeDirection.LEFT
    if dx < 0:
        return SwipeDirection.RIGHT
    return None


@dataclass
class MotionTrackerConfig:
    """Motion tracker configuration."""
    swipe_threshold: float = SWIPE_THRESHOLD
    max_frames: int = MAX_FRAMES

    def __post_init__(self):
        if self.swipe_threshold < 0:
            raise ValueError(f"swipe_threshold must be >= 0, got {self.swipe_threshold}")
        if self.max_frames <= 0:
            raise ValueError(f"max_frames must be > 0, got {self.max_frames}")

    @classmethod
    def from_dict(cls, config: dict) -> "MotionTrackerConfig":
        """Create config from dictionary."""
        return cls(
            swipe_threshold=config.get("swipe_threshold", SWIPE_THRESHOLD),
            max_frames=config.get("max_frames", MAX_FRAMES),
        )


class MotionTracker:
    """
    Multi-frame swipe accumulator.

    Each call adds one palm delta to a running sum. A swipe is emitted once
    the sum crosses the threshold (vertical checked first), after which the
    accumulator starts over. A direction reversal throws away what was
    accumulated so a wavering hand cannot build up a swipe, and an attempt
    that has not crossed after ``max_frames`` calls is dropped.

    Example:
        >>> tracker = MotionTracker()
        >>> direction = tracker.track(current_center, previous_center)
        >>> if direction is not None:
        ...     print(direction.to_gesture())
    """

    def __init__(self, config: Optional[MotionTrackerConfig] = None):
        self.config = config or MotionTrackerConfig()
        self._accumulated_x: float = 0.0
        self._accumulated_y: float = 0.0
        self._frame_count: int = 0
        self._last_direction: Optional[SwipeDirection] = None

    def track(self, current_center: Point, previous_center: Point) -> Optional[SwipeDirection]:
        """
        Integrate one palm-center step.

        Args:
            current_center: Palm center of the current frame
            previous_center: Palm center of the preceding frame

        Returns:
            Swipe direction when the accumulated motion crosses the
            threshold, otherwise None
        """
        dx = current_center.x - previous_center.x
        dy = current_center.y - previous_center.y

        direction = dominant_direction(dx, dy)

        if self._last_direction is not None and direction is not None and direction != self._last_direction:
            logger.debug("Direction reversal %s -> %s, discarding %d frames",
                         self._last_direction.value, direction.value, self._frame_count)
            self.reset()

        self._last_direction = direction
        self._accumulated_x += dx
        self._accumulated_y += dy
        self._frame_count += 1

        threshold = self.config.swipe_threshold

        if self._accumulated_y < -threshold:
            self.reset()
            return SwipeDirection.UP

        if abs(self._accumulated_x) > threshold:
            result = SwipeDirection.LEFT if self._accumulated_x > 0 else SwipeDirection.RIGHT
            self.reset()
            return result

        if self._frame_count >= self.config.max_frames:
            logger.debug("Stale swipe attempt after %d frames (dx=%.3f, dy=%.3f)",
                         self._frame_count, self._accumulated_x, self._accumulated_y)
            self.reset()

        return None

    def reset(self) -> None:
        """Zero the accumulator and forget the last direction."""
        self._accumulated_x = 0.0
        self._accumulated_y = 0.0
        self._frame_count = 0
        self._last_direction = None

    @property
    def accumulated_x(self) -> float:
        return self._accumulated_x

    @property
    def accumulated_y(self) -> float:
        return self._accumulated_y

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def last_direction(self) -> Optional[SwipeDirection]:
        return self._last_direction
