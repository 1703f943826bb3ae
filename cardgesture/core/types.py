"""
Shared domain types for the card-selection gesture core.

Centralizes enums, the landmark point type and frame normalization used
across modules to eliminate circular imports and keep one notion of what a
valid hand frame is.
"""

import logging
from collections.abc import Mapping
from enum import Enum, IntEnum
from typing import NamedTuple, Optional, Tuple, Dict

import numpy as np

logger = logging.getLogger(__name__)

NUM_LANDMARKS = 21


# =============================================================================
# Gesture Types
# =============================================================================

class Gesture(Enum):
    """Discrete user-intent events emitted by the core."""
    SWIPE_LEFT = "swipe-left"
    SWIPE_RIGHT = "swipe-right"
    SWIPE_UP = "swipe-up"
    FIST = "fist"
    NONE = "none"

    @classmethod
    def from_string(cls, name: str) -> 'Gesture':
        """Convert a string gesture name to Gesture enum, safely."""
        try:
            return cls(name)
        except ValueError:
            return cls.NONE

    @property
    def is_swipe(self) -> bool:
        return self in (Gesture.SWIPE_LEFT, Gesture.SWIPE_RIGHT, Gesture.SWIPE_UP)

    @property
    def is_confirm(self) -> bool:
        """Gestures the card UI treats as 'select the hovered card'."""
        return self in (Gesture.SWIPE_UP, Gesture.FIST)


class SwipeDirection(Enum):
    """Semantic (mirrored) palm movement direction."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"

    def to_gesture(self) -> Gesture:
        return DIRECTION_GESTURE_MAP[self]


DIRECTION_GESTURE_MAP: Dict[SwipeDirection, Gesture] = {
    SwipeDirection.LEFT: Gesture.SWIPE_LEFT,
    SwipeDirection.RIGHT: Gesture.SWIPE_RIGHT,
    SwipeDirection.UP: Gesture.SWIPE_UP,
}


class LandmarkIndex(IntEnum):
    """Hand landmark indices following MediaPipe convention."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# (tip, mcp) pairs for the four non-thumb fingers
FINGER_TIP_MCP = {
    "index": (LandmarkIndex.INDEX_TIP, LandmarkIndex.INDEX_MCP),
    "middle": (LandmarkIndex.MIDDLE_TIP, LandmarkIndex.MIDDLE_MCP),
    "ring": (LandmarkIndex.RING_TIP, LandmarkIndex.RING_MCP),
    "pinky": (LandmarkIndex.PINKY_TIP, LandmarkIndex.PINKY_MCP),
}

PALM_INDICES = (
    LandmarkIndex.WRIST,
    LandmarkIndex.INDEX_MCP,
    LandmarkIndex.MIDDLE_MCP,
    LandmarkIndex.RING_MCP,
    LandmarkIndex.PINKY_MCP,
)


# =============================================================================
# Data Containers
# =============================================================================

class Point(NamedTuple):
    """A single landmark point with normalized coordinates."""
    x: float  # 0.0 to 1.0, raw (unmirrored) camera x
    y: float  # 0.0 to 1.0, grows downward
    z: float = 0.0  # Depth relative to wrist


LandmarkFrame = Tuple[Point, ...]

ORIGIN = Point(0.0, 0.0)


def _to_point(landmark) -> Optional[Point]:
    if isinstance(landmark, Point):
        return landmark
    try:
        if hasattr(landmark, "x") and hasattr(landmark, "y"):
            return Point(float(landmark.x), float(landmark.y), float(getattr(landmark, "z", 0.0) or 0.0))
        if isinstance(landmark, Mapping):
            return Point(float(landmark["x"]), float(landmark["y"]), float(landmark.get("z", 0.0) or 0.0))
        coords = [float(v) for v in landmark]
    except (TypeError, ValueError, KeyError):
        return None
    if len(coords) == 2:
        return Point(coords[0], coords[1])
    if len(coords) == 3:
        return Point(coords[0], coords[1], coords[2])
    return None


def as_landmark_frame(landmarks) -> Optional[LandmarkFrame]:
    """Normalize detector output into a LandmarkFrame.

    Returns None for anything that is not exactly 21 readable points, so
    callers can treat a missing hand and a malformed frame the same way.
    """
    if landmarks is None:
        return None

    if isinstance(landmarks, np.ndarray):
        if landmarks.ndim != 2 or landmarks.shape[0] != NUM_LANDMARKS or landmarks.shape[1] not in (2, 3):
            return None
        points = tuple(_to_point(row.tolist()) for row in landmarks)
    else:
        try:
            count = len(landmarks)
        except TypeError:
            return None
        if count != NUM_LANDMARKS:
            return None
        points = tuple(_to_point(lm) for lm in landmarks)

    if any(p is None for p in points):
        logger.debug("Discarding frame with unreadable landmark")
        return None
    return points


def is_valid_frame(landmarks) -> bool:
    return as_landmark_frame(landmarks) is not None


def frame_to_numpy(frame: LandmarkFrame) -> np.ndarray:
    """Convert a LandmarkFrame to a numpy array of shape (21, 3)."""
    return np.asarray(frame, dtype=np.float64).reshape(NUM_LANDMARKS, 3)
