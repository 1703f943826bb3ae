"""Gesture recognition module."""
from .geometry import is_finger_closed, is_fist, is_palm_open, get_palm_center
from .motion_tracker import MotionTracker, MotionTrackerConfig
from .dispatcher import detect_gesture, get_swipe_direction

__all__ = [
    "is_finger_closed",
    "is_fist",
    "is_palm_open",
    "get_palm_center",
    "MotionTracker",
    "MotionTrackerConfig",
    "detect_gesture",
    "get_swipe_direction",
]
