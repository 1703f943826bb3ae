"""
Single-frame gesture dispatch.

Combines the geometric classifier with a one-step palm movement check.
Priority: fist > per-frame swipe > none.
"""

import logging
from typing import Optional

from cardgesture.core.types import Gesture, Point, SwipeDirection, as_landmark_frame
from cardgesture.recognition.geometry import FIST_THRESHOLD, is_fist, get_palm_center

logger = logging.getLogger(__name__)

SWIPE_FRAME_THRESHOLD = 0.015  # Palm travel in one frame that counts as a swipe


def get_swipe_direction(current_center: Point, previous_center: Point,
                        threshold: float = SWIPE_FRAME_THRESHOLD) -> Optional[SwipeDirection]:
    """Detect a swipe from a single palm-center step.

    Vertical movement is checked first. Positive dx is mirrored to LEFT.
    """
    dx = current_center.x - previous_center.x
    dy = current_center.y - previous_center.y

    if dy < -threshold:
        return SwipeDirection.UP
    if dx > threshold:
        return SwipeDirection.LEFT
    if dx < -threshold:
        return SwipeDirection.RIGHT
    return None


def detect_gesture(landmarks, previous_landmarks=None,
                   swipe_threshold: float = SWIPE_FRAME_THRESHOLD,
                   fist_threshold: float = FIST_THRESHOLD) -> Gesture:
    """
    Classify one frame.

    Args:
        landmarks: Current hand frame (None when no hand was detected)
        previous_landmarks: Preceding hand frame, if any
        swipe_threshold: Per-frame palm travel threshold
        fist_threshold: Closed-finger threshold

    Returns:
        FIST, a swipe gesture, or NONE
    """
    current = as_landmark_frame(landmarks)
    if current is None:
        return Gesture.NONE

    if is_fist(current, fist_threshold):
        return Gesture.FIST

    previous = as_landmark_frame(previous_landmarks)
    if previous is not None:
        direction = get_swipe_direction(
            get_palm_center(current), get_palm_center(previous), swipe_threshold,
        )
        if direction is not None:
            return direction.to_gesture()

    return Gesture.NONE
