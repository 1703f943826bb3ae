"""
Per-frame geometric hand classification.

Stateless tests over a single 21-point landmark frame. Finger state is read
from the vertical gap between a fingertip and its MCP knuckle (y grows
downward, so a raised tip has a smaller y). The thumb is left out of both
tests: its geometry during a fist is too noisy for a y-gap threshold.
"""

import logging
from typing import Optional

import numpy as np

from cardgesture.core.types import (
    FINGER_TIP_MCP, PALM_INDICES, ORIGIN, Point, LandmarkFrame, as_landmark_frame,
)

logger = logging.getLogger(__name__)

FIST_THRESHOLD = 0.07   # Tip must rise at least this far above the MCP to count as not closed
OPEN_THRESHOLD = 0.05   # Tip must rise more than this above the MCP to count as extended
MIN_OPEN_FINGERS = 3    # Tolerate one finger lost to noise


def is_finger_closed(tip: Point, mcp: Point, threshold: float = FIST_THRESHOLD) -> bool:
    """A finger is closed when its tip has not risen meaningfully above its knuckle."""
    return (mcp.y - tip.y) < threshold


def is_finger_extended(tip: Point, mcp: Point, threshold: float = OPEN_THRESHOLD) -> bool:
    return (mcp.y - tip.y) > threshold


def finger_states(landmarks, threshold: float = OPEN_THRESHOLD) -> dict:
    """Extension state of the four non-thumb fingers.

    Returns:
        dict with finger names -> bool (True = extended), empty for an
        invalid frame
    """
    frame = as_landmark_frame(landmarks)
    if frame is None:
        return {}
    return {
        finger: is_finger_extended(frame[tip], frame[mcp], threshold)
        for finger, (tip, mcp) in FINGER_TIP_MCP.items()
    }


def is_fist(landmarks, threshold: float = FIST_THRESHOLD) -> bool:
    """Check if index, middle, ring and pinky are all closed."""
    frame = as_landmark_frame(landmarks)
    if frame is None:
        return False
    return all(
        is_finger_closed(frame[tip], frame[mcp], threshold)
        for tip, mcp in FINGER_TIP_MCP.values()
    )


def is_palm_open(landmarks, threshold: float = OPEN_THRESHOLD,
                 min_fingers: int = MIN_OPEN_FINGERS) -> bool:
    """Check if at least ``min_fingers`` of the four non-thumb fingers are extended."""
    states = finger_states(landmarks, threshold)
    if not states:
        return False
    return sum(states.values()) >= min_fingers


def get_palm_center(landmarks) -> Point:
    """Centroid of the wrist and the four finger MCP joints.

    Returns the origin for an invalid frame.
    """
    frame: Optional[LandmarkFrame] = as_landmark_frame(landmarks)
    if frame is None:
        return ORIGIN

    palm = np.array([(frame[i].x, frame[i].y) for i in PALM_INDICES], dtype=np.float64)
    center_x, center_y = palm.mean(axis=0)
    return Point(float(center_x), float(center_y))
