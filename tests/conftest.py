"""
Shared landmark fixtures for the gesture core tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cardgesture.core.types import LandmarkIndex, Point, NUM_LANDMARKS


def create_landmarks(overrides: dict = None) -> list:
    """
    Create a 21-point frame with every joint at (0.5, 0.5).

    Args:
        overrides: Dict of LandmarkIndex -> Point

    Returns:
        List of 21 Points
    """
    landmarks = [Point(0.5, 0.5, 0.0) for _ in range(NUM_LANDMARKS)]
    for index, point in (overrides or {}).items():
        landmarks[index] = point
    return landmarks


def create_open_palm_landmarks() -> list:
    """Fingertips well above their MCP joints."""
    return create_landmarks({
        LandmarkIndex.WRIST: Point(0.5, 0.8),
        LandmarkIndex.INDEX_MCP: Point(0.4, 0.6),
        LandmarkIndex.INDEX_TIP: Point(0.35, 0.3),
        LandmarkIndex.MIDDLE_MCP: Point(0.5, 0.55),
        LandmarkIndex.MIDDLE_TIP: Point(0.5, 0.25),
        LandmarkIndex.RING_MCP: Point(0.6, 0.6),
        LandmarkIndex.RING_TIP: Point(0.65, 0.3),
        LandmarkIndex.PINKY_MCP: Point(0.7, 0.65),
        LandmarkIndex.PINKY_TIP: Point(0.75, 0.35),
    })


def create_fist_landmarks() -> list:
    """Fingertips at or below their MCP joints."""
    return create_landmarks({
        LandmarkIndex.WRIST: Point(0.5, 0.8),
        LandmarkIndex.INDEX_MCP: Point(0.4, 0.5),
        LandmarkIndex.INDEX_TIP: Point(0.42, 0.52),
        LandmarkIndex.MIDDLE_MCP: Point(0.5, 0.48),
        LandmarkIndex.MIDDLE_TIP: Point(0.5, 0.55),
        LandmarkIndex.RING_MCP: Point(0.6, 0.5),
        LandmarkIndex.RING_TIP: Point(0.58, 0.55),
        LandmarkIndex.PINKY_MCP: Point(0.7, 0.52),
        LandmarkIndex.PINKY_TIP: Point(0.68, 0.58),
    })


def shift_landmarks(landmarks: list, dx: float = 0.0, dy: float = 0.0) -> list:
    """Translate every joint of a frame."""
    return [Point(p.x + dx, p.y + dy, p.z) for p in landmarks]


@pytest.fixture
def open_palm():
    return create_open_palm_landmarks()


@pytest.fixture
def fist():
    return create_fist_landmarks()


@pytest.fixture
def make_landmarks():
    return create_landmarks


@pytest.fixture
def shift():
    return shift_landmarks
