"""Shared types, event bus and the per-session pipeline."""
from .types import (
    Gesture, SwipeDirection, LandmarkIndex, Point, LandmarkFrame,
    NUM_LANDMARKS, as_landmark_frame, is_valid_frame, frame_to_numpy,
)
from .events import EventBus, Events
from .session import GestureSession, StepResult

__all__ = [
    "Gesture",
    "SwipeDirection",
    "LandmarkIndex",
    "Point",
    "LandmarkFrame",
    "NUM_LANDMARKS",
    "as_landmark_frame",
    "is_valid_frame",
    "frame_to_numpy",
    "EventBus",
    "Events",
    "GestureSession",
    "StepResult",
]
