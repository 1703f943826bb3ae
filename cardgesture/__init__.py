"""
Card Gesture Core
=================

Turns a per-frame stream of 21 hand landmarks into debounced intent events
(fist, swipe-left, swipe-right, swipe-up) for a touchless card-selection UI.

Modules:
    - core: Shared types, event bus, per-session pipeline
    - recognition: Geometric classifier, per-frame dispatcher, motion tracker
    - control: Debounce gate
    - utils: Configuration and logging
"""

__version__ = "1.0.0"

from .core import (
    Gesture, SwipeDirection, LandmarkIndex, Point, as_landmark_frame,
    EventBus, Events, GestureSession, StepResult,
)
from .utils.config import Config, GestureConfig

__all__ = [
    "Gesture",
    "SwipeDirection",
    "LandmarkIndex",
    "Point",
    "as_landmark_frame",
    "EventBus",
    "Events",
    "GestureSession",
    "StepResult",
    "Config",
    "GestureConfig",
]
