"""
Per-session gesture pipeline.

Runs one landmark frame through the full two-tier recognition cycle:

    frame -> fist check -> per-frame swipe -> accumulated swipe (MotionTracker)
          -> DebounceGate -> event

Precedence: fist > per-frame swipe > accumulated swipe > none.

A session corresponds to one camera attach. It owns its MotionTracker,
DebounceGate and EventBus; nothing is shared between sessions.
"""

import logging
from typing import Optional

from cardgesture.control.debouncer import DebounceGate, now_ms
from cardgesture.core.events import EventBus, Events
from cardgesture.core.types import Gesture, Point, ORIGIN, as_landmark_frame
from cardgesture.recognition.dispatcher import detect_gesture
from cardgesture.recognition.geometry import get_palm_center, is_palm_open
from cardgesture.recognition.motion_tracker import MotionTracker
from cardgesture.utils.config import GestureConfig
from cardgesture.utils.logger import GestureLogger

logger = logging.getLogger(__name__)

SOURCE_GEOMETRY = "geometry"
SOURCE_FRAME = "frame"
SOURCE_ACCUMULATED = "accumulated"


class StepResult:
    """Result of a single session step."""

    __slots__ = (
        "hand_detected", "palm_center", "palm_open",
        "raw_gesture", "source", "emitted", "timestamp",
    )

    def __init__(self, timestamp: float):
        self.hand_detected = False
        self.palm_center: Point = ORIGIN
        self.palm_open = False
        self.raw_gesture = Gesture.NONE
        self.source: Optional[str] = None
        self.emitted: Optional[Gesture] = None
        self.timestamp = timestamp

    def __repr__(self):
        return (f"StepResult(raw={self.raw_gesture.value}, source={self.source}, "
                f"emitted={self.emitted.value if self.emitted else None})")


class GestureSession:
    """Stateful frame-by-frame gesture recognizer for one tracking session.

    Example:
        >>> session = GestureSession(GestureConfig(cooldown_ms=600))
        >>> session.bus.subscribe(Events.GESTURE_DETECTED, on_gesture)
        >>> for landmarks in landmark_stream:
        ...     gesture = session.step(landmarks)
        ...     if gesture is not Gesture.NONE:
        ...         handle(gesture)
    """

    def __init__(self, config: Optional[GestureConfig] = None, event_bus: Optional[EventBus] = None):
        self.config = config or GestureConfig()
        self.tracker = MotionTracker(self.config.motion_tracker_config())
        self.gate = DebounceGate(self.config.cooldown_ms)
        self.bus = event_bus or EventBus()
        self.gesture_log = GestureLogger()

        self._previous_frame = None
        self._hand_present = False
        self._frame_count = 0

    def step(self, landmarks, now: Optional[float] = None) -> Gesture:
        """Process one frame and return the debounced event (NONE if nothing fired)."""
        result = self.tick(landmarks, now)
        return result.emitted or Gesture.NONE

    def tick(self, landmarks, now: Optional[float] = None) -> StepResult:
        """Execute one full recognition cycle.

        Args:
            landmarks: Hand frame from the landmark detector, or None when no
                hand is present
            now: Frame timestamp in milliseconds (defaults to wall clock)

        Returns:
            StepResult with classification and debounce details
        """
        if now is None:
            now = now_ms()
        result = StepResult(now)
        self._frame_count += 1

        frame = as_landmark_frame(landmarks)

        # --- 1. Hand presence ---
        if frame is None:
            self._on_hand_lost()
            return result

        if not self._hand_present:
            self._hand_present = True
            self.bus.emit(Events.HAND_DETECTED, timestamp=now)

        result.hand_detected = True
        result.palm_center = get_palm_center(frame)
        result.palm_open = is_palm_open(frame, self.config.open_threshold)

        # --- 2. Two-tier classification ---
        result.raw_gesture, result.source = self._classify(frame, result.palm_center, self._previous_frame)
        self._previous_frame = frame

        # --- 3. Debounce ---
        result.emitted = self.gate.process_gesture(result.raw_gesture, now)

        if result.emitted is not None:
            self.gesture_log.log_gesture(result.emitted.value, now, result.source)
            self.bus.emit(Events.GESTURE_DETECTED, gesture=result.emitted,
                          source=result.source, timestamp=now)
        elif result.raw_gesture is not Gesture.NONE:
            self.bus.emit(Events.GESTURE_SUPPRESSED, gesture=result.raw_gesture,
                          source=result.source, timestamp=now)

        return result

    def classify(self, landmarks, previous_landmarks=None) -> Gesture:
        """Raw two-tier gesture for a frame pair, before debouncing.

        Feeds the session's MotionTracker when the per-frame check finds
        nothing, exactly as ``tick`` does, but does not touch the gate or
        the stored previous frame.
        """
        frame = as_landmark_frame(landmarks)
        if frame is None:
            return Gesture.NONE
        previous = as_landmark_frame(previous_landmarks)
        gesture, _ = self._classify(frame, get_palm_center(frame), previous)
        return gesture

    def _classify(self, frame, center: Point, previous):
        gesture = detect_gesture(
            frame, previous,
            swipe_threshold=self.config.swipe_frame_threshold,
            fist_threshold=self.config.fist_threshold,
        )
        if gesture is Gesture.FIST:
            return gesture, SOURCE_GEOMETRY
        if gesture is not Gesture.NONE:
            return gesture, SOURCE_FRAME

        if previous is not None:
            direction = self.tracker.track(center, get_palm_center(previous))
            if direction is not None:
                return direction.to_gesture(), SOURCE_ACCUMULATED

        return Gesture.NONE, None

    def _on_hand_lost(self):
        if not self._hand_present:
            return
        logger.debug("Hand lost after %d frames, resetting motion tracker", self._frame_count)
        self._hand_present = False
        self._previous_frame = None
        self.tracker.reset()
        # Cooldown and last gesture survive hand loss unless configured otherwise
        if self.config.reset_gate_on_hand_loss:
            self.gate.reset()
        self.bus.emit(Events.HAND_LOST)

    def reset(self):
        """Forget the previous frame and clear tracker and gate state.

        Hand presence is kept, so a hand that stays in view is not
        announced again.
        """
        self._previous_frame = None
        self.tracker.reset()
        self.gate.reset()

    def close(self):
        """End the session (camera detach)."""
        self.reset()
        self._hand_present = False
        self.bus.reset()
        logger.info("Gesture session closed after %d frames, %d gestures emitted",
                    self._frame_count, self.gesture_log.total_gestures)

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def hand_present(self) -> bool:
        return self._hand_present
