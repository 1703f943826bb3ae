"""
Tests for the Per-Session Gesture Pipeline
===========================================
"""

import numpy as np
import pytest

from cardgesture.core.events import Events
from cardgesture.core.session import GestureSession, SOURCE_ACCUMULATED, SOURCE_FRAME, SOURCE_GEOMETRY
from cardgesture.core.types import Gesture, Point
from cardgesture.utils.config import GestureConfig

FRAME_MS = 33.0
T0 = 50_000.0


@pytest.fixture
def session():
    return GestureSession(GestureConfig(cooldown_ms=600))


@pytest.fixture
def recorder(session):
    """Collect every event the session publishes."""
    events = []
    for name in (Events.HAND_DETECTED, Events.HAND_LOST,
                 Events.GESTURE_DETECTED, Events.GESTURE_SUPPRESSED):
        session.bus.subscribe(name, lambda _name=name, **kw: events.append((_name, kw)))
    return events


def run(session, frames, start=T0):
    """Step through frames at ~30 Hz and return each step's gesture."""
    return [session.step(frame, start + i * FRAME_MS) for i, frame in enumerate(frames)]


class TestPrecedence:
    """Test suite for fist > per-frame swipe > accumulated swipe > none."""

    def test_fist(self, session, fist):
        result = session.tick(fist, T0)

        assert result.raw_gesture is Gesture.FIST
        assert result.source == SOURCE_GEOMETRY
        assert result.emitted is Gesture.FIST

    def test_fist_overrides_swipe(self, session, fist, shift):
        assert session.classify(fist, shift(fist, dx=-0.2)) is Gesture.FIST

    def test_per_frame_swipe(self, session, open_palm, shift):
        gestures = run(session, [open_palm, shift(open_palm, dx=0.2)])

        assert gestures == [Gesture.NONE, Gesture.SWIPE_LEFT]

    def test_per_frame_swipe_skips_tracker(self, session, open_palm, shift):
        run(session, [open_palm, shift(open_palm, dx=0.01), shift(open_palm, dx=0.2)])

        # The fast step is classified per-frame; only the slow step was accumulated
        assert session.tracker.frame_count == 1

    def test_accumulated_swipe(self, session, open_palm, shift):
        frames = [shift(open_palm, dx=0.013 * i) for i in range(6)]

        results = [session.tick(frame, T0 + i * FRAME_MS) for i, frame in enumerate(frames)]

        assert [r.emitted for r in results] == [None] * 5 + [Gesture.SWIPE_LEFT]
        assert results[-1].source == SOURCE_ACCUMULATED
        assert session.tracker.frame_count == 0

    def test_accumulated_swipe_right(self, session, open_palm, shift):
        frames = [shift(open_palm, dx=-0.013 * i) for i in range(6)]
        assert run(session, frames)[-1] is Gesture.SWIPE_RIGHT

    def test_still_hand(self, session, open_palm):
        assert run(session, [open_palm] * 5) == [Gesture.NONE] * 5

    def test_frame_source_label(self, session, open_palm, shift):
        session.tick(open_palm, T0)
        result = session.tick(shift(open_palm, dy=-0.1), T0 + FRAME_MS)

        assert result.source == SOURCE_FRAME
        assert result.emitted is Gesture.SWIPE_UP


class TestDebouncing:
    """Test suite for debouncing inside the session."""

    def test_held_fist_fires_once(self, session, fist):
        gestures = run(session, [fist] * 30)
        assert gestures.count(Gesture.FIST) == 1

    def test_fist_again_after_release(self, session, fist, open_palm):
        frames = [fist] * 3 + [open_palm] * 20 + [fist]
        gestures = run(session, frames)

        assert gestures[0] is Gesture.FIST
        assert gestures[-1] is Gesture.FIST
        assert gestures.count(Gesture.FIST) == 2

    def test_swipe_inside_cooldown_is_suppressed(self, session, recorder, fist, open_palm, shift):
        gestures = run(session, [fist, open_palm, shift(open_palm, dx=0.2)])

        assert gestures == [Gesture.FIST, Gesture.NONE, Gesture.NONE]
        suppressed = [kw for name, kw in recorder if name == Events.GESTURE_SUPPRESSED]
        assert suppressed[-1]["gesture"] is Gesture.SWIPE_LEFT


class TestHandLoss:
    """Test suite for hand loss handling."""

    def test_hand_loss_resets_tracker(self, session, open_palm, shift):
        run(session, [shift(open_palm, dx=0.013 * i) for i in range(4)])
        assert session.tracker.frame_count == 3

        session.step(None, T0 + 200)

        assert session.tracker.frame_count == 0
        assert session.hand_present is False

    def test_hand_loss_keeps_gate_state(self, session, fist):
        assert session.step(fist, T0) is Gesture.FIST
        session.step(None, T0 + 10)

        assert session.gate.last_gesture is Gesture.FIST
        assert session.step(fist, T0 + 20) is Gesture.NONE

    def test_hand_loss_can_reset_gate(self, fist):
        session = GestureSession(GestureConfig(cooldown_ms=600, reset_gate_on_hand_loss=True))
        assert session.step(fist, T0) is Gesture.FIST
        session.step(None, T0 + 10)

        assert session.step(fist, T0 + 20) is Gesture.FIST

    def test_no_swipe_across_hand_loss(self, session, open_palm, shift):
        gestures = run(session, [open_palm, None, shift(open_palm, dx=0.2)])
        assert gestures == [Gesture.NONE] * 3

    def test_malformed_frame_counts_as_no_hand(self, session, open_palm, recorder):
        session.step(open_palm, T0)
        result = session.tick(open_palm[:10], T0 + FRAME_MS)

        assert result.hand_detected is False
        assert result.emitted is None
        assert recorder[-1][0] == Events.HAND_LOST

    def test_presence_events(self, session, recorder, open_palm):
        run(session, [open_palm, open_palm, None, None, open_palm])

        names = [name for name, _ in recorder]
        assert names == [Events.HAND_DETECTED, Events.HAND_LOST, Events.HAND_DETECTED]


class TestSessionOutputs:
    """Test suite for events, results and session lifecycle."""

    def test_gesture_event_published(self, session, recorder, fist):
        session.step(fist, T0)

        detected = [kw for name, kw in recorder if name == Events.GESTURE_DETECTED]
        assert detected == [{"gesture": Gesture.FIST, "source": SOURCE_GEOMETRY, "timestamp": T0}]

    def test_failing_listener_does_not_break_step(self, session, fist):
        def broken(**kwargs):
            raise RuntimeError("ui crashed")

        session.bus.subscribe(Events.GESTURE_DETECTED, broken)

        assert session.step(fist, T0) is Gesture.FIST

    def test_step_result_details(self, session, open_palm):
        result = session.tick(open_palm, T0)

        assert result.hand_detected is True
        assert result.palm_open is True
        assert result.palm_center.x == pytest.approx(0.54)
        assert result.palm_center.y == pytest.approx(0.64)
        assert result.timestamp == T0

    def test_gesture_log(self, session, fist, open_palm):
        run(session, [fist, open_palm])

        history = session.gesture_log.get_history()
        assert session.gesture_log.total_gestures == 1
        assert history[0]["gesture"] == "fist"
        assert history[0]["source"] == SOURCE_GEOMETRY

    def test_sessions_are_independent(self, fist):
        first = GestureSession()
        second = GestureSession()

        assert first.step(fist, T0) is Gesture.FIST
        assert second.step(fist, T0 + 1) is Gesture.FIST
        assert first.tracker is not second.tracker
        assert first.bus is not second.bus

    def test_reset(self, session, fist):
        session.step(fist, T0)
        session.reset()

        assert session.hand_present is True
        assert session.step(fist, T0 + 1) is Gesture.FIST

    def test_reset_keeps_hand_presence(self, session, recorder, open_palm):
        run(session, [open_palm, open_palm])
        session.reset()
        run(session, [open_palm, None], start=T0 + 100)

        names = [name for name, _ in recorder]
        assert names == [Events.HAND_DETECTED, Events.HAND_LOST]

    def test_unreadable_numpy_frame_is_no_hand(self, session, recorder, fist):
        arr = np.array([[p.x, p.y, p.z] for p in fist], dtype=object)
        arr[5, 1] = None

        result = session.tick(arr, T0)

        assert result.hand_detected is False
        assert session.hand_present is False
        assert recorder == []

    def test_close(self, session, recorder, fist):
        session.step(fist, T0)
        session.close()

        assert session.bus.listener_count == 0
        assert session.frame_count == 1

    def test_accepts_numpy_frames(self, session, fist):
        arr = np.array([[p.x, p.y] for p in fist])

        assert session.step(arr, T0) is Gesture.FIST

    def test_accepts_attribute_landmarks(self, session, fist):
        class NormalizedLandmark:
            def __init__(self, point):
                self.x, self.y, self.z = point.x, point.y, point.z

        assert session.step([NormalizedLandmark(p) for p in fist], T0) is Gesture.FIST

    def test_default_config(self):
        session = GestureSession()
        assert session.gate.cooldown_ms == 500
        assert session.tracker.config.max_frames == 10
        assert isinstance(session.tick(None).palm_center, Point)
