import numpy as np

from capture.silence import SilenceTimer
from gesture.utils import HandsLostBuffer, VelocityTracker


def test_hands_lost_buffer_absorbs_short_gap():
    buf = HandsLostBuffer(0.4)
    assert buf.update(True, 10.0)
    assert buf.update(False, 10.1)
    assert buf.update(False, 10.3)
    assert buf.update(False, 10.45)      # 0.35s since loss
    assert buf.update(True, 10.48)
    assert buf.update(False, 10.6)       # timer restarted by the detection


def test_hands_lost_buffer_reports_absence_at_window():
    buf = HandsLostBuffer(0.4)
    buf.update(False, 20.0)
    assert buf.update(False, 20.25)
    assert not buf.update(False, 20.5)
    assert not buf.update(False, 60.0)   # never extended without a detection


def test_hands_lost_buffer_closes_exactly_at_window_end():
    buf = HandsLostBuffer(0.4)
    buf.update(False, 20.0)
    assert buf.update(False, 20.39)
    assert not buf.update(False, 20.4)


def test_hands_lost_buffer_reset():
    buf = HandsLostBuffer(0.4)
    buf.update(False, 20.0)
    assert not buf.update(False, 21.0)
    buf.reset()
    assert buf.update(False, 21.1)


def test_silence_timer_single_shot():
    timer = SilenceTimer(threshold=0.03, duration_sec=1.5)
    assert not timer.update(0.0, 50.0)
    assert timer.pending
    assert not timer.update(0.03, 51.0)  # at threshold counts as still
    assert not timer.update(0.0, 51.49)
    assert timer.update(0.0, 51.5)
    assert not timer.pending


def test_silence_timer_rearm_is_noop_while_pending():
    timer = SilenceTimer(threshold=0.03, duration_sec=1.5)
    timer.update(0.0, 50.0)
    timer.update(0.0, 51.0)              # must not push the deadline back
    assert timer.update(0.0, 51.5)


def test_silence_timer_cancelled_by_motion():
    timer = SilenceTimer(threshold=0.03, duration_sec=1.5)
    timer.update(0.0, 50.0)
    assert not timer.update(0.5, 51.0)
    assert not timer.pending
    assert not timer.update(0.0, 51.6)   # re-armed here
    assert not timer.update(0.0, 53.0)
    assert timer.update(0.0, 53.2)


def test_velocity_tracker_needs_baseline():
    tracker = VelocityTracker(scale=10.0, smoothing=1.0)
    pts = np.array([[0.0, 0.0]] + [[0.0, 10.0]] * 20, dtype=np.float32)
    assert tracker.update(pts) == 0.0
    assert tracker.update(pts) == 0.0    # no motion


def test_velocity_tracker_scales_by_hand_size():
    tracker = VelocityTracker(scale=10.0, smoothing=1.0)
    pts = np.array([[0.0, 0.0]] + [[0.0, 10.0]] * 20, dtype=np.float32)
    tracker.update(pts)
    moved = pts + np.array([1.0, 0.0], dtype=np.float32)
    # 1px mean displacement / 10px hand size * 10
    assert abs(tracker.update(moved) - 1.0) < 1e-6


def test_velocity_tracker_smooths_and_resets():
    tracker = VelocityTracker(scale=10.0, smoothing=0.5)
    pts = np.array([[0.0, 0.0]] + [[0.0, 10.0]] * 20, dtype=np.float32)
    tracker.update(pts)
    v1 = tracker.update(pts + 1.0)
    assert abs(v1 - 0.5 * np.sqrt(2)) < 1e-5
    assert tracker.update(None) == 0.0
    assert tracker.update(pts) == 0.0
