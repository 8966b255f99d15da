import pytest

from src.core.viewer.gestures import (
    GestureKind, GestureTracker, SwipeIntent, TouchPoint, classify_swipe, distance
)


@pytest.mark.parametrize("start,end,expected", [
    ((200, 100), (100, 100), SwipeIntent.NEXT),
    ((100, 100), (200, 100), SwipeIntent.PREVIOUS),
    ((100, 300), (100, 200), SwipeIntent.NONE),      # finger moved up
    ((100, 200), (100, 300), SwipeIntent.DISMISS),   # finger moved down
    ((100, 100), (150, 150), SwipeIntent.NONE),      # |dx| == |dy|
    ((100, 100), (50, 100), SwipeIntent.NONE),       # exactly at threshold
    ((100, 100), (49, 100), SwipeIntent.NEXT),
    ((100, 100), (100, 150), SwipeIntent.NONE),      # exactly at threshold
    ((100, 100), (100, 151), SwipeIntent.DISMISS),
    ((100, 100), (30, 140), SwipeIntent.NEXT),       # mostly horizontal
    ((100, 100), (140, 200), SwipeIntent.DISMISS),   # mostly vertical
])
def test_classify_swipe(start, end, expected):
    assert classify_swipe(TouchPoint(*start), TouchPoint(*end)) is expected


def test_dismiss_scenario_from_deltas():
    # dy = start.y - end.y; dismissal needs dy < -threshold
    assert classify_swipe(TouchPoint(100, 200), TouchPoint(100, 300)) is SwipeIntent.DISMISS


def test_threshold_is_configurable():
    assert classify_swipe(TouchPoint(100, 0), TouchPoint(0, 0), threshold=150) is SwipeIntent.NONE
    assert classify_swipe(TouchPoint(200, 0), TouchPoint(0, 0), threshold=150) is SwipeIntent.NEXT


def test_distance():
    assert distance(TouchPoint(0, 0), TouchPoint(3, 4)) == 5


class TestGestureTracker:
    def test_two_points_start_pinch(self):
        tracker = GestureTracker()
        tracker.touch_start([TouchPoint(0, 0), TouchPoint(30, 40)])
        assert tracker.kind is GestureKind.PINCH
        assert tracker.pinch_distance == 50

    def test_one_point_starts_swipe(self):
        tracker = GestureTracker()
        tracker.touch_start([TouchPoint(10, 20)])
        assert tracker.kind is GestureKind.SWIPE
        assert tracker.swipe_start == TouchPoint(10, 20)
        assert tracker.swipe_end is None

    def test_pinch_reports_incremental_scale(self):
        tracker = GestureTracker()
        tracker.touch_start([TouchPoint(0, 0), TouchPoint(100, 0)])
        first = tracker.touch_move([TouchPoint(0, 0), TouchPoint(200, 0)])
        second = tracker.touch_move([TouchPoint(0, 0), TouchPoint(300, 0)])
        assert first.pinch_scale == pytest.approx(2.0)
        assert second.pinch_scale == pytest.approx(1.5)

    def test_pinch_end(self):
        tracker = GestureTracker()
        tracker.touch_start([TouchPoint(0, 0), TouchPoint(100, 0)])
        update = tracker.touch_end()
        assert update.pinch_ended is True
        assert tracker.kind is GestureKind.IDLE

    def test_zero_start_distance_never_divides(self):
        tracker = GestureTracker()
        tracker.touch_start([TouchPoint(5, 5), TouchPoint(5, 5)])
        update = tracker.touch_move([TouchPoint(0, 0), TouchPoint(100, 0)])
        assert update.pinch_scale is None
        assert tracker.touch_move([TouchPoint(0, 0), TouchPoint(200, 0)]).pinch_scale == pytest.approx(2.0)

    def test_swipe_without_move_is_none(self):
        tracker = GestureTracker()
        tracker.touch_start([TouchPoint(200, 100)])
        assert tracker.touch_end().swipe is SwipeIntent.NONE

    def test_touch_end_without_start_is_none(self):
        tracker = GestureTracker()
        update = tracker.touch_end()
        assert update.swipe is SwipeIntent.NONE
        assert update.pinch_ended is False

    def test_single_point_move_during_pinch_is_ignored(self):
        tracker = GestureTracker()
        tracker.touch_start([TouchPoint(0, 0), TouchPoint(100, 0)])
        tracker.touch_move([TouchPoint(500, 0)])
        assert tracker.swipe_end is None
        assert tracker.touch_end().pinch_ended

    def test_touch_start_discards_previous_session(self):
        tracker = GestureTracker()
        tracker.touch_start([TouchPoint(0, 0), TouchPoint(100, 0)])
        tracker.touch_start([TouchPoint(200, 100)])
        assert not tracker.is_pinching
        tracker.touch_move([TouchPoint(100, 100)])
        assert tracker.touch_end().swipe is SwipeIntent.NEXT
