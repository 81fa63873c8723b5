"""Unit tests for history recording, text formatting and notifications."""

from datetime import timedelta

import pytest
from forest_fire.cell import Cell
from forest_fire.events import EventChannel, Notification, shape_tag
from forest_fire.config import TreeShape
from forest_fire.history import (
    FireEventType,
    HistoryRecorder,
    density_percent,
    format_density,
    format_runtime,
    format_wind,
)


class TestFormatting:
    """Test cases for the text helpers."""

    @pytest.mark.parametrize("elapsed,expected", [
        (timedelta(0), "00:00:00"),
        (timedelta(minutes=2, seconds=5), "00:02:05"),
        (timedelta(hours=99), "99:00:00"),
        (timedelta(hours=100, seconds=1), "100:00:01"),
    ])
    def test_format_runtime(self, elapsed, expected):
        assert format_runtime(elapsed) == expected

    def test_density_rounds_half_to_even(self):
        assert density_percent(1, 8) == 12
        assert density_percent(3, 8) == 38

    def test_density_without_capacity(self):
        assert density_percent(5, 0) == 0

    def test_format_density(self):
        assert format_density(3, 60) == "3 / 60 (5%)"

    def test_format_wind(self):
        assert format_wind(0.75) == "75% (9 Bft)"
        assert format_wind(0.0) == "0% (0 Bft)"


class TestHistoryRecorder:
    """Test cases for HistoryRecorder."""

    def test_records_in_order(self):
        recorder = HistoryRecorder()
        recorder.record_snapshot(timedelta(seconds=1), 5, 0, 0.5)
        recorder.record_snapshot(timedelta(seconds=2), 6, 1, 0.5)
        recorder.record_fire_event(FireEventType.Lightning, timedelta(seconds=2))

        assert [s.grown for s in recorder.snapshots] == [5, 6]
        assert recorder.fire_events[0].type == FireEventType.Lightning

    def test_views_are_immutable(self):
        recorder = HistoryRecorder()
        assert isinstance(recorder.snapshots, tuple)
        assert isinstance(recorder.fire_events, tuple)


class TestEventChannel:
    """Test cases for EventChannel."""

    def test_publish_reaches_subscribers(self):
        channel = EventChannel()
        received = []
        channel.subscribe(Notification.GROWN_TEXT, received.append)
        channel.publish(Notification.GROWN_TEXT, "3")
        channel.publish(Notification.BURNED_TEXT, "1")
        assert received == ["3"]

    def test_unsubscribe(self):
        channel = EventChannel()
        received = []
        channel.subscribe(Notification.TIME_TEXT, received.append)
        channel.unsubscribe(Notification.TIME_TEXT, received.append)
        channel.unsubscribe(Notification.WIND_TEXT, received.append)
        channel.publish(Notification.TIME_TEXT, "00:00:01")
        assert received == []

    def test_shape_tags(self):
        assert shape_tag(TreeShape.Ellipse) == "ellipse"
        assert shape_tag(TreeShape.Rectangle) == "rectangle"
        with pytest.raises(NotImplementedError):
            shape_tag("triangle")

    def test_payload_cells_are_plain_coordinates(self):
        channel = EventChannel()
        received = []
        channel.subscribe(Notification.TREE_REMOVED, received.append)
        channel.publish(Notification.TREE_REMOVED, Cell(2, 3))
        assert received[0].x == 2
