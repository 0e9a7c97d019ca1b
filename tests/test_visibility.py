# File: tests/test_visibility.py
"""
Unit tests for month-cell row visibility and color lookups.
"""

import pytest

from event_calendar.colors import (
    COLOR_CLASSES,
    DEFAULT_COLOR,
    EventColor,
    color_classes,
    is_color_visible,
    parse_color,
    segment_shape,
)
from event_calendar.visibility import hidden_count, visible_count


class TestVisibleCount:

    def test_one_slot_kept_for_more_button(self):
        assert visible_count(140, 30, 4, 6) == 3
        assert hidden_count(140, 30, 4, 6) == 3

    def test_everything_fits(self):
        assert visible_count(140, 30, 4, 3) == 3
        assert visible_count(140, 30, 4, 4) == 4

    def test_unmeasured_container_shows_everything(self):
        assert visible_count(None, 30, 4, 9) == 9

    def test_zero_height_shows_nothing(self):
        assert visible_count(0, 30, 4, 2) == 0

    def test_non_positive_slot(self):
        assert visible_count(100, 0, 0, 5) == 5

    def test_never_more_than_total(self):
        for height in range(0, 400, 7):
            assert visible_count(height, 24, 4, 5) <= 5

    def test_monotone_in_container_height(self):
        counts = [visible_count(h, 24, 4, 6) for h in range(0, 300)]
        assert counts == sorted(counts)


class TestColors:

    def test_every_color_has_classes(self):
        assert set(COLOR_CLASSES) == set(EventColor)

    def test_default_color(self):
        assert color_classes(None) == COLOR_CLASSES[DEFAULT_COLOR]

    def test_parse_color(self):
        assert parse_color("") is None
        assert parse_color(None) is None
        assert parse_color("Rose") is EventColor.ROSE
        with pytest.raises(ValueError):
            parse_color("chartreuse")

    def test_is_color_visible(self):
        hidden = {EventColor.BLUE}
        assert is_color_visible(None, hidden)
        assert is_color_visible(EventColor.ROSE, hidden)
        assert not is_color_visible(EventColor.BLUE, hidden)

    @pytest.mark.parametrize("first, last, shape", [
        (True, True, "single"),
        (True, False, "start"),
        (False, True, "end"),
        (False, False, "middle"),
    ])
    def test_segment_shape(self, first, last, shape):
        assert segment_shape(first, last) == shape
