# File: tests/test_navigation.py
"""
Unit tests for view navigation, visible ranges and header titles.
"""

import pytest
from datetime import date, datetime

from event_calendar.navigation import (
    CalendarView,
    agenda_days,
    month_grid,
    navigate,
    next_date,
    parse_view,
    previous_date,
    shift_months,
    view_title,
    visible_days,
    week_bounds,
)
from event_calendar.shortcuts import view_for_key


class TestRanges:

    def test_week_starts_on_sunday(self):
        assert week_bounds(date(2024, 3, 6)) == (date(2024, 3, 3), date(2024, 3, 9))
        assert week_bounds(date(2024, 3, 3)) == (date(2024, 3, 3), date(2024, 3, 9))

    def test_month_grid_covers_full_weeks(self):
        weeks = month_grid(date(2024, 3, 15))

        assert len(weeks) == 6
        assert all(len(w) == 7 for w in weeks)
        assert weeks[0][0] == date(2024, 2, 25)
        assert weeks[-1][-1] == date(2024, 4, 6)

    def test_visible_days_per_view(self):
        ref = date(2024, 3, 6)
        assert len(visible_days(ref, CalendarView.WEEK)) == 7
        assert visible_days(ref, CalendarView.DAY) == [ref]
        assert len(visible_days(ref, CalendarView.AGENDA)) == 30
        assert visible_days(ref, CalendarView.MONTH)[0] == date(2024, 2, 25)

    def test_agenda_window(self):
        days = agenda_days(date(2024, 3, 1), 3)
        assert days == [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)]


class TestStepping:

    def test_month_step_clamps_day(self):
        assert shift_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert shift_months(date(2024, 1, 15), -1) == date(2023, 12, 15)

    @pytest.mark.parametrize("view, expected_next, expected_prev", [
        (CalendarView.MONTH, date(2024, 4, 6), date(2024, 2, 6)),
        (CalendarView.WEEK, date(2024, 3, 13), date(2024, 2, 28)),
        (CalendarView.DAY, date(2024, 3, 7), date(2024, 3, 5)),
        (CalendarView.AGENDA, date(2024, 4, 5), date(2024, 2, 5)),
    ])
    def test_prev_next(self, view, expected_next, expected_prev):
        ref = date(2024, 3, 6)
        assert next_date(ref, view) == expected_next
        assert previous_date(ref, view) == expected_prev

    def test_navigate_today(self):
        result = navigate(date(2020, 1, 1), CalendarView.WEEK, "today")
        assert isinstance(result, datetime)
        assert result.date() == date.today()

    def test_navigate_rejects_unknown_direction(self):
        with pytest.raises(ValueError):
            navigate(date(2024, 3, 6), CalendarView.DAY, "sideways")


class TestTitles:

    def test_month(self):
        assert view_title(date(2024, 3, 6), CalendarView.MONTH) == "March 2024"

    def test_week_within_month(self):
        assert view_title(date(2024, 3, 6), CalendarView.WEEK) == "March 2024"

    def test_week_across_months(self):
        assert view_title(date(2024, 4, 2), CalendarView.WEEK) == "March - April 2024"

    def test_week_across_years(self):
        assert view_title(date(2024, 12, 30), CalendarView.WEEK) == "December 2024 - January 2025"

    def test_day(self):
        assert view_title(date(2024, 3, 1), CalendarView.DAY) == "Friday, March 1, 2024"
        assert view_title(date(2024, 3, 1), CalendarView.DAY, short=True) == "Mar 1 (Fri)"

    def test_agenda(self):
        assert view_title(date(2024, 3, 20), CalendarView.AGENDA) == "March - April 2024"


def test_parse_view():
    assert parse_view("Week") is CalendarView.WEEK
    assert parse_view("bogus") is CalendarView.MONTH
    assert parse_view(None, default=CalendarView.DAY) is CalendarView.DAY


class TestShortcuts:

    @pytest.mark.parametrize("key, view", [
        ("m", CalendarView.MONTH),
        ("W", CalendarView.WEEK),
        ("d", CalendarView.DAY),
        ("a", CalendarView.AGENDA),
    ])
    def test_view_keys(self, key, view):
        assert view_for_key(key) is view

    def test_unknown_key(self):
        assert view_for_key("x") is None

    def test_suppressed_while_modal_open(self):
        assert view_for_key("m", modal_open=True) is None

    def test_suppressed_while_typing(self):
        assert view_for_key("m", target_tag="INPUT") is None
        assert view_for_key("w", target_tag="textarea") is None
        assert view_for_key("d", target_editable=True) is None
