# File: tests/test_layout.py
"""
Unit tests for the week/day time-grid layout and the all-day header rows.
"""

import pytest
from datetime import date, datetime
from itertools import combinations

from event_calendar.intervals import normalize_all_day
from event_calendar.layout import (
    GridMetrics,
    all_day_rows,
    current_time_position,
    layout_day,
    layout_days,
)

DAY = date(2024, 3, 1)


def by_id(positioned):
    return {p.event.id: p for p in positioned}


class TestColumns:

    def test_nested_overlap_goes_to_second_column(self, make_event):
        first = make_event("2024-03-01T09:00", "2024-03-01T10:30", id="first")
        second = make_event("2024-03-01T09:30", "2024-03-01T09:45", id="second")

        placed = by_id(layout_day([second, first], DAY))

        assert placed["first"].column == 0
        assert placed["first"].left == 0.0
        assert placed["first"].width == 1.0
        assert placed["first"].top == 9 * 72
        assert placed["first"].height == 1.5 * 72

        assert placed["second"].column == 1
        assert placed["second"].left == pytest.approx(0.1)
        assert placed["second"].width == pytest.approx(0.9)
        assert placed["second"].top == 9.5 * 72
        assert placed["second"].height == 0.25 * 72
        assert placed["second"].z_index == placed["first"].z_index + 1

    def test_disjoint_events_share_column_zero(self, make_event):
        events = [
            make_event("2024-03-01T09:00", "2024-03-01T10:00", id="a"),
            make_event("2024-03-01T11:00", "2024-03-01T12:00", id="b"),
            make_event("2024-03-01T13:00", "2024-03-01T13:30", id="c"),
        ]
        assert {p.column for p in layout_day(events, DAY)} == {0}

    def test_touching_events_do_not_share_a_column(self, make_event):
        events = [
            make_event("2024-03-01T09:00", "2024-03-01T10:00", id="a"),
            make_event("2024-03-01T10:00", "2024-03-01T11:00", id="b"),
        ]
        placed = by_id(layout_day(events, DAY))
        assert placed["a"].column == 0
        assert placed["b"].column == 1

    def test_first_fit_reuses_lowest_free_column(self, make_event):
        events = [
            make_event("2024-03-01T09:00", "2024-03-01T10:00", id="a"),
            make_event("2024-03-01T09:30", "2024-03-01T11:00", id="b"),
            make_event("2024-03-01T10:30", "2024-03-01T11:30", id="c"),
        ]
        placed = by_id(layout_day(events, DAY))
        assert (placed["a"].column, placed["b"].column, placed["c"].column) == (0, 1, 0)

    def test_longer_event_is_packed_first_on_equal_start(self, make_event):
        events = [
            make_event("2024-03-01T09:00", "2024-03-01T09:30", id="short"),
            make_event("2024-03-01T09:00", "2024-03-01T11:00", id="long"),
        ]
        placed = by_id(layout_day(events, DAY))
        assert placed["long"].column == 0
        assert placed["short"].column == 1

    def test_overlapping_events_never_share_a_column(self, make_event):
        starts = ["08:00", "08:30", "09:00", "09:15", "10:00", "10:05", "12:00", "12:00"]
        ends = ["09:00", "10:00", "09:30", "11:00", "10:30", "10:10", "13:00", "12:30"]
        events = [
            make_event(f"2024-03-01T{s}", f"2024-03-01T{e}", id=str(i))
            for i, (s, e) in enumerate(zip(starts, ends))
        ]
        placed = layout_day(events, DAY)

        assert len(placed) == len(events)
        for p, q in combinations(placed, 2):
            if p.event.start <= q.event.end and q.event.start <= p.event.end:
                assert p.column != q.column


class TestGeometry:

    def test_short_event_gets_minimum_height(self, make_event):
        event = make_event("2024-03-01T09:00", "2024-03-01T09:05")
        (placed,) = layout_day([event], DAY)
        assert placed.height == 12

    def test_offsets_follow_start_hour(self, make_event):
        event = make_event("2024-03-01T09:00", "2024-03-01T10:00")
        metrics = GridMetrics(start_hour=8, end_hour=20, cell_height=60, min_height=10)
        (placed,) = layout_day([event], DAY, metrics)
        assert placed.top == 60
        assert placed.height == 60

    def test_events_before_start_hour_are_not_clipped(self, make_event):
        event = make_event("2024-03-01T06:00", "2024-03-01T07:00")
        metrics = GridMetrics(start_hour=8, end_hour=20, cell_height=60, min_height=10)
        (placed,) = layout_day([event], DAY, metrics)
        assert placed.top == -120

    def test_layout_is_repeatable(self, make_event):
        events = [
            make_event("2024-03-01T09:00", "2024-03-01T10:30", id="a"),
            make_event("2024-03-01T09:30", "2024-03-01T09:45", id="b"),
        ]
        first = [p.to_dict() for p in layout_day(events, DAY)]
        second = [p.to_dict() for p in layout_day(events, DAY)]
        assert first == second


class TestMultiDay:

    def test_multi_day_events_stay_out_of_the_time_grid(self, make_event):
        span = make_event("2024-03-01T22:00", "2024-03-02T02:00", id="span")
        timed = make_event("2024-03-01T09:00", "2024-03-01T10:00", id="timed")

        days = [date(2024, 3, 1), date(2024, 3, 2)]
        grid = layout_days([span, timed], days)

        assert [p.event.id for p in grid[days[0]]] == ["timed"]
        assert grid[days[1]] == []

    def test_all_day_rows_segments(self, make_event):
        event = normalize_all_day(make_event("2024-03-01T00:00", "2024-03-04T00:00", id="trip", all_day=True))
        days = [date(2024, 3, d) for d in range(3, 10)]  # Sun Mar 3 .. Sat Mar 9

        rows = all_day_rows([event], days)

        first = rows[date(2024, 3, 3)][0]
        assert first.is_first_day is False
        assert first.show_title is True  # carried in from before the range
        assert first.shape == "middle"

        last = rows[date(2024, 3, 4)][0]
        assert last.is_last_day is True
        assert last.show_title is False
        assert last.shape == "end"

        assert rows[date(2024, 3, 5)] == []

    def test_single_day_all_day_slot(self, make_event):
        event = normalize_all_day(make_event("2024-03-05T00:00", "2024-03-05T00:00", id="x", all_day=True))
        rows = all_day_rows([event], [date(2024, 3, 5)])
        slot = rows[date(2024, 3, 5)][0]
        assert slot.show_title and slot.shape == "single"


class TestCurrentTime:

    def test_noon_is_halfway(self):
        position, visible = current_time_position(datetime(2024, 3, 1, 12, 0), [date(2024, 3, 1)])
        assert position == 50.0
        assert visible is True

    def test_hidden_when_today_not_in_view(self):
        _, visible = current_time_position(datetime(2024, 3, 1, 12, 0), [date(2024, 3, 2)])
        assert visible is False

    def test_respects_hour_range(self):
        metrics = GridMetrics(start_hour=8, end_hour=18)
        position, _ = current_time_position(datetime(2024, 3, 1, 13, 0), [date(2024, 3, 1)], metrics)
        assert position == 50.0
