from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Sequence, Tuple

from .colors import segment_shape
from .constants import (
    BASE_Z_INDEX,
    CASCADE_INDENT,
    CASCADE_WIDTH,
    END_HOUR,
    MIN_EVENT_HEIGHT,
    START_HOUR,
    WEEK_CELLS_HEIGHT,
)
from .intervals import Event, all_events_for_day, day_start, is_multi_day


@dataclass(frozen=True)
class GridMetrics:
    """Vertical scale of the week/day time grid."""
    start_hour: int = START_HOUR
    end_hour: int = END_HOUR
    cell_height: float = WEEK_CELLS_HEIGHT
    min_height: float = MIN_EVENT_HEIGHT


@dataclass
class PositionedEvent:
    """
    A rendered event block for one day column.

    top/height are pixels relative to the grid's start hour.
    left/width are fractions of the column width (0..1).
    Rebuilt on every layout pass; never stored.
    """
    event: Event
    top: float
    height: float
    column: int
    left: float
    width: float
    z_index: int

    def to_dict(self) -> dict:
        return {
            "event": self.event.to_dict(),
            "top": self.top,
            "height": self.height,
            "column": self.column,
            "left": self.left,
            "width": self.width,
            "z_index": self.z_index,
        }


@dataclass
class AllDaySlot:
    """One day-cell of an all-day/multi-day bar in the header row."""
    event: Event
    day: date
    is_first_day: bool
    is_last_day: bool
    show_title: bool

    @property
    def shape(self) -> str:
        return segment_shape(self.is_first_day, self.is_last_day)

    def to_dict(self) -> dict:
        return {
            "event": self.event.to_dict(),
            "day": self.day.isoformat(),
            "is_first_day": self.is_first_day,
            "is_last_day": self.is_last_day,
            "show_title": self.show_title,
            "shape": self.shape,
        }


@dataclass
class _Column:
    occupants: List[Tuple[datetime, datetime]] = field(default_factory=list)

    def accepts(self, start: datetime, end: datetime) -> bool:
        # closed intervals: touching endpoints collide
        return not any(start <= o_end and o_start <= end for o_start, o_end in self.occupants)


def _hours_from_midnight(dt: datetime, midnight: datetime) -> float:
    minutes = int((dt - midnight).total_seconds() // 60)
    return minutes / 60


def clamp_to_day(event: Event, day: date) -> Tuple[datetime, datetime]:
    """Event bounds cut to [day 00:00, day 00:00 + 24h] for this day's layout."""
    midnight = day_start(day)
    start = event.start if event.start.date() == day else midnight
    end = event.end if event.end.date() == day else midnight + timedelta(hours=24)
    return start, end


def timed_events_for_day(events: Iterable[Event], day: date) -> List[Event]:
    """
    Timed single-day events touching `day`, in packing order:
    start ascending, then longer events first.
    """
    timed = [e for e in all_events_for_day(events, day) if not is_multi_day(e)]
    timed.sort(key=lambda e: (e.start, -(e.end - e.start)))
    return timed


def layout_day(
    events: Iterable[Event],
    day: date,
    metrics: GridMetrics = GridMetrics(),
) -> List[PositionedEvent]:
    """
    Position a day's timed events in overlap columns.

    Greedy first-fit: each event goes into the lowest-index column with no
    overlapping occupant, otherwise a new column opens. This is not a
    minimum-column packing. Column 0 is full width; later columns cascade at
    90% width, indented 10% per column, so the earliest event stays visible.

    Offsets are not clipped to the visible hour range.
    """
    midnight = day_start(day)
    columns: List[_Column] = []
    positioned: List[PositionedEvent] = []

    for e in timed_events_for_day(events, day):
        start, end = clamp_to_day(e, day)

        col_idx = 0
        while col_idx < len(columns) and not columns[col_idx].accepts(start, end):
            col_idx += 1
        if col_idx == len(columns):
            columns.append(_Column())
        columns[col_idx].occupants.append((start, end))

        start_h = _hours_from_midnight(start, midnight)
        end_h = _hours_from_midnight(end, midnight)
        top = (start_h - metrics.start_hour) * metrics.cell_height
        height = max((end_h - start_h) * metrics.cell_height, metrics.min_height)

        positioned.append(PositionedEvent(
            event=e,
            top=top,
            height=height,
            column=col_idx,
            left=0.0 if col_idx == 0 else col_idx * CASCADE_INDENT,
            width=1.0 if col_idx == 0 else CASCADE_WIDTH,
            z_index=BASE_Z_INDEX + col_idx,
        ))

    return positioned


def layout_days(
    events: Sequence[Event],
    days: Iterable[date],
    metrics: GridMetrics = GridMetrics(),
) -> Dict[date, List[PositionedEvent]]:
    """Run layout_day independently for each visible date (week columns)."""
    return {d: layout_day(events, d, metrics) for d in days}


def all_day_rows(events: Sequence[Event], days: Sequence[date]) -> Dict[date, List[AllDaySlot]]:
    """
    Header-row slots for all-day/multi-day events, per visible date.

    No packing: each event simply stacks. The title shows on the event's first
    day, or on the first visible date when the span started before the range.
    """
    spanning = [e for e in events if is_multi_day(e)]
    first_visible = days[0] if days else None
    rows: Dict[date, List[AllDaySlot]] = {}

    for d in days:
        slots = []
        for e in all_events_for_day(spanning, d):
            is_first = e.start.date() == d
            carried_in = d == first_visible and e.start.date() < first_visible
            slots.append(AllDaySlot(
                event=e,
                day=d,
                is_first_day=is_first,
                is_last_day=e.end.date() == d,
                show_title=is_first or carried_in,
            ))
        rows[d] = slots
    return rows


def current_time_position(
    now: datetime,
    visible_days: Sequence[date],
    metrics: GridMetrics = GridMetrics(),
) -> Tuple[float, bool]:
    """
    Percentage offset (0..100) of `now` inside the hour range, and whether the
    indicator should be drawn at all (today is one of the visible days).
    """
    span_minutes = (metrics.end_hour - metrics.start_hour) * 60
    from_start = (now.hour - metrics.start_hour) * 60 + now.minute
    position = from_start / span_minutes * 100 if span_minutes > 0 else 0.0
    return position, now.date() in set(visible_days)


def build_weeks(grid_start: date, grid_end: date) -> list[list[date]]:
    days = []
    d = grid_start
    while d <= grid_end:
        days.append(d)
        d += timedelta(days=1)
    return [days[i:i+7] for i in range(0, len(days), 7)]
