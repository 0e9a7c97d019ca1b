from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple, Union

from .constants import AGENDA_DAYS_TO_SHOW
from .layout import build_weeks

DateLike = Union[date, datetime]


class CalendarView(str, Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    AGENDA = "agenda"


#Pure helper functions
def add_month(year, month, delta):
    # delta = -1 or +1
    new_month = month + delta
    new_year = year
    if new_month == 0:
        new_month = 12
        new_year -= 1
    elif new_month == 13:
        new_month = 1
        new_year += 1
    return new_year, new_month


def shift_months(reference: DateLike, delta: int) -> DateLike:
    """Move by whole months, clamping the day (Jan 31 + 1 month -> Feb 28/29)."""
    year, month = add_month(reference.year, reference.month, delta)
    _, last_day = monthrange(year, month)
    return reference.replace(year=year, month=month, day=min(reference.day, last_day))


def _as_date(reference: DateLike) -> date:
    return reference.date() if isinstance(reference, datetime) else reference


def week_bounds(reference: DateLike) -> Tuple[date, date]:
    """
    Sunday -> Saturday week containing `reference`.

    Python weekday(): Mon=0..Sun=6, so the Sunday offset is (weekday + 1) % 7.
    """
    day = _as_date(reference)
    sunday_offset = (day.weekday() + 1) % 7
    week_start = day - timedelta(days=sunday_offset)
    return week_start, week_start + timedelta(days=6)


def week_days(reference: DateLike) -> List[date]:
    week_start, _ = week_bounds(reference)
    return [week_start + timedelta(days=i) for i in range(7)]


def month_grid(reference: DateLike) -> List[List[date]]:
    """Sunday -> Saturday rows covering the whole month of `reference`."""
    first_day = date(reference.year, reference.month, 1)
    _, last_day_num = monthrange(reference.year, reference.month)
    last_day = date(reference.year, reference.month, last_day_num)

    grid_start = first_day - timedelta(days=(first_day.weekday() + 1) % 7)
    grid_end = last_day + timedelta(days=(6 - ((last_day.weekday() + 1) % 7)))
    return build_weeks(grid_start, grid_end)


def agenda_days(reference: DateLike, days: int = AGENDA_DAYS_TO_SHOW) -> List[date]:
    start = _as_date(reference)
    return [start + timedelta(days=i) for i in range(days)]


def visible_days(reference: DateLike, view: CalendarView, agenda_window: int = AGENDA_DAYS_TO_SHOW) -> List[date]:
    view = CalendarView(view)
    if view is CalendarView.MONTH:
        return [d for week in month_grid(reference) for d in week]
    if view is CalendarView.WEEK:
        return week_days(reference)
    if view is CalendarView.DAY:
        return [_as_date(reference)]
    return agenda_days(reference, agenda_window)


def previous_date(reference: DateLike, view: CalendarView, agenda_window: int = AGENDA_DAYS_TO_SHOW) -> DateLike:
    return _step(reference, CalendarView(view), -1, agenda_window)


def next_date(reference: DateLike, view: CalendarView, agenda_window: int = AGENDA_DAYS_TO_SHOW) -> DateLike:
    return _step(reference, CalendarView(view), +1, agenda_window)


def today() -> datetime:
    """The current moment, whatever the view."""
    return datetime.now()


def navigate(reference: DateLike, view: CalendarView, direction: str, agenda_window: int = AGENDA_DAYS_TO_SHOW) -> DateLike:
    """direction: "prev", "next" or "today"."""
    if direction == "today":
        return today()
    if direction == "prev":
        return previous_date(reference, view, agenda_window)
    if direction == "next":
        return next_date(reference, view, agenda_window)
    raise ValueError(f"Unknown direction: {direction}")


def _step(reference: DateLike, view: CalendarView, sign: int, agenda_window: int) -> DateLike:
    if view is CalendarView.MONTH:
        return shift_months(reference, sign)
    if view is CalendarView.WEEK:
        return reference + timedelta(days=7 * sign)
    if view is CalendarView.DAY:
        return reference + timedelta(days=sign)
    return reference + timedelta(days=agenda_window * sign)


#Titles
def _month_label(d: date) -> str:
    return f"{d:%B %Y}"


def _month_range_label(start: date, end: date) -> str:
    if (start.year, start.month) == (end.year, end.month):
        return _month_label(start)
    if start.year == end.year:
        return f"{start:%B} - {end:%B %Y}"
    return f"{_month_label(start)} - {_month_label(end)}"


def view_title(reference: DateLike, view: CalendarView, short: bool = False, agenda_window: int = AGENDA_DAYS_TO_SHOW) -> str:
    """
    Header label for the current view.

    month  -> "March 2024"
    week   -> "March 2024", or "March - April 2024" when the week crosses months
    day    -> "Friday, March 1, 2024" ("Mar 1 (Fri)" when short=True)
    agenda -> month range of the agenda window
    """
    view = CalendarView(view)
    day = _as_date(reference)

    if view is CalendarView.WEEK:
        start, end = week_bounds(day)
        return _month_range_label(start, end)

    if view is CalendarView.DAY:
        if short:
            return f"{day:%b} {day.day} ({day:%a})"
        return f"{day:%A, %B} {day.day}, {day.year}"

    if view is CalendarView.AGENDA:
        end = day + timedelta(days=agenda_window - 1)
        return _month_range_label(day, end)

    return _month_label(day)


def parse_view(value: Optional[str], default: CalendarView = CalendarView.MONTH) -> CalendarView:
    try:
        return CalendarView((value or "").strip().lower())
    except ValueError:
        return default
