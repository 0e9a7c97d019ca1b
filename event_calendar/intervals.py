from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional

from .colors import EventColor
from .exceptions import InvalidIntervalError

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class Event:
    """
    A time-bounded calendar event (naive local wall-clock times).

    id == "" means the event has not been persisted yet; the host assigns ids.
    """
    id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    description: Optional[str] = None
    color: Optional[EventColor] = None
    location: Optional[str] = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_persisted(self) -> bool:
        return bool(self.id)

    def moved_to(self, start: datetime, end: datetime) -> "Event":
        return replace(self, start=start, end=end)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description or "",
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "all_day": self.all_day,
            "color": self.color.value if self.color else None,
            "location": self.location or "",
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        color = data.get("color")
        return cls(
            id=str(data.get("id") or ""),
            title=data.get("title") or "",
            description=data.get("description") or None,
            start=_as_datetime(data["start"]),
            end=_as_datetime(data["end"]),
            all_day=bool(data.get("all_day", False)),
            color=EventColor(color) if color else None,
            location=data.get("location") or None,
        )


def _as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def validate_interval(event: Event) -> Event:
    """Reject events that end before they start. Zero-length events are allowed."""
    if event.end < event.start:
        raise InvalidIntervalError(
            f"Event end ({event.end:%Y-%m-%d %H:%M}) is before its start "
            f"({event.start:%Y-%m-%d %H:%M}): {event.title!r}"
        )
    return event


def normalize_all_day(event: Event) -> Event:
    """
    Stretch an all-day event over whole calendar days: 00:00:00 of the start day
    through 23:59:59.999 of the end day. Timed events are returned unchanged.

    Idempotent: normalizing twice gives the same event.
    """
    if not event.all_day:
        return event
    start = datetime.combine(event.start.date(), time.min)
    end = datetime.combine(event.end.date(), END_OF_DAY)
    if start == event.start and end == event.end:
        return event
    return replace(event, start=start, end=end)


def is_multi_day(event: Event) -> bool:
    """All-day events always count, even when they cover a single date."""
    return event.all_day or event.start.date() != event.end.date()


def overlaps(a: Event, b: Event) -> bool:
    """
    Closed-interval intersection.

    Touching endpoints overlap: 09:00-10:00 and 10:00-11:00 are placed in
    separate columns rather than stacked flush.
    """
    return a.start <= b.end and b.start <= a.end


def _covers_interior(event: Event, day: date) -> bool:
    midnight = day_start(day)
    return event.start < midnight < event.end


def events_for_day(events: Iterable[Event], day: date) -> List[Event]:
    """Events that start on `day`, earliest first."""
    return sorted((e for e in events if e.start.date() == day), key=lambda e: e.start)


def spanning_events_for_day(events: Iterable[Event], day: date) -> List[Event]:
    """
    Multi-day events for which `day` is an interior day or the last day.

    The start day is left out on purpose; events_for_day already returns it.
    """
    out = []
    for e in events:
        if not is_multi_day(e):
            continue
        if e.start.date() == day:
            continue
        if e.end.date() == day or _covers_interior(e, day):
            out.append(e)
    return out


def all_events_for_day(events: Iterable[Event], day: date) -> List[Event]:
    """Every event visible on `day`: starts, ends, or runs through it."""
    return [
        e for e in events
        if e.start.date() == day or e.end.date() == day or _covers_interior(e, day)
    ]


def agenda_events_for_day(events: Iterable[Event], day: date) -> List[Event]:
    return sorted(all_events_for_day(events, day), key=lambda e: e.start)


def sort_for_display(events: Iterable[Event]) -> List[Event]:
    """Multi-day/all-day events first, then timed ones; each group by start time."""
    return sorted(events, key=lambda e: (not is_multi_day(e), e.start))
