"""
Drag-to-reschedule state machine.

    IDLE -> DRAGGING -> (COMMITTING | CANCELLED) -> IDLE

Payload contract (wire format, camelCase as sent by the browser):

  pick-up  {"event": {...}, "originView": "month"|"week"|"day",
            "heightHint"?: px, "isMultiDay"?: bool, "multiDayWidthHint"?: %,
            "handleOffset"?: {"x", "y", "isFirstDay", "isLastDay"}}
  target   {"date": "YYYY-MM-DD", "hourFraction"?: 9.5}

week/day targets snap to 15 minutes; month targets (or targets without an hour)
only move the date and keep the time of day.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .constants import (
    DRAG_SNAP_MINUTES,
    POINTER_ACTIVATION_DISTANCE,
    TOUCH_ACTIVATION_DELAY_MS,
    TOUCH_ACTIVATION_TOLERANCE,
)
from .exceptions import PayloadError
from .intervals import Event, is_multi_day
from .navigation import CalendarView
from .snapping import snap_datetime

logger = logging.getLogger(__name__)

DRAG_VIEWS = (CalendarView.MONTH, CalendarView.WEEK, CalendarView.DAY)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"
    CANCELLED = "cancelled"


def activation_reached(pointer_type: str, distance_px: float, elapsed_ms: float = 0) -> bool:
    """
    Whether a pointer-down-and-move has become a drag.

      mouse/pen/pointer -> moved at least 5px
      touch             -> held 250ms without drifting more than 5px
    """
    if pointer_type == "touch":
        return elapsed_ms >= TOUCH_ACTIVATION_DELAY_MS and distance_px <= TOUCH_ACTIVATION_TOLERANCE
    return distance_px >= POINTER_ACTIVATION_DISTANCE


@dataclass(frozen=True)
class DropTarget:
    date: date
    hour_fraction: Optional[float] = None

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "DropTarget":
        if not payload or not payload.get("date"):
            raise PayloadError("Drop target is missing its date")
        raw_date = payload["date"]
        try:
            if isinstance(raw_date, datetime):
                day = raw_date.date()
            elif isinstance(raw_date, date):
                day = raw_date
            else:
                day = datetime.fromisoformat(str(raw_date)).date()
            hour = payload.get("hourFraction")
            hour = None if hour is None or hour == "" else float(hour)
        except (TypeError, ValueError) as e:
            raise PayloadError(f"Malformed drop target: {e}") from e
        if hour is not None and not math.isfinite(hour):
            raise PayloadError(f"Drop target hour is not a finite number: {hour!r}")
        return cls(date=day, hour_fraction=hour)


@dataclass
class DragSession:
    """The single in-flight drag. Lives from pick-up until drop/cancel."""
    subject_event: Event
    origin_view: CalendarView
    provisional_time: datetime
    is_multi_day: bool = False
    width_hint: Optional[float] = None
    height_hint: Optional[float] = None
    handle_offset: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.subject_event.to_dict(),
            "originView": self.origin_view.value,
            "provisionalTime": self.provisional_time.isoformat(),
            "isMultiDay": self.is_multi_day,
            "multiDayWidthHint": self.width_hint,
            "heightHint": self.height_hint,
            "handleOffset": dict(self.handle_offset),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DragSession":
        return cls(
            subject_event=Event.from_dict(data["event"]),
            origin_view=CalendarView(data["originView"]),
            provisional_time=datetime.fromisoformat(data["provisionalTime"]),
            is_multi_day=bool(data.get("isMultiDay", False)),
            width_hint=data.get("multiDayWidthHint"),
            height_hint=data.get("heightHint"),
            handle_offset=dict(data.get("handleOffset") or {}),
        )


class DragSessionManager:
    """
    Owns at most one DragSession and runs its transitions.

    The manager is handed to whoever needs it (views, tests); nothing is global.
    `on_update` receives the moved event when a drop actually changes the start.
    """

    def __init__(self, on_update: Callable[[Event], Any], session: Optional[DragSession] = None):
        self.on_update = on_update
        self._session = session
        self._state = DragState.DRAGGING if session else DragState.IDLE
        self.last_outcome: Optional[DragState] = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def is_suppressed(self, event_id: str) -> bool:
        """True while `event_id` is being dragged; its normal render is hidden."""
        return self._session is not None and self._session.subject_event.id == event_id

    #Transitions
    def pick_up(self, payload: Dict[str, Any]) -> Optional[DragSession]:
        raw_event = (payload or {}).get("event")
        if not raw_event:
            logger.error("Drag start without event data: %r", payload)
            return None

        try:
            event = raw_event if isinstance(raw_event, Event) else Event.from_dict(raw_event)
            view = CalendarView(payload["originView"])
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Drag start with malformed payload (%s): %r", e, payload)
            return None

        if view not in DRAG_VIEWS:
            logger.error("Drag start from unsupported view %r", view.value)
            return None

        if self._session is not None:
            logger.warning("Drag of %r replaced an unfinished drag of %r",
                           event.id, self._session.subject_event.id)
            self._reset(DragState.CANCELLED)

        self._session = DragSession(
            subject_event=event,
            origin_view=view,
            provisional_time=event.start,
            is_multi_day=bool(payload.get("isMultiDay", is_multi_day(event))),
            width_hint=payload.get("multiDayWidthHint"),
            height_hint=payload.get("heightHint"),
            handle_offset=dict(payload.get("handleOffset") or {}),
        )
        self._state = DragState.DRAGGING
        logger.debug("Drag started: %s from %s view", event.id, view.value)
        return self._session

    def hover(self, target_payload: Optional[Dict[str, Any]]) -> Optional[datetime]:
        """
        Move the provisional start under the pointer. Returns the provisional time
        (unchanged when the target resolves to the same value).

        No target at all (pointer between cells) leaves the session alone; a
        target that lacks its date cancels the drag.
        """
        if self._session is None:
            return None
        if target_payload is None:
            return self._session.provisional_time
        try:
            target = DropTarget.from_payload(target_payload)
        except PayloadError as e:
            logger.warning("Drag of %r cancelled on hover: %s", self._session.subject_event.id, e)
            self.cancel()
            return None

        candidate = self._resolve_start(target)
        if candidate != self._session.provisional_time:
            self._session.provisional_time = candidate
        return self._session.provisional_time

    def drop(self, target_payload: Optional[Dict[str, Any]]) -> Optional[Event]:
        """
        Finish the drag. The new start is recomputed from the drop payload itself,
        the duration from the original event. Returns the emitted event, or None
        when nothing moved or the drag was cancelled.
        """
        if self._session is None:
            logger.warning("Drop received with no active drag")
            return None

        try:
            target = DropTarget.from_payload(target_payload)
        except PayloadError as e:
            logger.warning("Drag of %r cancelled: %s", self._session.subject_event.id, e)
            self.cancel()
            return None

        self._state = DragState.COMMITTING
        session = self._session
        try:
            original = session.subject_event
            new_start = self._resolve_start(target)
            new_end = new_start + (original.end - original.start)

            if _same_minute(new_start, original.start):
                logger.debug("Drop of %r landed on its own start; nothing to update", original.id)
                return None

            moved = original.moved_to(new_start, new_end)
            self.on_update(moved)
            return moved
        finally:
            self._reset(DragState.COMMITTING)

    def cancel(self) -> None:
        if self._session is not None:
            logger.info("Drag of %r cancelled", self._session.subject_event.id)
        self._reset(DragState.CANCELLED)

    #Overlay
    def overlay(self) -> Optional[Dict[str, Any]]:
        """What the drag ghost should draw; None when idle."""
        s = self._session
        if s is None:
            return None
        return {
            "event": s.subject_event.to_dict(),
            "view": s.origin_view.value,
            "provisional_time": s.provisional_time.isoformat(),
            "show_time": s.origin_view is not CalendarView.MONTH,
            "height": s.height_hint,
            "width": s.width_hint if s.is_multi_day and s.width_hint else 100,
            "is_first_day": s.handle_offset.get("isFirstDay") is not False,
            "is_last_day": s.handle_offset.get("isLastDay") is not False,
        }

    #Internals
    def _resolve_start(self, target: DropTarget) -> datetime:
        session = self._session
        if target.hour_fraction is not None and session.origin_view is not CalendarView.MONTH:
            return snap_datetime(target.date, target.hour_fraction, DRAG_SNAP_MINUTES)
        # date-only move: keep the time of day carried by the provisional time
        return datetime.combine(target.date, session.provisional_time.time())

    def _reset(self, outcome: DragState) -> None:
        self._session = None
        self._state = DragState.IDLE
        self.last_outcome = outcome


def _same_minute(a: datetime, b: datetime) -> bool:
    return a.replace(second=0, microsecond=0) == b.replace(second=0, microsecond=0)
