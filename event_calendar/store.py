"""
Persistence callbacks handed to CalendarController and DragSessionManager.

Each one takes/returns intervals.Event; the database row never leaves here.
"""
import logging

from django.http import Http404
from django.shortcuts import get_object_or_404

from .intervals import Event
from .models import CalendarEvent

logger = logging.getLogger(__name__)


def _row_for(event_id: str) -> CalendarEvent:
    # non-numeric ids (holidays, unsaved events) are never stored rows
    if not str(event_id).isdigit():
        raise Http404(f"No stored event with id {event_id!r}")
    return get_object_or_404(CalendarEvent, id=int(event_id))


def add_event(event: Event) -> Event:
    row = CalendarEvent().apply_event(event)
    row.save()
    logger.info("Created event %s: %s", row.pk, row.title)
    return row.to_event()


def update_event(event: Event) -> Event:
    row = _row_for(event.id)
    row.apply_event(event)
    row.save()
    logger.info("Updated event %s: %s -> %s", row.pk, row.start_dt, row.end_dt)
    return row.to_event()


def delete_event(event_id: str) -> None:
    row = _row_for(event_id)
    row.delete()
    logger.info("Deleted event %s", event_id)
