from datetime import date, datetime, time

from .models import CalendarEvent


def get_events_overlapping_range(start_d: date, end_d: date):
    """
    Events that overlap the inclusive date range [start_d, end_d].
    """
    start_dt = datetime.combine(start_d, time.min)
    end_dt = datetime.combine(end_d, time.max)

    return (
        CalendarEvent.objects
        .filter(start_dt__lte=end_dt, end_dt__gte=start_dt)
        .order_by("start_dt")
    )

