from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Dict, List

import requests
from django.conf import settings
from django.core.cache import cache

from .colors import EventColor
from .intervals import Event, normalize_all_day

logger = logging.getLogger(__name__)

CACHE_KEY = "holidays:v1"
CACHE_SECONDS = 24 * 60 * 60  # the list changes a few times a year
DEFAULT_HOLIDAY_API_URL = "https://holidays-jp.github.io/api/v1/date.json"
HOLIDAY_COLOR = EventColor.ROSE


def holiday_event_id(day: date) -> str:
    return f"holiday:{day.isoformat()}"


#Remote holiday list
def fetch_holidays() -> Dict[str, str]:
    """
    Download the {"YYYY-MM-DD": "name"} holiday map.

    Raises requests.RequestException (or ValueError for a non-JSON body);
    callers that want a safe default use get_cached_holidays().
    """
    url = getattr(settings, "HOLIDAY_API_URL", DEFAULT_HOLIDAY_API_URL)
    r = requests.get(url, timeout=10)
    r.raise_for_status()
    data = r.json()
    if not isinstance(data, dict):
        raise ValueError(f"Holiday API returned {type(data).__name__}, expected an object")
    return {str(k): str(v) for k, v in data.items()}


def get_cached_holidays() -> Dict[str, str]:
    """
    Cached holiday map. A failed fetch is logged and yields {} so the
    calendar still renders; failures are not cached, the next call retries.
    """
    cached = cache.get(CACHE_KEY)
    if cached is not None:
        return cached

    try:
        fresh = fetch_holidays()
    except (requests.RequestException, ValueError) as e:
        logger.error("Failed to fetch holiday data: %s", e)
        return {}

    cache.set(CACHE_KEY, fresh, timeout=CACHE_SECONDS)
    return fresh


def holidays_to_events(holidays: Dict[str, str]) -> List[Event]:
    """Turn the holiday map into all-day events. Keys that are not dates are skipped."""
    events = []
    for key, name in sorted(holidays.items()):
        try:
            day = date.fromisoformat(key)
        except ValueError:
            logger.warning("Skipping holiday with malformed date %r", key)
            continue
        events.append(_holiday_event(day, name))
    return events


def _holiday_event(day: date, title: str) -> Event:
    start = datetime.combine(day, time.min)
    return normalize_all_day(Event(
        id=holiday_event_id(day),
        title=title,
        description=f"Public holiday: {title}",
        start=start,
        end=start,
        all_day=True,
        color=HOLIDAY_COLOR,
    ))


def holidays_in_range(start_d: date, end_d: date) -> List[Event]:
    """Remote holidays falling inside [start_d, end_d], by date."""
    return [
        e for e in holidays_to_events(get_cached_holidays())
        if start_d <= e.start.date() <= end_d
    ]
