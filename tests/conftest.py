# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Django settings come from core.settings (see pyproject.toml).
"""

import pytest
from datetime import datetime

from django.core.cache import cache

from event_calendar.holidays import CACHE_KEY as HOLIDAY_CACHE_KEY
from event_calendar.intervals import Event


@pytest.fixture(autouse=True)
def clear_cache():
    """Rate-limit counters and holiday lists live in the cache; start each test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def no_remote_holidays():
    """Pretend the holiday list was already fetched and is empty."""
    cache.set(HOLIDAY_CACHE_KEY, {}, timeout=None)


@pytest.fixture
def make_event():
    """Factory for core events: make_event("2024-03-01T09:00", "2024-03-01T10:30", id="a")."""
    def _make(start, end, id="1", title="Event", **kwargs):
        if isinstance(start, str):
            start = datetime.fromisoformat(start)
        if isinstance(end, str):
            end = datetime.fromisoformat(end)
        return Event(id=id, title=title, start=start, end=end, **kwargs)
    return _make


@pytest.fixture
def updates():
    """Collects events passed to an on_update/on_add callback."""
    return []
