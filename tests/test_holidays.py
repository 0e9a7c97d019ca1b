# File: tests/test_holidays.py
"""
Tests for the remote holiday list and its import command.
"""

import logging
import pytest
from datetime import date, datetime
from io import StringIO
from unittest.mock import Mock, patch

import requests
from django.core.management import call_command
from django.core.management.base import CommandError

from event_calendar.colors import EventColor
from event_calendar.holidays import get_cached_holidays, holidays_in_range, holidays_to_events
from event_calendar.models import CalendarEvent


def fake_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestRemote:

    def test_holidays_to_events(self, caplog):
        with caplog.at_level(logging.WARNING, logger="event_calendar.holidays"):
            events = holidays_to_events({"2024-01-01": "New Year's Day", "soon": "Broken"})

        (event,) = events
        assert event.title == "New Year's Day"
        assert event.id == "holiday:2024-01-01"
        assert event.all_day
        assert event.start == datetime(2024, 1, 1, 0, 0)
        assert event.end.date() == date(2024, 1, 1)
        assert event.color is EventColor.ROSE
        assert event.description == "Public holiday: New Year's Day"
        assert "malformed" in caplog.text

    def test_holidays_in_range(self):
        payload = {"2024-02-11": "Foundation Day", "2024-03-20": "Vernal Equinox Day", "2024-04-29": "Showa Day"}
        with patch("event_calendar.holidays.requests.get", return_value=fake_response(payload)):
            events = holidays_in_range(date(2024, 3, 1), date(2024, 4, 29))
        assert [e.title for e in events] == ["Vernal Equinox Day", "Showa Day"]

    def test_fetch_is_cached(self):
        payload = {"2024-01-01": "New Year's Day"}
        with patch("event_calendar.holidays.requests.get", return_value=fake_response(payload)) as get:
            assert get_cached_holidays() == payload
            assert get_cached_holidays() == payload
        assert get.call_count == 1

    def test_failed_fetch_logs_and_returns_empty(self, caplog):
        with patch("event_calendar.holidays.requests.get", side_effect=requests.ConnectionError("offline")) as get:
            with caplog.at_level(logging.ERROR, logger="event_calendar.holidays"):
                assert get_cached_holidays() == {}
                assert get_cached_holidays() == {}

        # failures are not cached
        assert get.call_count == 2
        assert "Failed to fetch holiday data" in caplog.text

    def test_non_object_payload_is_rejected(self):
        with patch("event_calendar.holidays.requests.get", return_value=fake_response(["2024-01-01"])):
            assert get_cached_holidays() == {}


@pytest.mark.django_db
class TestImportCommand:

    def test_import_is_idempotent(self):
        payload = {"2024-01-01": "New Year's Day", "2025-01-01": "New Year's Day"}
        with patch("event_calendar.holidays.requests.get", return_value=fake_response(payload)):
            call_command("import_holidays", year=2024, stdout=StringIO())
            out = StringIO()
            call_command("import_holidays", year=2024, stdout=out)

        row = CalendarEvent.objects.get()
        assert row.event_type == "holiday"
        assert row.external_event_id == "holiday:2024-01-01"
        assert row.all_day
        assert row.color == "rose"
        assert "Imported 0 new holidays, updated 1" in out.getvalue()

    def test_fetch_failure_is_a_command_error(self):
        with patch("event_calendar.holidays.requests.get", side_effect=requests.ConnectionError("offline")):
            with pytest.raises(CommandError):
                call_command("import_holidays")
