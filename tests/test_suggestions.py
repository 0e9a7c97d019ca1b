# File: tests/test_suggestions.py
"""
Tests for the suggestion service: validation, rate limiting and the
remote call with its fallback.
"""

import json
import logging
import pytest
from unittest.mock import Mock, patch

import requests

from event_calendar.suggestions import (
    SuggestionRequest,
    check_rate_limit,
    determine_category,
    duration_text,
    suggest_events,
    time_context,
    valid_duration,
    validate_input,
)

VALID = {"date": "2024-04-10", "startTime": "9:00", "endTime": "10:30", "location": "home"}


def api_response(content):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return response


class TestValidation:

    def test_valid_input(self):
        req = validate_input(VALID)
        assert req == SuggestionRequest("2024-04-10", "09:00", "10:30", "home")
        assert req.duration_minutes == 90
        assert req.location_context == "at home"

    @pytest.mark.parametrize("override", [
        {"date": "10/04/2024"},
        {"startTime": "9am"},
        {"endTime": "25:00"},
        {"location": "moon"},
        {"location": "custom", "customLocation": "x" * 51},
        {"date": None},
    ])
    def test_invalid_input(self, override):
        assert validate_input({**VALID, **override}) is None

    def test_custom_location(self):
        req = validate_input({**VALID, "location": "custom", "customLocation": "  Riverside  "})
        assert req.location_context == "Riverside"

    def test_not_a_dict(self):
        assert validate_input(["2024-04-10"]) is None

    @pytest.mark.parametrize("start, end, ok", [
        ("09:00", "09:00", False),
        ("10:00", "09:00", False),
        ("09:00", "21:00", True),
        ("09:00", "21:01", False),
    ])
    def test_duration_bounds(self, start, end, ok):
        assert valid_duration(SuggestionRequest("2024-04-10", start, end, "home")) is ok


class TestText:

    @pytest.mark.parametrize("title, description, category", [
        ("Reading time", "", "relax"),
        ("Online course", "learn a new skill", "learning"),
        ("Evening walk", "", "active"),
        ("Call a friend", "", "social"),
        ("Something", "else", "relax"),
    ])
    def test_determine_category(self, title, description, category):
        assert determine_category(title, description) == category

    def test_duration_text(self):
        assert duration_text(90) == "1h 30min"
        assert duration_text(120) == "2h"
        assert duration_text(45) == "45min"

    def test_time_context(self):
        assert time_context(7) == "morning"
        assert time_context(13) == "afternoon"
        assert time_context(19) == "evening"
        assert time_context(2) == "late night or early morning"


def test_rate_limit_allows_five_per_window():
    results = [check_rate_limit("10.0.0.1") for _ in range(6)]
    assert results == [True] * 5 + [False]
    assert check_rate_limit("10.0.0.2") is True


class TestSuggest:

    @pytest.fixture
    def req(self):
        return validate_input(VALID)

    def test_without_api_key_uses_fallback(self, req, settings, caplog):
        settings.SUGGESTION_API_KEY = ""
        with caplog.at_level(logging.WARNING, logger="event_calendar.suggestions"):
            result = suggest_events(req)

        assert result["metadata"]["source"] == "fallback"
        assert [s.title for s in result["suggestions"]] == ["Reading time", "Walk", "Learning video"]
        assert all(s.location == "at home" for s in result["suggestions"])
        assert "Falling back" in caplog.text

    def test_api_suggestions_are_truncated(self, req, settings):
        settings.SUGGESTION_API_KEY = "test-key"
        content = json.dumps({"suggestions": [
            {"title": "T" * 150, "description": "D" * 300, "location": "L" * 120},
            {"title": "Study session", "description": "learn something"},
            {"title": "Third"},
            {"title": "Fourth is dropped"},
        ]})

        with patch("event_calendar.suggestions.requests.post", return_value=api_response(content)) as post:
            result = suggest_events(req)

        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer test-key"
        first, second, third = result["suggestions"]
        assert len(first.title) == 100
        assert len(first.description) == 200
        assert len(first.location) == 100
        assert second.category == "learning"
        assert second.location == "at home"
        assert third.title == "Third"
        assert result["metadata"]["source"] == "api"
        assert result["metadata"]["duration"] == "1h 30min"

    def test_bare_list_answer(self, req, settings):
        settings.SUGGESTION_API_KEY = "test-key"
        content = json.dumps([{"title": "Walk", "description": "around the block"}])
        with patch("event_calendar.suggestions.requests.post", return_value=api_response(content)):
            result = suggest_events(req)
        assert [s.category for s in result["suggestions"]] == ["active"]

    def test_invalid_json_falls_back(self, req, settings):
        settings.SUGGESTION_API_KEY = "test-key"
        with patch("event_calendar.suggestions.requests.post", return_value=api_response("not json")):
            result = suggest_events(req)
        assert result["metadata"]["source"] == "fallback"

    @pytest.mark.parametrize("content", ['"just text"', "42", "true", "null", '{"suggestions": "none"}'])
    def test_non_list_answer_falls_back(self, req, settings, content):
        settings.SUGGESTION_API_KEY = "test-key"
        with patch("event_calendar.suggestions.requests.post", return_value=api_response(content)):
            result = suggest_events(req)
        assert result["metadata"]["source"] == "fallback"
        assert len(result["suggestions"]) == 3

    def test_request_failure_falls_back(self, req, settings):
        settings.SUGGESTION_API_KEY = "test-key"
        with patch("event_calendar.suggestions.requests.post", side_effect=requests.Timeout("slow")):
            result = suggest_events(req)
        assert result["metadata"]["source"] == "fallback"
        assert len(result["suggestions"]) == 3
