"""
Event suggestions for an empty slot.

A chat-completions style API is asked for three ideas that fit the slot's
date, time window and location; anything that goes wrong on that side falls
back to a fixed list so the dialog always has something to offer.
"""
from __future__ import annotations

import json
import logging
import re
import time as time_module
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings
from django.core.cache import cache

from .commands import Suggestion
from .exceptions import SuggestionServiceError

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_SUGGESTION_MODEL = "gpt-4o-mini"

RATE_LIMIT_REQUESTS = 5
RATE_LIMIT_WINDOW = 60  # seconds

MAX_SUGGESTIONS = 3
MAX_TITLE = 100
MAX_DESCRIPTION = 200
MAX_LOCATION = 100
MAX_CUSTOM_LOCATION = 50
MAX_DURATION_MINUTES = 12 * 60

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^\d{1,2}:\d{2}$")

LOCATION_CONTEXTS = {
    "anywhere": "anywhere",
    "home": "at home",
    "nearby": "nearby, within walking distance",
    "outdoor": "outdoors or in a park",
    "cafe": "a cafe or shop",
    "library": "a library or other quiet place",
    "gym": "a gym or sports facility",
    "custom": "",
}

CATEGORY_KEYWORDS = [
    ("relax", ("read", "relax", "rest", "meditat")),
    ("learning", ("learn", "study", "skill", "video", "course")),
    ("active", ("walk", "exercise", "run", "jog", "stretch", "workout")),
    ("social", ("friend", "cafe", "people", "call", "message", "meet")),
]


@dataclass(frozen=True)
class SuggestionRequest:
    date: str
    start_time: str
    end_time: str
    location: str
    custom_location: Optional[str] = None

    @property
    def duration_minutes(self) -> int:
        start = datetime.strptime(self.start_time, "%H:%M")
        end = datetime.strptime(self.end_time, "%H:%M")
        return int((end - start).total_seconds() // 60)

    @property
    def location_context(self) -> str:
        if self.location == "custom":
            return self.custom_location or "a place of your choice"
        return LOCATION_CONTEXTS.get(self.location, "anywhere")


def validate_input(body: Dict[str, Any]) -> Optional[SuggestionRequest]:
    """
    Checked request, or None when any field is missing or malformed.

    The time range itself is checked separately (valid_duration) so the view
    can report it with its own message.
    """
    if not isinstance(body, dict):
        return None
    date_s = body.get("date")
    start_s = body.get("startTime")
    end_s = body.get("endTime")
    location = body.get("location")
    custom = body.get("customLocation")

    if not all(isinstance(v, str) for v in (date_s, start_s, end_s, location)):
        return None
    if not DATE_RE.match(date_s):
        return None
    if not TIME_RE.match(start_s) or not TIME_RE.match(end_s):
        return None
    if location not in LOCATION_CONTEXTS:
        return None
    if location == "custom" and isinstance(custom, str) and len(custom) > MAX_CUSTOM_LOCATION:
        return None

    try:
        datetime.strptime(date_s, "%Y-%m-%d")
        start_t = datetime.strptime(start_s.strip(), "%H:%M")
        end_t = datetime.strptime(end_s.strip(), "%H:%M")
    except ValueError:
        return None

    return SuggestionRequest(
        date=date_s.strip(),
        start_time=start_t.strftime("%H:%M"),
        end_time=end_t.strftime("%H:%M"),
        location=location.strip(),
        custom_location=custom.strip()[:MAX_CUSTOM_LOCATION] if isinstance(custom, str) else None,
    )


def valid_duration(req: SuggestionRequest) -> bool:
    return 0 < req.duration_minutes <= MAX_DURATION_MINUTES


def duration_text(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"{hours}h {mins}min"
    if hours:
        return f"{hours}h"
    return f"{mins}min"


def time_context(hour: int) -> str:
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "late night or early morning"


def determine_category(title: str, description: str) -> str:
    text = f"{title} {description}".lower()
    for category, words in CATEGORY_KEYWORDS:
        if any(w in text for w in words):
            return category
    return "relax"


def check_rate_limit(client_key: str) -> bool:
    """
    Sliding-window limit per client (IP), kept in the Django cache.
    Returns False when the request should be refused.
    """
    limit = int(getattr(settings, "SUGGESTION_RATE_LIMIT", RATE_LIMIT_REQUESTS))
    window = int(getattr(settings, "SUGGESTION_RATE_WINDOW", RATE_LIMIT_WINDOW))
    key = f"suggest-rate:{client_key}"

    now = time_module.time()
    recent = [t for t in cache.get(key, []) if now - t < window]
    if len(recent) >= limit:
        cache.set(key, recent, timeout=window)
        return False

    recent.append(now)
    cache.set(key, recent, timeout=window)
    return True


def client_ip(request) -> str:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("HTTP_X_REAL_IP") or request.META.get("REMOTE_ADDR") or "unknown"


def fallback_suggestions(location_context: str) -> List[Dict[str, str]]:
    return [
        {
            "title": "Reading time",
            "description": "Settle in with a book you like and take it slow",
            "location": location_context,
        },
        {
            "title": "Walk",
            "description": "Get some fresh air and move a little",
            "location": location_context,
        },
        {
            "title": "Learning video",
            "description": "Watch a video on something you are curious about",
            "location": location_context,
        },
    ]


def build_prompt(req: SuggestionRequest) -> str:
    minutes = req.duration_minutes
    start_hour = int(req.start_time.split(":")[0])
    return (
        "Suggest three plans for someone without hobbies.\n\n"
        f"When: {req.date} {req.start_time}-{req.end_time} ({duration_text(minutes)})\n"
        f"Where: {req.location_context}\n"
        f"Time of day: {time_context(start_hour)}\n\n"
        "Beginner friendly, doable in the time given, free or very cheap.\n"
        'Reply as JSON: {"suggestions": [{"title": "...", "description": "...", "location": "..."}]}'
    )


def fetch_suggestions(req: SuggestionRequest) -> List[Dict[str, Any]]:
    """
    Ask the remote API for raw suggestions.

    Raises SuggestionServiceError when the service is not configured, fails,
    or answers with something that is not a suggestion list.
    """
    api_key = getattr(settings, "SUGGESTION_API_KEY", None)
    if not api_key:
        raise SuggestionServiceError("Suggestions are not configured (SUGGESTION_API_KEY missing).")

    url = getattr(settings, "SUGGESTION_API_URL", DEFAULT_SUGGESTION_API_URL)
    payload = {
        "model": getattr(settings, "SUGGESTION_MODEL", DEFAULT_SUGGESTION_MODEL),
        "messages": [
            {"role": "system", "content": "You help people who find planning hard. Answer in JSON."},
            {"role": "user", "content": build_prompt(req)},
        ],
        "max_tokens": 800,
        "temperature": 0.7,
        "response_format": {"type": "json_object"},
    }

    try:
        r = requests.post(
            url,
            json=payload,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=30,
        )
        r.raise_for_status()
        content = r.json()["choices"][0]["message"]["content"]
    except requests.RequestException as e:
        raise SuggestionServiceError(f"Suggestion API request failed: {e}") from e
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise SuggestionServiceError(f"Unexpected suggestion API response: {e}") from e

    if not content:
        raise SuggestionServiceError("Empty response from suggestion API")

    try:
        parsed = json.loads(content)
    except ValueError as e:
        raise SuggestionServiceError(f"Suggestion API returned invalid JSON: {e}") from e

    if isinstance(parsed, list):
        items = parsed
    elif isinstance(parsed, dict):
        items = parsed.get("suggestions", [])
    else:
        raise SuggestionServiceError(f"Suggestion API returned {type(parsed).__name__}, expected an object or list")
    if not isinstance(items, list):
        raise SuggestionServiceError("Suggestion API returned no suggestion list")
    return items


def format_suggestions(raw: List[Dict[str, Any]], location_context: str) -> List[Suggestion]:
    out = []
    for index, item in enumerate(raw[:MAX_SUGGESTIONS]):
        item = item if isinstance(item, dict) else {}
        title = str(item.get("title") or f"Suggestion {index + 1}")
        description = str(item.get("description") or "")
        out.append(Suggestion(
            title=title[:MAX_TITLE],
            description=description[:MAX_DESCRIPTION],
            location=str(item.get("location") or location_context)[:MAX_LOCATION],
            category=determine_category(title, description),
        ))
    return out


def suggest_events(req: SuggestionRequest) -> Dict[str, Any]:
    """
    Suggestions plus the context they were made for. Never raises for
    service trouble; the fixed list is used instead.
    """
    context = req.location_context
    try:
        raw = fetch_suggestions(req)
        source = "api"
    except SuggestionServiceError as e:
        logger.warning("Falling back to default suggestions: %s", e)
        raw = fallback_suggestions(context)
        source = "fallback"

    suggestions = format_suggestions(raw, context)
    start_hour = int(req.start_time.split(":")[0])
    return {
        "suggestions": suggestions,
        "metadata": {
            "date": req.date,
            "duration": duration_text(req.duration_minutes),
            "location": context,
            "timeContext": time_context(start_hour),
            "source": source,
        },
    }
