from __future__ import annotations

from enum import Enum
from typing import AbstractSet, Dict, Optional


class EventColor(str, Enum):
    BLUE = "blue"
    ORANGE = "orange"
    VIOLET = "violet"
    ROSE = "rose"
    EMERALD = "emerald"


DEFAULT_COLOR = EventColor.BLUE

COLOR_CLASSES: Dict[EventColor, str] = {
    EventColor.BLUE: "bg-blue-200/50 hover:bg-blue-200/40 text-blue-900/90",
    EventColor.ORANGE: "bg-orange-200/50 hover:bg-orange-200/40 text-orange-900/90",
    EventColor.VIOLET: "bg-violet-200/50 hover:bg-violet-200/40 text-violet-900/90",
    EventColor.ROSE: "bg-rose-200/50 hover:bg-rose-200/40 text-rose-900/90",
    EventColor.EMERALD: "bg-emerald-200/50 hover:bg-emerald-200/40 text-emerald-900/90",
}

# every color must have a style, checked once at import
_missing = set(EventColor) - set(COLOR_CLASSES)
if _missing:
    raise RuntimeError(f"COLOR_CLASSES is missing entries for: {sorted(c.value for c in _missing)}")

COLOR_CHOICES = [(c.value, c.value.capitalize()) for c in EventColor]


def parse_color(value: Optional[str]) -> Optional[EventColor]:
    """
    Convert a stored/posted color key into an EventColor.

    Empty -> None (the renderer uses DEFAULT_COLOR).
    Unknown keys raise ValueError so typos surface instead of silently turning blue.
    """
    if value is None or value == "":
        return None
    if isinstance(value, EventColor):
        return value
    return EventColor(value.strip().lower())


def color_classes(color: Optional[EventColor]) -> str:
    return COLOR_CLASSES[color or DEFAULT_COLOR]


def is_color_visible(color: Optional[EventColor], hidden_colors: AbstractSet[EventColor]) -> bool:
    """Uncolored events are always shown."""
    return color is None or color not in hidden_colors


def segment_shape(is_first_day: bool, is_last_day: bool) -> str:
    """
    Border shape for one day-cell of a multi-day bar.

      single -> rounded on both ends
      start  -> rounded left, continues right
      end    -> continues left, rounded right
      middle -> continues on both sides
    """
    if is_first_day and is_last_day:
        return "single"
    if is_first_day:
        return "start"
    if is_last_day:
        return "end"
    return "middle"
