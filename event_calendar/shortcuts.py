from __future__ import annotations

from typing import Optional

from .navigation import CalendarView

VIEW_KEYS = {
    "m": CalendarView.MONTH,
    "w": CalendarView.WEEK,
    "d": CalendarView.DAY,
    "a": CalendarView.AGENDA,
}

TEXT_INPUT_TAGS = {"input", "textarea"}


def view_for_key(
    key: str,
    modal_open: bool = False,
    target_tag: Optional[str] = None,
    target_editable: bool = False,
) -> Optional[CalendarView]:
    """
    View to switch to for a key press, or None.

    Suppressed while any editor dialog is open or while focus is in a text
    input, textarea or contenteditable element, so typing a title that
    contains "m" never flips the view.
    """
    if modal_open or target_editable:
        return None
    if target_tag and target_tag.lower() in TEXT_INPUT_TAGS:
        return None
    return VIEW_KEYS.get((key or "").lower())
