"""
Commands coming out of the editor dialogs, dispatched through one handler.

    SlotClicked / MonthCellClicked -> choice dialog (manual or suggestion)
    CreateManual                   -> editor with a one-hour provisional event
    OpenSuggestions                -> suggestion dialog for the chosen slot
    CreateFromSuggestion           -> editor prefilled from a suggestion
    SelectEvent                    -> editor for an existing event
    SaveEvent                      -> on_add (new) / on_update (existing)
    DeleteEvent                    -> on_delete
    CloseDialogs                   -> back to the bare calendar
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Iterable, List, Optional, Union

from .constants import DEFAULT_END_HOUR, DEFAULT_START_HOUR
from .intervals import Event, normalize_all_day, validate_interval
from .snapping import round_to_ten_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotClicked:
    start: datetime


@dataclass(frozen=True)
class MonthCellClicked:
    day: date


@dataclass(frozen=True)
class CreateManual:
    pass


@dataclass(frozen=True)
class OpenSuggestions:
    pass


@dataclass(frozen=True)
class Suggestion:
    title: str
    description: str = ""
    location: str = ""
    category: str = "relax"


@dataclass(frozen=True)
class CreateFromSuggestion:
    suggestion: Suggestion
    start_time: str   # "HH:MM"
    end_time: str     # "HH:MM"


@dataclass(frozen=True)
class SelectEvent:
    event_id: str


@dataclass(frozen=True)
class SaveEvent:
    event: Event


@dataclass(frozen=True)
class DeleteEvent:
    event_id: str


@dataclass(frozen=True)
class CloseDialogs:
    pass


Command = Union[
    SlotClicked, MonthCellClicked, CreateManual, OpenSuggestions, CreateFromSuggestion,
    SelectEvent, SaveEvent, DeleteEvent, CloseDialogs,
]


@dataclass
class DialogState:
    choice_open: bool = False
    editor_open: bool = False
    suggestion_open: bool = False
    selected_time: Optional[datetime] = None
    selected_event: Optional[Event] = None

    @property
    def modal_open(self) -> bool:
        return self.choice_open or self.editor_open or self.suggestion_open


def _parse_hhmm(value: str) -> time:
    hours, minutes = (int(p) for p in value.strip().split(":"))
    return time(hours, minutes)


class CalendarController:
    """
    Single entry point for dialog commands.

    The controller never stores events; it reads the host's current list and
    reports changes through the three persistence callbacks.
    """

    def __init__(
        self,
        events: Iterable[Event],
        on_add: Callable[[Event], Any],
        on_update: Callable[[Event], Any],
        on_delete: Callable[[str], Any],
        default_start_hour: int = DEFAULT_START_HOUR,
        default_end_hour: int = DEFAULT_END_HOUR,
    ):
        if default_end_hour <= default_start_hour:
            raise ValueError(
                f"default_end_hour ({default_end_hour}) must be after default_start_hour ({default_start_hour})"
            )
        self.events: List[Event] = list(events)
        self.on_add = on_add
        self.on_update = on_update
        self.on_delete = on_delete
        self.default_start_hour = default_start_hour
        # provisional events last as long as the default start..end window
        self.default_duration = timedelta(hours=default_end_hour - default_start_hour)
        self.state = DialogState()

    def dispatch(self, command: Command) -> DialogState:
        if isinstance(command, SlotClicked):
            self._open_choice(round_to_ten_minutes(command.start))

        elif isinstance(command, MonthCellClicked):
            start = datetime.combine(command.day, time(self.default_start_hour))
            self._open_choice(start)

        elif isinstance(command, CreateManual):
            self._create_manual()

        elif isinstance(command, OpenSuggestions):
            if self.state.selected_time is not None:
                self.state = DialogState(suggestion_open=True, selected_time=self.state.selected_time)

        elif isinstance(command, CreateFromSuggestion):
            self._create_from_suggestion(command)

        elif isinstance(command, SelectEvent):
            self._select(command.event_id)

        elif isinstance(command, SaveEvent):
            self._save(command.event)

        elif isinstance(command, DeleteEvent):
            self.on_delete(command.event_id)
            self.state = DialogState()

        elif isinstance(command, CloseDialogs):
            self.state = DialogState()

        else:
            raise TypeError(f"Unknown command: {command!r}")

        return self.state

    def _open_choice(self, start: datetime) -> None:
        self.state = DialogState(choice_open=True, selected_time=start)

    def _create_manual(self) -> None:
        start = self.state.selected_time
        if start is None:
            return
        provisional = Event(id="", title="", start=start, end=start + self.default_duration)
        self.state = DialogState(editor_open=True, selected_time=start, selected_event=provisional)

    def _create_from_suggestion(self, command: CreateFromSuggestion) -> None:
        base = self.state.selected_time
        if base is None:
            return
        start = datetime.combine(base.date(), _parse_hhmm(command.start_time))
        end = datetime.combine(base.date(), _parse_hhmm(command.end_time))
        if end <= start:
            # e.g. 23:00-01:00 runs into the next day
            end += timedelta(days=1)

        s = command.suggestion
        provisional = Event(
            id="",
            title=s.title,
            description=s.description or None,
            start=start,
            end=end,
            location=s.location or None,
        )
        self.state = DialogState(editor_open=True, selected_time=base, selected_event=provisional)

    def _select(self, event_id: str) -> None:
        match = next((e for e in self.events if e.id == event_id), None)
        if match is None:
            logger.warning("SelectEvent for unknown id %r", event_id)
            return
        self.state = DialogState(editor_open=True, selected_event=match)

    def _save(self, event: Event) -> None:
        event = validate_interval(normalize_all_day(replace(event, title=event.title.strip())))
        if event.is_persisted:
            self.on_update(event)
        else:
            self.on_add(event)
        self.state = DialogState()
