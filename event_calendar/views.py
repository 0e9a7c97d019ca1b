import json
import logging
import time as time_module
from dataclasses import asdict
from datetime import datetime

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from .colors import EventColor, color_classes, is_color_visible, parse_color
from .commands import (
    CalendarController,
    CreateFromSuggestion,
    CreateManual,
    DeleteEvent,
    MonthCellClicked,
    SaveEvent,
    SlotClicked,
    Suggestion,
)
from .constants import (
    AGENDA_DAYS_TO_SHOW,
    DEFAULT_END_HOUR,
    DEFAULT_START_HOUR,
    EDITOR_STEP_MINUTES,
    END_HOUR,
    EVENT_GAP,
    EVENT_HEIGHT,
    START_HOUR,
    WEEK_CELLS_HEIGHT,
)
from .dates import parse_local_datetime, parse_ymd
from .drag import DragSession, DragSessionManager
from .exceptions import PayloadError
from .forms import EventForm
from .holidays import holidays_in_range
from .intervals import (
    agenda_events_for_day,
    events_for_day,
    is_multi_day,
    sort_for_display,
    spanning_events_for_day,
)
from .layout import GridMetrics, all_day_rows, current_time_position, layout_days
from .models import CalendarEvent, EventCategory
from .navigation import (
    CalendarView,
    month_grid,
    navigate,
    parse_view,
    today,
    view_title,
    visible_days,
)
from .queries import get_events_overlapping_range
from .shortcuts import view_for_key
from .snapping import format_time_for_input
from .store import add_event, delete_event, update_event
from .suggestions import check_rate_limit, client_ip, suggest_events, valid_duration, validate_input
from .visibility import visible_count

logger = logging.getLogger(__name__)

DRAG_SESSION_KEY = "drag_session"


#Settings-backed helpers
def grid_metrics() -> GridMetrics:
    cell = float(getattr(settings, "CALENDAR_CELL_HEIGHT", WEEK_CELLS_HEIGHT))
    return GridMetrics(
        start_hour=int(getattr(settings, "CALENDAR_START_HOUR", START_HOUR)),
        end_hour=int(getattr(settings, "CALENDAR_END_HOUR", END_HOUR)),
        cell_height=cell,
        min_height=cell * EDITOR_STEP_MINUTES / 60,
    )


def agenda_window() -> int:
    return int(getattr(settings, "CALENDAR_AGENDA_DAYS", AGENDA_DAYS_TO_SHOW))


def event_json(event):
    data = event.to_dict()
    data["color_classes"] = color_classes(event.color)
    data["is_multi_day"] = is_multi_day(event)
    return data


def _with_event_json(item):
    data = item.to_dict()
    data["event"] = event_json(item.event)
    return data


def _json_body(request):
    try:
        body = json.loads(request.body or b"{}")
    except ValueError as e:
        raise PayloadError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise PayloadError("Request body must be a JSON object")
    return body


def _bad_request(message, **extra):
    return JsonResponse({"ok": False, "error": message, **extra}, status=400)


def hidden_colors(request):
    """
    Colors left out of this request's calendar data.

    `colors=blue,rose` shows only the listed colors. Without the parameter the
    colors of switched-off categories are hidden. Raises ValueError for an
    unknown color.
    """
    raw = request.GET.get("colors")
    if raw is None:
        off = EventCategory.objects.filter(is_active=False).values_list("color", flat=True)
        return frozenset(parse_color(c) for c in off)
    shown = {parse_color(c) for c in raw.split(",") if c.strip()}
    return frozenset(EventColor) - shown


def _range_events(days, hidden=frozenset()):
    """
    Stored events plus holidays for the visible days. Holidays already
    imported by `import_holidays` are not added a second time, and they are
    never hidden by the color filter.
    """
    start_d, end_d = days[0], days[-1]
    rows = list(get_events_overlapping_range(start_d, end_d))
    imported = {r.external_event_id for r in rows if r.external_event_id}
    stored = []
    for r in rows:
        event = r.to_event()
        if r.event_type == "holiday" or is_color_visible(event.color, hidden):
            stored.append(event)
    holidays = [h for h in holidays_in_range(start_d, end_d) if h.id not in imported]
    return stored + holidays


def _controller(events=()):
    """
    Controller wired to the database. The callbacks' return values are kept
    on `saved` so views can answer with the stored event.
    """
    saved = []
    controller = CalendarController(
        events,
        on_add=lambda e: saved.append(add_event(e)),
        on_update=lambda e: saved.append(update_event(e)),
        on_delete=delete_event,
        default_start_hour=int(getattr(settings, "CALENDAR_DEFAULT_START_HOUR", DEFAULT_START_HOUR)),
        default_end_hour=int(getattr(settings, "CALENDAR_DEFAULT_END_HOUR", DEFAULT_END_HOUR)),
    )
    return controller, saved


#Health
@require_GET
def health_ping(request):
    return JsonResponse({"ok": True})


#Calendar views
def _month_payload(reference, request, hidden):
    weeks = month_grid(reference)
    days = [d for week in weeks for d in week]
    events = _range_events(days, hidden)

    try:
        cell_height = float(request.GET["cell_height"])
    except (KeyError, TypeError, ValueError):
        cell_height = None  # not measured yet: show everything
    row_height = float(getattr(settings, "CALENDAR_EVENT_HEIGHT", EVENT_HEIGHT))
    row_gap = float(getattr(settings, "CALENDAR_EVENT_GAP", EVENT_GAP))

    out_weeks = []
    for week in weeks:
        cells = []
        for d in week:
            day_events = sort_for_display(events_for_day(events, d) + spanning_events_for_day(events, d))
            shown = visible_count(cell_height, row_height, row_gap, len(day_events))
            cells.append({
                "date": d.isoformat(),
                "in_month": d.month == reference.month,
                "events": [event_json(e) for e in day_events],
                "visible_count": shown,
                "hidden_count": len(day_events) - shown,
            })
        out_weeks.append(cells)
    return {"weeks": out_weeks}


def _time_grid_payload(days, hidden):
    metrics = grid_metrics()
    events = _range_events(days, hidden)
    blocks = layout_days(events, days, metrics)
    all_day = all_day_rows(events, days)
    position, visible = current_time_position(today(), days, metrics)
    return {
        "days": [
            {
                "date": d.isoformat(),
                "all_day": [_with_event_json(slot) for slot in all_day[d]],
                "blocks": [_with_event_json(block) for block in blocks[d]],
            }
            for d in days
        ],
        "hours": list(range(metrics.start_hour, metrics.end_hour)),
        "cell_height": metrics.cell_height,
        "now": {"position": position, "visible": visible},
    }


def _agenda_payload(days, hidden):
    events = _range_events(days, hidden)
    out = []
    for d in days:
        day_events = agenda_events_for_day(events, d)
        if day_events:
            out.append({"date": d.isoformat(), "events": [event_json(e) for e in day_events]})
    return {"days": out}


def _view_payload(reference, view, request, hidden=frozenset()):
    window = agenda_window()
    payload = {
        "ok": True,
        "view": view.value,
        "date": reference.isoformat(),
        "title": view_title(reference, view, agenda_window=window),
        "short_title": view_title(reference, view, short=True, agenda_window=window),
    }
    if view is CalendarView.MONTH:
        payload.update(_month_payload(reference, request, hidden))
    elif view is CalendarView.AGENDA:
        payload.update(_agenda_payload(visible_days(reference, view, window), hidden))
    else:
        payload.update(_time_grid_payload(visible_days(reference, view, window), hidden))
    return payload


@ensure_csrf_cookie
@require_GET
def calendar_view(request):
    """
    Calendar data for one view.

    Query params:
      - view=month|week|day|agenda (defaults to CALENDAR_DEFAULT_VIEW, then month)
      - date=YYYY-MM-DD (defaults to today)
      - colors=blue,emerald (only these colors; default hides switched-off categories)
      - cell_height=px (month only; measured cell height for "+N more")
    """
    default_view = parse_view(getattr(settings, "CALENDAR_DEFAULT_VIEW", "month"))
    view = parse_view(request.GET.get("view"), default=default_view)
    reference = parse_ymd(request.GET.get("date"))
    try:
        hidden = hidden_colors(request)
    except ValueError as e:
        return _bad_request(str(e))
    return JsonResponse(_view_payload(reference, view, request, hidden))


@require_GET
def calendar_navigate(request):
    """
    Where prev/next/today or a view shortcut key lands.

    Query params: view, date, and either direction=prev|next|today or
    key=m|w|d|a (ignored while modal=1 or focus is in a text field).
    """
    view = parse_view(request.GET.get("view"))
    reference = parse_ymd(request.GET.get("date"))

    key = request.GET.get("key")
    if key:
        switched = view_for_key(
            key,
            modal_open=request.GET.get("modal") == "1",
            target_tag=request.GET.get("target_tag"),
            target_editable=request.GET.get("target_editable") == "1",
        )
        if switched is not None:
            view = switched

    direction = request.GET.get("direction")
    if direction:
        try:
            moved = navigate(reference, view, direction, agenda_window())
        except ValueError as e:
            return _bad_request(str(e))
        reference = moved.date() if isinstance(moved, datetime) else moved

    return JsonResponse({
        "ok": True,
        "view": view.value,
        "date": reference.isoformat(),
        "title": view_title(reference, view, agenda_window=agenda_window()),
    })


#Categories
def category_json(category):
    return {
        "id": category.pk,
        "name": category.name,
        "color": category.color,
        "is_active": category.is_active,
    }


@require_GET
def calendar_categories(request):
    return JsonResponse({"ok": True, "categories": [category_json(c) for c in EventCategory.objects.all()]})


@require_POST
def calendar_category_update(request, category_id):
    """
    Rename a category and/or switch it on or off.

    POST "name" (non-blank, at most 100 chars) and/or "is_active" (1/0, true/false).
    """
    category = get_object_or_404(EventCategory, id=category_id)

    if "name" in request.POST:
        name = request.POST["name"].strip()
        if not name or len(name) > 100:
            return _bad_request("Category name must be 1-100 characters.")
        category.name = name

    if "is_active" in request.POST:
        flag = request.POST["is_active"].strip().lower()
        if flag not in ("1", "0", "true", "false"):
            return _bad_request("is_active must be 1 or 0.")
        category.is_active = flag in ("1", "true")

    category.save()
    logger.info("Category %s updated: %r active=%s", category.pk, category.name, category.is_active)
    return JsonResponse({"ok": True, "category": category_json(category)})


#Event CRUD
@require_POST
def calendar_event_create(request):
    form = EventForm(request.POST)
    if not form.is_valid():
        return _bad_request("Invalid event.", errors=form.errors.get_json_data())

    controller, saved = _controller()
    controller.dispatch(SaveEvent(form.to_event()))
    return JsonResponse({"ok": True, "event": event_json(saved[0])}, status=201)


@require_POST
def calendar_event_update(request, event_id):
    row = get_object_or_404(CalendarEvent, id=event_id)
    form = EventForm(request.POST)
    if not form.is_valid():
        return _bad_request("Invalid event.", errors=form.errors.get_json_data())

    controller, saved = _controller([row.to_event()])
    controller.dispatch(SaveEvent(form.to_event(str(row.pk))))
    return JsonResponse({"ok": True, "event": event_json(saved[0])})


@require_POST
def calendar_event_delete(request, event_id):
    row = get_object_or_404(CalendarEvent, id=event_id)
    controller, _ = _controller([row.to_event()])
    controller.dispatch(DeleteEvent(str(row.pk)))
    return JsonResponse({"ok": True})


@require_GET
def calendar_event_detail(request, event_id):
    row = get_object_or_404(CalendarEvent, id=event_id)
    event = row.to_event()
    return JsonResponse({
        "ok": True,
        "event": event_json(event),
        "start_time": format_time_for_input(event.start),
        "end_time": format_time_for_input(event.end),
    })


#Slot clicks -> provisional events
@require_POST
def calendar_slot_click(request):
    """
    Provisional event for a clicked slot, lasting as long as the
    CALENDAR_DEFAULT_START_HOUR..CALENDAR_DEFAULT_END_HOUR window.

    POST "start" (week/day, rounded to 10 minutes) or "date" (month cell,
    starts at CALENDAR_DEFAULT_START_HOUR).
    """
    controller, _ = _controller()
    start = parse_local_datetime(request.POST.get("start"))
    if start is not None:
        controller.dispatch(SlotClicked(start))
    elif request.POST.get("date"):
        controller.dispatch(MonthCellClicked(parse_ymd(request.POST["date"])))
    else:
        return _bad_request("Either start or date is required.")

    state = controller.dispatch(CreateManual())
    event = state.selected_event
    return JsonResponse({
        "ok": True,
        "selected_time": state.selected_time.isoformat(),
        "event": event.to_dict(),
        "start_time": format_time_for_input(event.start),
        "end_time": format_time_for_input(event.end),
    })


@require_POST
def calendar_suggestion_event(request):
    """Provisional event from a picked suggestion on the selected date."""
    try:
        body = _json_body(request)
        day = datetime.strptime(body["date"], "%Y-%m-%d").date()
        raw = body["suggestion"]
        suggestion = Suggestion(
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            location=str(raw.get("location") or ""),
            category=str(raw.get("category") or "relax"),
        )
        command = CreateFromSuggestion(suggestion, body["startTime"], body["endTime"])
    except (PayloadError, KeyError, TypeError, AttributeError, ValueError) as e:
        return _bad_request(f"Invalid suggestion: {e}")

    controller, _ = _controller()
    controller.dispatch(MonthCellClicked(day))
    try:
        state = controller.dispatch(command)
    except ValueError as e:
        return _bad_request(f"Invalid suggestion time: {e}")
    return JsonResponse({"ok": True, "event": state.selected_event.to_dict()})


#Suggestions
@require_POST
def suggest_events_view(request):
    if not check_rate_limit(client_ip(request)):
        return JsonResponse({"ok": False, "error": "Too many requests. Please try again later."}, status=429)

    try:
        body = _json_body(request)
    except PayloadError as e:
        return _bad_request(str(e))

    req = validate_input(body)
    if req is None:
        logger.info("Suggestion request failed validation: %r", body)
        return _bad_request("Invalid input parameters")
    if not valid_duration(req):
        return _bad_request("Invalid time range")

    result = suggest_events(req)
    stamp = int(time_module.time() * 1000)
    suggestions = [
        {"id": f"suggestion-{stamp}-{i}", **asdict(s)}
        for i, s in enumerate(result["suggestions"])
    ]
    return JsonResponse({"ok": True, "suggestions": suggestions, "metadata": result["metadata"]})


#Drag and drop
def _drag_manager(request):
    data = request.session.get(DRAG_SESSION_KEY)
    session = None
    if data:
        try:
            session = DragSession.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding unreadable drag session: %s", e)
    return DragSessionManager(on_update=update_event, session=session)


def _save_drag(request, manager):
    if manager.session is None:
        request.session.pop(DRAG_SESSION_KEY, None)
    else:
        request.session[DRAG_SESSION_KEY] = manager.session.to_dict()
    request.session.modified = True


@require_POST
def drag_start(request):
    try:
        payload = _json_body(request)
    except PayloadError as e:
        return _bad_request(str(e))

    manager = _drag_manager(request)
    session = manager.pick_up(payload)
    _save_drag(request, manager)
    if session is None:
        return _bad_request("Invalid drag payload.")
    return JsonResponse({"ok": True, "state": manager.state.value, "overlay": manager.overlay()})


@require_POST
def drag_hover(request):
    try:
        payload = _json_body(request)
    except PayloadError as e:
        return _bad_request(str(e))

    manager = _drag_manager(request)
    provisional = manager.hover(payload.get("target"))
    _save_drag(request, manager)
    return JsonResponse({
        "ok": True,
        "state": manager.state.value,
        "provisional_time": provisional.isoformat() if provisional else None,
        "overlay": manager.overlay(),
    })


@require_POST
def drag_drop(request):
    try:
        payload = _json_body(request)
    except PayloadError as e:
        return _bad_request(str(e))

    manager = _drag_manager(request)
    try:
        moved = manager.drop(payload.get("target"))
    finally:
        _save_drag(request, manager)

    outcome = manager.last_outcome.value if manager.last_outcome else None
    return JsonResponse({
        "ok": True,
        "outcome": outcome,
        "event": event_json(moved) if moved else None,
    })


@require_POST
def drag_cancel(request):
    manager = _drag_manager(request)
    manager.cancel()
    _save_drag(request, manager)
    return JsonResponse({"ok": True, "state": manager.state.value})
