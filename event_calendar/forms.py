from datetime import datetime, time, timedelta

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError

from .colors import COLOR_CHOICES, parse_color
from .constants import END_HOUR, START_HOUR
from .intervals import Event, normalize_all_day
from .snapping import time_options

BASE_INPUT  = "block w-full rounded-lg border border-gray-300 bg-white px-3 py-2 text-sm focus:outline-none focus:ring-2 focus:ring-[#3c4e61] focus:border-transparent"
BASE_SELECT = "block w-full rounded-lg border border-gray-300 bg-white px-3 py-2 text-sm focus:outline-none focus:ring-2 focus:ring-[#3c4e61]"
BASE_CHECK  = "rounded border-gray-300 text-[#3c4e61] focus:ring-[#3c4e61]"


def _hour_range():
    return (
        int(getattr(settings, "CALENDAR_START_HOUR", START_HOUR)),
        int(getattr(settings, "CALENDAR_END_HOUR", END_HOUR)),
    )


def _combine(day, hhmm: str) -> datetime:
    hours, minutes = (int(p) for p in hhmm.split(":"))
    if hours == 24:
        # "24:00" is the midnight that closes the day
        return datetime.combine(day + timedelta(days=1), time.min)
    return datetime.combine(day, time(hours, minutes))


class EventForm(forms.Form):
    """
    Event editor. Times come from the 10-minute option list; all-day events
    ignore them and cover whole days.
    """
    title = forms.CharField(
        max_length=255,
        error_messages={"required": "Title is required."},
        widget=forms.TextInput(attrs={"class": BASE_INPUT, "placeholder": "Title"}),
    )
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"class": BASE_INPUT, "rows": 3}))
    location = forms.CharField(required=False, max_length=255, widget=forms.TextInput(attrs={"class": BASE_INPUT}))

    start_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date", "class": BASE_SELECT}))
    end_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date", "class": BASE_SELECT}))
    start_time = forms.ChoiceField(required=False, widget=forms.Select(attrs={"class": BASE_SELECT}))
    end_time = forms.ChoiceField(required=False, widget=forms.Select(attrs={"class": BASE_SELECT}))

    all_day = forms.BooleanField(required=False, widget=forms.CheckboxInput(attrs={"class": BASE_CHECK}))
    color = forms.ChoiceField(
        required=False,
        choices=[("", "Default")] + COLOR_CHOICES,
        widget=forms.Select(attrs={"class": BASE_SELECT}),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        start_hour, end_hour = _hour_range()
        options = [(t, t) for t in time_options(start_hour, end_hour)]
        self.fields["start_time"].choices = options
        self.fields["end_time"].choices = options

    def clean_title(self):
        title = (self.cleaned_data.get("title") or "").strip()
        if not title:
            raise ValidationError("Title is required.")
        return title

    def clean(self):
        cleaned = super().clean()
        start_date = cleaned.get("start_date")
        end_date = cleaned.get("end_date")
        if start_date is None or end_date is None:
            return cleaned

        if cleaned.get("all_day"):
            start = datetime.combine(start_date, time.min)
            end = datetime.combine(end_date, time.min)
        else:
            start_s = cleaned.get("start_time")
            end_s = cleaned.get("end_time")
            if not start_s or not end_s:
                raise ValidationError("Start and end times are required.")
            start_hour, end_hour = _hour_range()
            for value in (start_s, end_s):
                hour = int(value.split(":")[0])
                if hour < start_hour or hour > end_hour:
                    raise ValidationError(
                        f"Selected time must be between {start_hour}:00 and {end_hour}:00."
                    )
            start = _combine(start_date, start_s)
            end = _combine(end_date, end_s)

        if end < start:
            raise ValidationError("End date cannot be before start date.")

        cleaned["start"] = start
        cleaned["end"] = end
        return cleaned

    def to_event(self, event_id: str = "") -> Event:
        """Only valid after is_valid()."""
        data = self.cleaned_data
        return normalize_all_day(Event(
            id=event_id,
            title=data["title"],
            description=data.get("description") or None,
            location=data.get("location") or None,
            start=data["start"],
            end=data["end"],
            all_day=bool(data.get("all_day")),
            color=parse_color(data.get("color")),
        ))
