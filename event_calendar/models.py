from django.db import models

from .colors import COLOR_CHOICES, parse_color
from .intervals import Event


class CalendarEvent(models.Model):
    """
    Stored event record. Times are naive local wall-clock values (USE_TZ=False).

    The layout/drag code never sees this model; it works on intervals.Event,
    built with to_event() and written back with apply_event().
    """
    EVENT_TYPES = [
        ("normal", "Normal"),
        ("holiday", "Holiday"),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)

    start_dt = models.DateTimeField()
    end_dt = models.DateTimeField()
    all_day = models.BooleanField(default=False)
    color = models.CharField(max_length=20, choices=COLOR_CHOICES, blank=True)

    event_type = models.CharField(max_length=20, choices=EVENT_TYPES, default="normal")
    external_event_id = models.CharField(max_length=255, blank=True)  # e.g. "holiday:2024-01-01"
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["start_dt"], name="calendar_event_start_idx"),
            models.Index(fields=["external_event_id"], name="calendar_event_external_idx"),
        ]

    def __str__(self):
        return f"{self.title} ({self.start_dt})"

    def to_event(self) -> Event:
        return Event(
            id=str(self.pk) if self.pk else "",
            title=self.title,
            description=self.description or None,
            start=self.start_dt,
            end=self.end_dt,
            all_day=self.all_day,
            color=parse_color(self.color),
            location=self.location or None,
        )

    def apply_event(self, event: Event) -> "CalendarEvent":
        self.title = event.title
        self.description = event.description or ""
        self.location = event.location or ""
        self.start_dt = event.start
        self.end_dt = event.end
        self.all_day = event.all_day
        self.color = event.color.value if event.color else ""
        return self


class EventCategory(models.Model):
    """
    A named color label ("Work" -> blue). Switching a category off hides events
    of its color from the calendar views; colors without a category always show.
    """
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=20, choices=COLOR_CHOICES, unique=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "id"]
        verbose_name_plural = "event categories"

    def __str__(self):
        return f"{self.name} ({self.color})"
