from django.apps import AppConfig


class EventCalendarConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "event_calendar"
    verbose_name = "Event calendar"
