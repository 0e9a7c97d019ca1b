from django.urls import path
from event_calendar import views

app_name = "calendar"

urlpatterns = [
    path("", views.calendar_view, name="calendar_view"),  # /calendar/?view=week&date=...
    path("navigate/", views.calendar_navigate, name="calendar_navigate"),
    path("categories/", views.calendar_categories, name="calendar_categories"),
    path("categories/<int:category_id>/", views.calendar_category_update, name="calendar_category_update"),

    path("event/new/", views.calendar_event_create, name="calendar_event_create"),
    path("event/<int:event_id>/", views.calendar_event_detail, name="calendar_event_detail"),
    path("event/<int:event_id>/edit/", views.calendar_event_update, name="calendar_event_update"),
    path("event/<int:event_id>/delete/", views.calendar_event_delete, name="calendar_event_delete"),

    path("slot/", views.calendar_slot_click, name="calendar_slot_click"),
    path("suggest/", views.suggest_events_view, name="suggest_events"),
    path("suggest/event/", views.calendar_suggestion_event, name="suggestion_event"),

    path("drag/start/", views.drag_start, name="drag_start"),
    path("drag/hover/", views.drag_hover, name="drag_hover"),
    path("drag/drop/", views.drag_drop, name="drag_drop"),
    path("drag/cancel/", views.drag_cancel, name="drag_cancel"),

    path("ping/", views.health_ping, name="health_ping"),
]
