from django.contrib import admin
from .models import CalendarEvent, EventCategory

@admin.register(CalendarEvent)
class CalendarEventAdmin(admin.ModelAdmin):
    list_display = ("title", "start_dt", "end_dt", "all_day", "color", "event_type")
    list_filter = ("all_day", "color", "event_type")
    search_fields = ("title", "description", "location")
    date_hierarchy = "start_dt"

@admin.register(EventCategory)
class EventCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "color", "is_active", "sort_order")
    list_editable = ("is_active", "sort_order")
    search_fields = ("name",)
