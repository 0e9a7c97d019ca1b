from django.db import migrations


DEFAULT_CATEGORIES = [
    ("Work", "blue"),
    ("Personal", "emerald"),
    ("Meetings", "orange"),
    ("Important", "violet"),
]


def add_default_categories(apps, schema_editor):
    EventCategory = apps.get_model("event_calendar", "EventCategory")
    for order, (name, color) in enumerate(DEFAULT_CATEGORIES):
        EventCategory.objects.get_or_create(color=color, defaults={"name": name, "sort_order": order})


def remove_default_categories(apps, schema_editor):
    EventCategory = apps.get_model("event_calendar", "EventCategory")
    EventCategory.objects.filter(color__in=[color for _, color in DEFAULT_CATEGORIES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("event_calendar", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_default_categories, remove_default_categories),
    ]
