from django.db import migrations, models


COLOR_CHOICES = [
    ("blue", "Blue"),
    ("orange", "Orange"),
    ("violet", "Violet"),
    ("rose", "Rose"),
    ("emerald", "Emerald"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CalendarEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("start_dt", models.DateTimeField()),
                ("end_dt", models.DateTimeField()),
                ("all_day", models.BooleanField(default=False)),
                ("color", models.CharField(blank=True, choices=COLOR_CHOICES, max_length=20)),
                ("event_type", models.CharField(choices=[("normal", "Normal"), ("holiday", "Holiday")], default="normal", max_length=20)),
                ("external_event_id", models.CharField(blank=True, max_length=255)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["start_dt"], name="calendar_event_start_idx"),
                    models.Index(fields=["external_event_id"], name="calendar_event_external_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventCategory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("color", models.CharField(choices=COLOR_CHOICES, max_length=20, unique=True)),
                ("is_active", models.BooleanField(default=True)),
                ("sort_order", models.PositiveIntegerField(default=0)),
            ],
            options={
                "ordering": ["sort_order", "id"],
                "verbose_name_plural": "event categories",
            },
        ),
    ]
