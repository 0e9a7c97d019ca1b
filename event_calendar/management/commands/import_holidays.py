from datetime import datetime

import requests
from django.core.management.base import BaseCommand, CommandError

from event_calendar.holidays import fetch_holidays, holidays_to_events
from event_calendar.models import CalendarEvent

class Command(BaseCommand):
    help = "Import public holidays as all-day events"

    def add_arguments(self, parser):
        parser.add_argument("--year", type=int, help="Only import holidays in this year")

    def handle(self, *args, **kwargs):
        year = kwargs.get("year")

        try:
            holidays = fetch_holidays()
        except (requests.RequestException, ValueError) as e:
            raise CommandError(f"Could not fetch holidays: {e}") from e

        created = 0
        updated = 0

        for event in holidays_to_events(holidays):
            if year and event.start.year != year:
                continue

            row = CalendarEvent.objects.filter(external_event_id=event.id).first()
            if row is None:
                row = CalendarEvent(external_event_id=event.id, event_type="holiday")
                created += 1
            else:
                updated += 1
            row.apply_event(event)
            row.save()

        stamp = datetime.now().strftime("%Y-%m-%d %H:%M")
        self.stdout.write(self.style.SUCCESS(f"Imported {created} new holidays, updated {updated} ({stamp})"))
