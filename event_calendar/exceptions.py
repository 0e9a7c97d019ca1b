class CalendarError(Exception):
    """Base class for calendar errors."""


class InvalidIntervalError(CalendarError, ValueError):
    """An event ends before it starts."""


class PayloadError(CalendarError, ValueError):
    """A drag/drop or request payload is missing required fields."""


class SuggestionServiceError(CalendarError):
    """The suggestion endpoint could not be reached or returned junk."""
