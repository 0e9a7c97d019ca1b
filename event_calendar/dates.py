from datetime import date, datetime
from typing import Optional


def parse_ymd(date_str: Optional[str], default: Optional[date] = None) -> date:
    """
    Parse YYYY-MM-DD into a date. Returns default (or today) if missing/invalid.
    """
    if default is None:
        default = date.today()

    if not date_str:
        return default

    try:
        y, m, d = map(int, date_str.split("-"))
        return date(y, m, d)
    except ValueError:
        return default


def parse_local_datetime(value: Optional[str]) -> Optional[datetime]:
    """ISO "YYYY-MM-DDTHH:MM[:SS]" -> naive datetime, None if missing/invalid."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    # wall-clock only; drop any offset the browser attached
    return parsed.replace(tzinfo=None)
