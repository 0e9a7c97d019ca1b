from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import List, Tuple

from .constants import (
    CREATE_SNAP_MINUTES,
    DRAG_SNAP_MINUTES,
    EDITOR_STEP_MINUTES,
    END_HOUR,
    START_HOUR,
)
from .intervals import day_start


def _check_bucket(bucket_minutes: int) -> int:
    if bucket_minutes <= 0 or 60 % bucket_minutes:
        raise ValueError(f"bucket_minutes must divide an hour evenly, got {bucket_minutes}")
    return 60 // bucket_minutes


def snap_parts(raw_hour_fraction: float, bucket_minutes: int = DRAG_SNAP_MINUTES) -> Tuple[int, int]:
    """
    Split an hour value (9.42 == 9:25) into (hour, minute) snapped to the bucket.

    The fractional hour is routed to bucket k when it falls in
    [(k - 0.5) / n, (k + 0.5) / n) with n buckets per hour. For 15-minute buckets
    that is the 0.125 / 0.375 / 0.625 split:

        [0, .125) -> :00   [.125, .375) -> :15   [.375, .625) -> :30   rest -> :45

    The hour never rolls over: a value at :58 stays in its own hour (last bucket).
    """
    buckets_per_hour = _check_bucket(bucket_minutes)
    hour = math.floor(raw_hour_fraction)
    fraction = raw_hour_fraction - hour
    k = math.floor(fraction * buckets_per_hour + 0.5)
    k = min(max(k, 0), buckets_per_hour - 1)
    return hour, k * bucket_minutes


def snap_to_grid(raw_hour_fraction: float, bucket_minutes: int = DRAG_SNAP_MINUTES) -> float:
    """Snap an hour value to the grid; idempotent for already-snapped values."""
    hour, minute = snap_parts(raw_hour_fraction, bucket_minutes)
    return hour + minute / 60


def snap_datetime(day: date, raw_hour_fraction: float, bucket_minutes: int = DRAG_SNAP_MINUTES) -> datetime:
    """Snapped hour value recomposed onto `day` (second=0)."""
    hour, minute = snap_parts(raw_hour_fraction, bucket_minutes)
    return day_start(day) + timedelta(hours=hour, minutes=minute)


def hour_fraction(dt: datetime) -> float:
    return dt.hour + dt.minute / 60


def round_to_ten_minutes(dt: datetime, step: int = CREATE_SNAP_MINUTES) -> datetime:
    """
    Click-to-create rounding: nearest `step` minutes, half rounds up.

      09:04 -> 09:00, 09:05 -> 09:10, 09:57 -> 10:00
    """
    base = dt.replace(second=0, microsecond=0)
    remainder = base.minute % step
    if remainder == 0:
        return base
    if remainder < step / 2:
        return base - timedelta(minutes=remainder)
    return base + timedelta(minutes=step - remainder)


def time_options(start_hour: int = START_HOUR, end_hour: int = END_HOUR, step: int = EDITOR_STEP_MINUTES) -> List[str]:
    """
    Discrete HH:MM choices for the event editor.

    24 only appears as "24:00" (no 24:10 .. 24:50).
    """
    _check_bucket(step)
    options = []
    for hour in range(start_hour, end_hour + 1):
        max_minute = 0 if hour == 24 else 59
        for minute in range(0, max_minute + 1, step):
            options.append(f"{hour:02d}:{minute:02d}")
    return options


def format_time_for_input(dt: datetime, step: int = EDITOR_STEP_MINUTES) -> str:
    """Editor select value for `dt`: minutes floored to the option step."""
    minute = (dt.minute // step) * step
    return f"{dt.hour:02d}:{minute:02d}"
