"""Time-of-day bucketing.

Only hour and minute are used: scans from different days at the same clock
time share a bucket, which answers "what time of day is busiest".
Width validation happens at the analytics boundary (see validators).
"""

from __future__ import annotations

from datetime import datetime, time
from typing import Union

from ..core.constants import MINUTES_PER_DAY


def buckets_per_day(width_minutes: int) -> int:
    return MINUTES_PER_DAY // width_minutes


def bucket_index(time_of_day: Union[time, datetime], width_minutes: int) -> int:
    total_minutes = time_of_day.hour * 60 + time_of_day.minute
    return total_minutes // width_minutes


def _hhmm(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def bucket_label(index: int, width_minutes: int) -> str:
    """``09:00`` for hourly buckets, ``09:15 - 09:30`` for narrower ones."""
    start = index * width_minutes
    if width_minutes == 60:
        return f"{start // 60:02d}:00"
    return f"{_hhmm(start)} - {_hhmm(start + width_minutes)}"
