from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union

_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a scan time the way it is persisted (ISO-8601, milliseconds)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="milliseconds")


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse a persisted scan time.

    Accepts datetime objects (some drivers return them) and ISO-8601 text,
    including the trailing ``Z`` written by other clients. Raises ValueError
    when the value cannot be understood.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3- or 6-digit fractions.
    text = _FRACTION.sub(lambda m: m.group(1) + "." + (m.group(2) + "000000")[:6], text, count=1)
    return datetime.fromisoformat(text)


def to_zone(value: datetime, zone: Optional[tzinfo]) -> datetime:
    """Move an aware timestamp into ``zone`` (server local zone when None).

    Naive timestamps are returned as stored.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(zone) if zone is not None else value.astimezone()


def format_duration(milliseconds: float) -> str:
    """Format a duration as ``1h 5m`` or ``5m`` (whole minutes, truncated)."""
    hours = int(milliseconds // 3_600_000)
    minutes = int((milliseconds % 3_600_000) // 60_000)
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"
