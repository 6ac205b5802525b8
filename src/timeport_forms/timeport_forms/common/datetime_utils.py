from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Any) -> Optional[date]:
    """Accept a date, a datetime, an ISO date or an ISO datetime string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    v = value.strip()
    try:
        return parse_iso_date(v[:10])
    except ValueError:
        return None


def coerce_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or "T" not in value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_time_of_day(value: Any) -> Optional[time]:
    """Parse HH:MM or HH:MM:SS."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    return None


def minutes_of_day(t: time) -> int:
    return t.hour * 60 + t.minute


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()
