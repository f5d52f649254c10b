"""Date coercion and business-day arithmetic."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional


def to_instant(value: Any) -> Optional[datetime]:
    """Coerce a date, datetime, or ISO-8601 string to an aware UTC datetime.

    A plain date is midnight UTC. A naive datetime is taken as UTC. Returns
    None for empty values and raises ValueError for anything that is not a
    complete ISO date or datetime, since a malformed date is a caller bug
    rather than a rule violation.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        moment = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported date value: {value!r}")
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_date(value: Any) -> Optional[date]:
    """Calendar date of ``value`` in UTC, or None for empty values."""
    moment = to_instant(value)
    return None if moment is None else moment.date()


def format_instant(moment: datetime) -> str:
    """ISO date for midnight UTC, full ISO datetime otherwise."""
    if moment.timetz() == time.min.replace(tzinfo=timezone.utc):
        return moment.date().isoformat()
    return moment.isoformat()


def calculate_business_days(start: Any, end: Any) -> int:
    """Count weekdays after ``start`` up to and including ``end``.

    The start day is exclusive, so the same day gives 0. An end before the
    start also gives 0.
    """
    start_day = to_date(start)
    end_day = to_date(end)
    if start_day is None or end_day is None:
        raise ValueError("Both start and end dates are required")
    count = 0
    current = start_day + timedelta(days=1)
    while current <= end_day:
        # Monday=0 .. Sunday=6
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count
