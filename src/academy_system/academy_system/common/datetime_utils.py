from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_FRACTION_RE = re.compile(r"\.(\d+)")
_WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_date(value: Any) -> Optional[date]:
    """Date column value from the backend (ISO string) or a python date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a timestamptz value as returned by PostgREST.

    Handles a trailing "Z" and fractional seconds of any precision.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    s = str(value).strip().replace(" ", "T", 1)
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    s = _FRACTION_RE.sub(lambda m: "." + (m.group(1) + "000000")[:6], s, count=1)
    return datetime.fromisoformat(s)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    return as_utc(value).isoformat()


def now_utc() -> datetime:
    """Current time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def local_date(value: datetime) -> date:
    """Calendar day of an instant in the server's local zone."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone().date()


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def month_bounds(month: str) -> tuple[date, date]:
    """First and last calendar day (inclusive) of a "YYYY-MM" month."""
    m = _MONTH_RE.match((month or "").strip())
    if not m:
        raise ValidationError(f"Invalid month {month!r}, expected YYYY-MM")
    year, mon = int(m.group(1)), int(m.group(2))
    if not 1 <= mon <= 12:
        raise ValidationError(f"Invalid month {month!r}, expected YYYY-MM")
    last_day = calendar.monthrange(year, mon)[1]
    return date(year, mon, 1), date(year, mon, last_day)


def days_in_month(month: str) -> int:
    start, end = month_bounds(month)
    return (end - start).days + 1


def add_months(day: date, months: int) -> date:
    """Same day `months` later, clamped to the last day of the target month."""
    index = day.month - 1 + months
    year, month = day.year + index // 12, index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def weekday_key(day: date) -> str:
    """Three-letter lower-case weekday used by training schedules ("mon", "sat", ...)."""
    return _WEEKDAYS[day.weekday()]


def age_on(birth_date: Optional[date], today: date) -> Optional[int]:
    if birth_date is None:
        return None
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years
