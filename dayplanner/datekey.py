"""Calendar-day keys.

A plan is addressed by a ``datetime.date``: no time of day, no timezone once
captured. "Today" is derived from the wall clock in the user's zone at the
moment of use.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, tzinfo

RECORD_SUFFIX = ".json"

_FILENAME_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})\.json$")


def today(tz: tzinfo | None = None) -> date:
    """Current local calendar day in *tz* (system local zone if None)."""
    if tz is None:
        return datetime.now().astimezone().date()
    return datetime.now(tz).date()


def from_instant(t: datetime, tz: tzinfo | None = None) -> date:
    """Truncate a timestamp to its local calendar day.

    Naive timestamps are taken as already local.
    """
    if t.tzinfo is None:
        return t.date()
    if tz is None:
        return t.astimezone().date()
    return t.astimezone(tz).date()


def to_filename(day: date) -> str:
    return f"{day.isoformat()}{RECORD_SUFFIX}"


def from_filename(name: str) -> date | None:
    """Parse 'YYYY-MM-DD.json'; anything else (temp files, bad dates) is None."""
    m = _FILENAME_RE.match(name)
    if not m:
        return None
    try:
        return date.fromisoformat(m.group(1))
    except ValueError:
        return None


def parse_date(value: str) -> date:
    """Strict YYYY-MM-DD parsing for user input."""
    if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value.strip()):
        raise ValueError(f"Invalid date: {value!r}")
    return date.fromisoformat(value.strip())


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def with_month(day: date, month: int) -> date:
    """Move *day* to *month* of the same year, clamping the day of month.

    Jan 31 -> February gives Feb 28, or Feb 29 in a leap year.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    return date(day.year, month, min(day.day, days_in_month(day.year, month)))


def classify(day: date, today_: date) -> str:
    """'past', 'today' or 'future' relative to *today_*."""
    if day < today_:
        return "past"
    if day == today_:
        return "today"
    return "future"
