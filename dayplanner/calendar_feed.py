"""Read-only calendar events supplied by an external feed.

Events are only displayed next to a day's schedule; they are never merged
into a DayPlan or written to disk.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Iterable

from dayplanner.models import CalendarEvent

logger = logging.getLogger("dayplanner.calendar")


def _parse_point(value: Any, tz: tzinfo) -> datetime | None:
    """Calendar API start/end object: {'dateTime': ...} or all-day {'date': ...}."""
    if not isinstance(value, dict):
        return None
    try:
        if value.get("dateTime"):
            dt = datetime.fromisoformat(str(value["dateTime"]))
            return dt if dt.tzinfo else dt.replace(tzinfo=tz)
        if value.get("date"):
            return datetime.combine(date.fromisoformat(str(value["date"])), time(), tzinfo=tz)
    except ValueError:
        return None
    return None


def parse_google_events(items: Iterable[dict[str, Any]], tz: tzinfo) -> list[CalendarEvent]:
    """Convert Calendar API ``items`` into events, skipping malformed entries."""
    events = []
    for item in items:
        if not isinstance(item, dict):
            continue
        event_id = item.get("id")
        summary = item.get("summary")
        start = _parse_point(item.get("start"), tz)
        end = _parse_point(item.get("end"), tz)
        if not event_id or not summary or start is None or end is None:
            logger.debug("Skipping malformed calendar item %r", event_id)
            continue
        events.append(CalendarEvent(
            id=str(event_id),
            title=str(summary),
            start=start,
            end=end,
            color_hex=item.get("colorHex"),
        ))
    return events


def _aware(dt: datetime, tz: tzinfo) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=tz)


def events_on(events: Iterable[CalendarEvent], day: date, tz: tzinfo) -> list[CalendarEvent]:
    """Events overlapping the local calendar day, ordered by start.

    Zero-length events count when they start inside the day.
    """
    day_start = datetime.combine(day, time(), tzinfo=tz)
    day_end = day_start + timedelta(days=1)
    result = []
    for event in events:
        start, end = _aware(event.start, tz), _aware(event.end, tz)
        if start < day_end and (end > day_start or (start == end and start >= day_start)):
            result.append(event)
    return sorted(result, key=lambda e: _aware(e.start, tz))
