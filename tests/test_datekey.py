"""Tests for dayplanner/datekey.py — calendar-day keys and month clamping."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from dayplanner.datekey import (
    classify,
    from_filename,
    from_instant,
    parse_date,
    to_filename,
    with_month,
)


def test_filename_roundtrip():
    assert to_filename(date(2026, 3, 7)) == "2026-03-07.json"
    assert from_filename("2026-03-07.json") == date(2026, 3, 7)


@pytest.mark.parametrize("name", [
    "notes.txt",
    "2026-03-07.json.tmp",
    ".tmp_abc123.json",
    "2026-02-30.json",
    "2026-3-7.json",
    "2026-03-07.yaml",
])
def test_from_filename_rejects_non_records(name):
    assert from_filename(name) is None


def test_from_instant_uses_zone():
    # 23:30 UTC on Jan 1 is already Jan 2 in Tokyo
    t = datetime(2026, 1, 1, 23, 30, tzinfo=timezone.utc)
    assert from_instant(t, ZoneInfo("UTC")) == date(2026, 1, 1)
    assert from_instant(t, ZoneInfo("Asia/Tokyo")) == date(2026, 1, 2)


def test_from_instant_naive_is_local():
    assert from_instant(datetime(2026, 5, 4, 1, 0)) == date(2026, 5, 4)


def test_with_month_clamps_day():
    assert with_month(date(2026, 1, 31), 2) == date(2026, 2, 28)
    assert with_month(date(2024, 1, 31), 2) == date(2024, 2, 29)
    assert with_month(date(2026, 3, 31), 4) == date(2026, 4, 30)
    assert with_month(date(2026, 3, 15), 4) == date(2026, 4, 15)


@pytest.mark.parametrize("month", [0, 13, -1])
def test_with_month_rejects_invalid_month(month):
    with pytest.raises(ValueError):
        with_month(date(2026, 1, 1), month)


def test_classify():
    today = date(2026, 6, 15)
    assert classify(date(2026, 6, 14), today) == "past"
    assert classify(today, today) == "today"
    assert classify(date(2026, 6, 16), today) == "future"


def test_parse_date_strict():
    assert parse_date("2026-06-15") == date(2026, 6, 15)
    for bad in ("", "15/06/2026", "2026-06-15T00:00:00", "2026-02-30"):
        with pytest.raises(ValueError):
            parse_date(bad)
