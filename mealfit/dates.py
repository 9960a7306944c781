# -*- coding: utf-8 -*-
"""Calendar date normalization.

Every stored entry date is the UTC midnight instant of its calendar day, written
as ISO-8601 text. Day queries cover [midnight, midnight + 1 day - 1 microsecond].
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

STRICT_DAY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
_STRICT_DAY_RE = re.compile(STRICT_DAY_PATTERN)


def utc_now_iso() -> str:
    # Fixed-width microseconds keep lexicographic order equal to time order.
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def parse_calendar_date(value: Any) -> date:
    """Lenient parse: a date, a datetime, or an ISO date/datetime string.

    Only the calendar date as written is kept; a time-of-day or offset is dropped.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("Invalid date format")
    raw = value.strip()
    if not raw:
        raise ValueError("Invalid date format")
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise ValueError("Invalid date format") from exc


def parse_strict_day(value: Any) -> date:
    """Strict parse of a `YYYY-MM-DD` string that must also be a real calendar day."""
    if not isinstance(value, str) or not _STRICT_DAY_RE.match(value):
        raise ValueError("Invalid date format. Expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError("Invalid date format. Expected YYYY-MM-DD") from exc


def utc_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return utc_midnight(day) + timedelta(days=1) - timedelta(microseconds=1)


def day_key(day: date) -> str:
    """Stored form of a normalized entry date."""
    return utc_midnight(day).isoformat()


def end_of_day_key(day: date) -> str:
    return end_of_day(day).isoformat(timespec="microseconds")
