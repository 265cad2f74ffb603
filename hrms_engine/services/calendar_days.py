from __future__ import annotations

import re
from calendar import monthrange
from collections.abc import Iterable, Iterator
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hrms_engine.settings import get_company_timezone_name

SUNDAY = 6

_YMD_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DMY_PATTERN = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_HHMM_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


@lru_cache
def company_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(get_company_timezone_name())
    except ZoneInfoNotFoundError:
        return ZoneInfo("Asia/Kolkata")


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def to_calendar_date(value: Any) -> date | None:
    """Normalize a date-like value to a timezone-independent calendar date.

    Aware datetimes are first moved to the company timezone so a punch made
    at 00:30 local time lands on the local day. Naive datetimes and plain
    dates are taken as-is. Strings may be ``YYYY-MM-DD``, ``DD-MM-YYYY`` or an
    ISO-8601 timestamp. Anything else returns ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(company_timezone()).date()
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None

    match = _YMD_PATTERN.match(raw)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _safe_date(year, month, day)

    match = _DMY_PATTERN.match(raw)
    if match:
        day, month, year = (int(part) for part in match.groups())
        return _safe_date(year, month, day)

    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return to_calendar_date(parsed)


def parse_hhmm(value: str | None) -> int | None:
    """Return minutes after midnight for an ``HH:MM`` wall-clock value."""
    if not value:
        return None
    match = _HHMM_PATTERN.match(value.strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def add_months(value: date, months: int) -> date:
    # Day-of-month is clamped to the target month (31 Jan + 1 month = 28/29 Feb).
    month_index = value.year * 12 + (value.month - 1) + months
    year, month_zero = divmod(month_index, 12)
    month = month_zero + 1
    day = min(value.day, monthrange(year, month)[1])
    return date(year, month, day)


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def end_of_month(value: date) -> date:
    return date(value.year, value.month, days_in_month(value.year, value.month))


def first_of_next_month(value: date) -> date:
    return add_days(end_of_month(value), 1)


def is_last_day_of_month(value: date) -> bool:
    return value == end_of_month(value)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    start = date(year, month, 1)
    return start, end_of_month(start)


def iter_days(start: date, end: date) -> Iterator[date]:
    cursor = start
    while cursor <= end:
        yield cursor
        cursor += timedelta(days=1)


def calendar_difference(start: date, end: date) -> tuple[int, int]:
    """Whole months plus leftover days from ``start`` to ``end``.

    Returns ``(0, 0)`` when ``end`` is not after ``start``.
    """
    if end <= start:
        return 0, 0
    months = (end.year - start.year) * 12 + (end.month - start.month)
    anchor = add_months(start, months)
    if anchor > end:
        months -= 1
        anchor = add_months(start, months)
    return months, (end - anchor).days


def _as_date_set(holidays: Iterable[Any] | None) -> set[date]:
    result: set[date] = set()
    for item in holidays or ():
        raw = getattr(item, "holiday_date", item)
        parsed = to_calendar_date(raw)
        if parsed is not None:
            result.add(parsed)
    return result


def is_working_day(value: date, holidays: Iterable[Any] | None = None) -> bool:
    return count_qualifying_days(value, value, holidays) == 1


def count_qualifying_days(start: Any, end: Any, holidays: Iterable[Any] | None = None) -> int:
    """Count days in ``[start, end]`` that are neither Sundays nor holidays.

    This is the single definition of a working day; leave-day and payroll
    counts go through it. Invalid dates or an inverted range yield 0.
    Holidays may be dates, date strings or ``Holiday`` records.
    """
    start_date = to_calendar_date(start)
    end_date = to_calendar_date(end)
    if start_date is None or end_date is None or start_date > end_date:
        return 0

    excluded = _as_date_set(holidays)
    count = 0
    for day in iter_days(start_date, end_date):
        if day.weekday() == SUNDAY or day in excluded:
            continue
        count += 1
    return count
