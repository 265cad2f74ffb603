from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from hrms_engine.models import HolidayStatus
from hrms_engine.schemas import Holiday, HolidayView
from hrms_engine.services.calendar_days import add_days

COMPLETE_WEEK_SUNDAY_DESCRIPTION = "Sunday (Complete Week Holiday)"
MONDAY = 0


def holiday_dates(holidays: Iterable[Holiday]) -> frozenset[date]:
    return frozenset(item.holiday_date for item in holidays)


def holiday_status(holiday_date: date, today: date) -> HolidayStatus:
    return HolidayStatus.PAST if holiday_date < today else HolidayStatus.UPCOMING


def filter_holidays(
    holidays: Iterable[Holiday],
    *,
    year: int | None = None,
    month: int | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[Holiday]:
    result: list[Holiday] = []
    for item in holidays:
        day = item.holiday_date
        if year is not None and day.year != year:
            continue
        if month is not None and day.month != month:
            continue
        if start is not None and day < start:
            continue
        if end is not None and day > end:
            continue
        result.append(item)
    return result


def complete_week_sundays(holidays: Iterable[Holiday]) -> list[date]:
    """Sundays preceding a Monday-to-Saturday week that is entirely holidays."""
    dates = holiday_dates(holidays)
    sundays: list[date] = []
    for day in sorted(dates):
        if day.weekday() != MONDAY:
            continue
        if all(add_days(day, offset) in dates for offset in range(6)):
            sunday = add_days(day, -1)
            if sunday not in dates:
                sundays.append(sunday)
    return sundays


def holiday_calendar(
    holidays: Iterable[Holiday],
    *,
    today: date | None = None,
    year: int | None = None,
    month: int | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[HolidayView]:
    selected = filter_holidays(holidays, year=year, month=month, start=start, end=end)
    views = [
        HolidayView(
            holiday_date=item.holiday_date,
            description=item.description,
            status=holiday_status(item.holiday_date, today) if today is not None else None,
        )
        for item in selected
    ]
    for sunday in complete_week_sundays(selected):
        views.append(
            HolidayView(
                holiday_date=sunday,
                description=COMPLETE_WEEK_SUNDAY_DESCRIPTION,
                status=holiday_status(sunday, today) if today is not None else None,
                is_generated=True,
            )
        )
    views.sort(key=lambda item: item.holiday_date, reverse=True)
    return views
