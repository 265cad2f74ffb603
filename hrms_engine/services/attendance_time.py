from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from hrms_engine.models import DayClassification
from hrms_engine.schemas import AttendanceRecord, BreakEntry, MonthlyStats
from hrms_engine.services.calendar_days import company_timezone

logger = logging.getLogger("hrms_engine.attendance")

MIN_NORMAL_SECONDS = 8 * 3600 + 15 * 60
MAX_NORMAL_SECONDS = 8 * 3600 + 30 * 60


@dataclass(frozen=True)
class DayComputation:
    day_date: date
    classification: DayClassification
    session_seconds: int
    break_seconds: int
    net_worked_seconds: int
    low_time_seconds: int
    extra_time_seconds: int


def _align(value: datetime, other: datetime) -> datetime:
    if (value.tzinfo is None) == (other.tzinfo is None):
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=company_timezone())
    return value


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Signed whole seconds from ``start`` to ``end``.

    A naive timestamp paired with an aware one is read as company local time.
    """
    start = _align(start, end)
    end = _align(end, start)
    return int((end - start).total_seconds())


def break_entry_seconds(entry: BreakEntry) -> int:
    if entry.duration_seconds is not None:
        return max(0, int(entry.duration_seconds))
    if entry.start is not None and entry.end is not None:
        return max(0, elapsed_seconds(entry.start, entry.end))
    return 0


def total_break_seconds(breaks: Iterable[BreakEntry]) -> int:
    return sum(break_entry_seconds(entry) for entry in breaks)


def classify_net_seconds(
    net_worked_seconds: int,
    *,
    min_normal_seconds: int = MIN_NORMAL_SECONDS,
    max_normal_seconds: int = MAX_NORMAL_SECONDS,
) -> DayClassification:
    if net_worked_seconds < min_normal_seconds:
        return DayClassification.LOW
    if net_worked_seconds > max_normal_seconds:
        return DayClassification.EXTRA
    return DayClassification.NORMAL


def classify_attendance(
    record: AttendanceRecord,
    *,
    min_normal_seconds: int = MIN_NORMAL_SECONDS,
    max_normal_seconds: int = MAX_NORMAL_SECONDS,
) -> DayComputation:
    if record.check_in is None or record.check_out is None:
        classification = DayClassification.ABSENT if record.check_in is None else DayClassification.IN_PROGRESS
        return DayComputation(
            day_date=record.day_date,
            classification=classification,
            session_seconds=0,
            break_seconds=total_break_seconds(record.breaks),
            net_worked_seconds=0,
            low_time_seconds=0,
            extra_time_seconds=0,
        )

    session_seconds = elapsed_seconds(record.check_in, record.check_out)
    if session_seconds < 0:
        logger.warning(
            "attendance_negative_session",
            extra={
                "user_id": record.user_id,
                "day_date": record.day_date.isoformat(),
                "session_seconds": session_seconds,
            },
        )
        session_seconds = 0

    break_seconds = total_break_seconds(record.breaks)
    net_worked_seconds = max(0, session_seconds - break_seconds)
    classification = classify_net_seconds(
        net_worked_seconds,
        min_normal_seconds=min_normal_seconds,
        max_normal_seconds=max_normal_seconds,
    )

    low_time_seconds = 0
    extra_time_seconds = 0
    if classification == DayClassification.LOW:
        low_time_seconds = min_normal_seconds - net_worked_seconds
    elif classification == DayClassification.EXTRA:
        extra_time_seconds = net_worked_seconds - max_normal_seconds

    return DayComputation(
        day_date=record.day_date,
        classification=classification,
        session_seconds=session_seconds,
        break_seconds=break_seconds,
        net_worked_seconds=net_worked_seconds,
        low_time_seconds=low_time_seconds,
        extra_time_seconds=extra_time_seconds,
    )


def live_worked_seconds(record: AttendanceRecord, now: datetime) -> int:
    """Net worked time so far; an open break keeps running until checkout or ``now``."""
    if record.check_in is None:
        return 0
    end = record.check_out or now
    session_seconds = max(0, elapsed_seconds(record.check_in, end))

    break_seconds = 0
    for entry in record.breaks:
        if entry.duration_seconds or entry.end is not None:
            break_seconds += break_entry_seconds(entry)
        elif entry.start is not None:
            break_seconds += max(0, elapsed_seconds(entry.start, end))
    return max(0, session_seconds - break_seconds)


def summarize_month(
    records: Iterable[AttendanceRecord],
    *,
    min_normal_seconds: int = MIN_NORMAL_SECONDS,
    max_normal_seconds: int = MAX_NORMAL_SECONDS,
) -> MonthlyStats:
    days_present = 0
    absent_days = 0
    in_progress_days = 0
    normal_days = 0
    low_time_days = 0
    extra_time_days = 0
    total_worked = 0
    total_break = 0
    total_low = 0
    total_extra = 0

    for record in records:
        day = classify_attendance(
            record,
            min_normal_seconds=min_normal_seconds,
            max_normal_seconds=max_normal_seconds,
        )
        if day.classification == DayClassification.ABSENT:
            absent_days += 1
            continue
        if day.classification == DayClassification.IN_PROGRESS:
            in_progress_days += 1
            continue

        days_present += 1
        total_worked += day.net_worked_seconds
        total_break += day.break_seconds
        total_low += day.low_time_seconds
        total_extra += day.extra_time_seconds
        if day.classification == DayClassification.LOW:
            low_time_days += 1
        elif day.classification == DayClassification.EXTRA:
            extra_time_days += 1
        else:
            normal_days += 1

    return MonthlyStats(
        days_present=days_present,
        absent_days=absent_days,
        in_progress_days=in_progress_days,
        normal_days=normal_days,
        low_time_days=low_time_days,
        extra_time_days=extra_time_days,
        total_worked_seconds=total_worked,
        total_break_seconds=total_break,
        total_low_time_seconds=total_low,
        total_extra_time_seconds=total_extra,
        final_difference_seconds=total_extra - total_low,
    )


def format_duration(seconds: float) -> str:
    sign = "-" if seconds < 0 else ""
    value = int(abs(seconds))
    hours = value // 3600
    minutes = (value % 3600) // 60
    secs = value % 60
    return f"{sign}{hours:02d}:{minutes:02d}:{secs:02d}"
