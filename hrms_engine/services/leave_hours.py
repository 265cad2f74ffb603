from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from hrms_engine.models import LeaveCategory, LeaveStatus
from hrms_engine.schemas import LeaveCategorySummary, LeaveRequest, LeaveSummary
from hrms_engine.services.calendar_days import count_qualifying_days, parse_hhmm

logger = logging.getLogger("hrms_engine.leaves")

HALF_DAY_HOURS = 4.0
EXTRA_TIME_FALLBACK_HOURS_PER_DAY = 8.25
EXTRA_TIME_LEAVE_MARKER = "[Extra Time Leave]"
MINUTES_PER_DAY = 24 * 60


def is_approved(leave: LeaveRequest) -> bool:
    return leave.status == LeaveStatus.APPROVED


def is_extra_time_substitute(leave: LeaveRequest, *, marker: str = EXTRA_TIME_LEAVE_MARKER) -> bool:
    return leave.category == LeaveCategory.HALF_DAY and marker in (leave.reason or "")


def leaves_in_period(leaves: Iterable[LeaveRequest], start: date, end: date) -> list[LeaveRequest]:
    """Approved leaves overlapping ``[start, end]``, with their span clipped to it."""
    result: list[LeaveRequest] = []
    for leave in leaves:
        if not is_approved(leave):
            continue
        if leave.end_date < leave.start_date:
            logger.warning(
                "leave_inverted_range_skipped",
                extra={"leave_id": leave.id, "user_id": leave.user_id},
            )
            continue
        if leave.start_date > end or leave.end_date < start:
            continue
        clipped_start = max(leave.start_date, start)
        clipped_end = min(leave.end_date, end)
        if clipped_start == leave.start_date and clipped_end == leave.end_date:
            result.append(leave)
        else:
            result.append(leave.model_copy(update={"start_date": clipped_start, "end_date": clipped_end}))
    return result


def approved_leave_on(leaves: Iterable[LeaveRequest], day: date) -> LeaveRequest | None:
    for leave in leaves:
        if is_approved(leave) and leave.start_date <= day <= leave.end_date:
            return leave
    return None


def time_range_hours(start_time: str | None, end_time: str | None) -> float | None:
    start_minutes = parse_hhmm(start_time)
    end_minutes = parse_hhmm(end_time)
    if start_minutes is None or end_minutes is None:
        return None
    diff = end_minutes - start_minutes
    if diff < 0:
        diff += MINUTES_PER_DAY
    return diff / 60


def extra_time_hours_for_leave(
    leave: LeaveRequest,
    holidays: Iterable[Any] | None = None,
    *,
    half_day_hours: float = HALF_DAY_HOURS,
    fallback_hours_per_day: float = EXTRA_TIME_FALLBACK_HOURS_PER_DAY,
    marker: str = EXTRA_TIME_LEAVE_MARKER,
) -> float:
    if leave.category == LeaveCategory.EXTRA_TIME:
        hours_per_day = time_range_hours(leave.start_time, leave.end_time)
        if hours_per_day is not None:
            return hours_per_day * count_qualifying_days(leave.start_date, leave.end_date, holidays)
        # Without a time range the raw inclusive span is used, Sundays and holidays included.
        days_inclusive = (leave.end_date - leave.start_date).days + 1
        return max(0, days_inclusive) * fallback_hours_per_day
    if is_extra_time_substitute(leave, marker=marker):
        return half_day_hours
    return 0.0


def leave_hours(
    leave: LeaveRequest,
    holidays: Iterable[Any] | None = None,
    *,
    half_day_hours: float = HALF_DAY_HOURS,
    fallback_hours_per_day: float = EXTRA_TIME_FALLBACK_HOURS_PER_DAY,
) -> float:
    if leave.category == LeaveCategory.HALF_DAY:
        return half_day_hours
    if leave.category == LeaveCategory.EXTRA_TIME:
        return extra_time_hours_for_leave(
            leave,
            holidays,
            half_day_hours=half_day_hours,
            fallback_hours_per_day=fallback_hours_per_day,
        )
    return 0.0


def extra_time_leave_hours(
    leaves: Iterable[LeaveRequest],
    holidays: Iterable[Any] | None = None,
    *,
    period: tuple[date, date] | None = None,
    half_day_hours: float = HALF_DAY_HOURS,
    fallback_hours_per_day: float = EXTRA_TIME_FALLBACK_HOURS_PER_DAY,
    marker: str = EXTRA_TIME_LEAVE_MARKER,
) -> float:
    holiday_list = list(holidays or ())
    if period is not None:
        selected = leaves_in_period(leaves, period[0], period[1])
    else:
        selected = [leave for leave in leaves if is_approved(leave)]

    total = 0.0
    for leave in selected:
        total += extra_time_hours_for_leave(
            leave,
            holiday_list,
            half_day_hours=half_day_hours,
            fallback_hours_per_day=fallback_hours_per_day,
            marker=marker,
        )
    return total


def leave_days_by_category(
    leaves: Iterable[LeaveRequest],
    holidays: Iterable[Any] | None,
    category: LeaveCategory,
) -> int:
    holiday_list = list(holidays or ())
    return sum(
        count_qualifying_days(leave.start_date, leave.end_date, holiday_list)
        for leave in leaves
        if is_approved(leave) and leave.category == category
    )


def summarize_leaves(
    leaves: Iterable[LeaveRequest],
    holidays: Iterable[Any] | None = None,
    *,
    paid_leave_allocation: float,
    period: tuple[date, date] | None = None,
    half_day_hours: float = HALF_DAY_HOURS,
    fallback_hours_per_day: float = EXTRA_TIME_FALLBACK_HOURS_PER_DAY,
    marker: str = EXTRA_TIME_LEAVE_MARKER,
) -> LeaveSummary:
    holiday_list = list(holidays or ())
    if period is not None:
        approved = leaves_in_period(leaves, period[0], period[1])
    else:
        approved = [leave for leave in leaves if is_approved(leave)]

    by_category: list[LeaveCategorySummary] = []
    for category in LeaveCategory:
        requests = sum(1 for leave in approved if leave.category == category)
        by_category.append(
            LeaveCategorySummary(
                category=category,
                requests=requests,
                days=leave_days_by_category(approved, holiday_list, category) if requests else 0,
            )
        )

    paid_used = leave_days_by_category(approved, holiday_list, LeaveCategory.PAID)
    allocation = max(0.0, paid_leave_allocation)
    return LeaveSummary(
        by_category=by_category,
        total_approved_requests=len(approved),
        paid_leave_allocation=allocation,
        paid_leave_used_days=paid_used,
        paid_leave_remaining_days=max(0.0, allocation - paid_used),
        extra_time_leave_hours=extra_time_leave_hours(
            approved,
            holiday_list,
            half_day_hours=half_day_hours,
            fallback_hours_per_day=fallback_hours_per_day,
            marker=marker,
        ),
    )
