from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from hrms_engine.models import BalanceState, PerformanceLabel
from hrms_engine.schemas import AttendanceRecord, Carryover, LeaveRequest, TimeBalance
from hrms_engine.services.attendance_time import (
    MAX_NORMAL_SECONDS,
    MIN_NORMAL_SECONDS,
    classify_attendance,
)
from hrms_engine.services.calendar_days import is_last_day_of_month
from hrms_engine.services.leave_hours import (
    EXTRA_TIME_FALLBACK_HOURS_PER_DAY,
    EXTRA_TIME_LEAVE_MARKER,
    HALF_DAY_HOURS,
    extra_time_leave_hours,
)

logger = logging.getLogger("hrms_engine.time_balance")


def balance_state(period_start: date, as_of: date) -> BalanceState:
    if as_of < period_start:
        return BalanceState.OPEN
    if is_last_day_of_month(as_of):
        return BalanceState.EVALUATED_AT_MONTH_END
    return BalanceState.EVALUATED_MID_PERIOD


def remaining_extra_time_leave_hours(
    *,
    extra_time_leave_hours: float,
    extra_time_seconds: int,
    low_time_seconds: int,
) -> float:
    earned_back_hours = max(0.0, (extra_time_seconds - low_time_seconds) / 3600)
    return max(0.0, extra_time_leave_hours - earned_back_hours)


def compute_carryover(*, remaining_leave_hours: float, final_difference_seconds: int) -> Carryover:
    return Carryover(
        extra_time_leave_hours=remaining_leave_hours if remaining_leave_hours > 0 else 0.0,
        low_time_seconds=abs(final_difference_seconds) if final_difference_seconds < 0 else 0,
    )


def compute_time_balance(
    records: Iterable[AttendanceRecord],
    leaves: Iterable[LeaveRequest],
    holidays: Iterable[Any] | None = None,
    *,
    period: tuple[date, date],
    as_of: date,
    carryover_seed: Carryover | None = None,
    min_normal_seconds: int = MIN_NORMAL_SECONDS,
    max_normal_seconds: int = MAX_NORMAL_SECONDS,
    half_day_hours: float = HALF_DAY_HOURS,
    fallback_hours_per_day: float = EXTRA_TIME_FALLBACK_HOURS_PER_DAY,
    marker: str = EXTRA_TIME_LEAVE_MARKER,
) -> TimeBalance:
    """Net time balance of one reporting period as seen on ``as_of``.

    ``carryover_seed`` is the previous period's month-end carryover; the
    caller decides whether to pass it. Its leave hours reopen as extra-time
    leave, and only the low time beyond those hours reopens as low time.
    Carryover for this period is only produced when ``as_of`` is the last day
    of its month.
    """
    period_start, period_end = period

    low_time_seconds = 0
    extra_time_seconds = 0
    for record in records:
        if not (period_start <= record.day_date <= period_end):
            continue
        day = classify_attendance(
            record,
            min_normal_seconds=min_normal_seconds,
            max_normal_seconds=max_normal_seconds,
        )
        low_time_seconds += day.low_time_seconds
        extra_time_seconds += day.extra_time_seconds

    leave_hours = extra_time_leave_hours(
        leaves,
        holidays,
        period=period,
        half_day_hours=half_day_hours,
        fallback_hours_per_day=fallback_hours_per_day,
        marker=marker,
    )

    if carryover_seed is not None:
        seed_leave_hours = max(0.0, carryover_seed.extra_time_leave_hours)
        # A month-end deficit already includes the leave hours it carries.
        seed_leave_seconds = int(round(seed_leave_hours * 3600))
        low_time_seconds += max(0, carryover_seed.low_time_seconds - seed_leave_seconds)
        leave_hours += seed_leave_hours

    leave_seconds = int(round(leave_hours * 3600))
    final_difference = extra_time_seconds - (leave_seconds + low_time_seconds)
    remaining = remaining_extra_time_leave_hours(
        extra_time_leave_hours=leave_hours,
        extra_time_seconds=extra_time_seconds,
        low_time_seconds=low_time_seconds,
    )

    state = balance_state(period_start, as_of)
    carryover = None
    if state == BalanceState.EVALUATED_AT_MONTH_END:
        carryover = compute_carryover(
            remaining_leave_hours=remaining,
            final_difference_seconds=final_difference,
        )
        logger.info(
            "time_balance_carryover_computed",
            extra={
                "as_of": as_of.isoformat(),
                "carryover_extra_time_leave_hours": carryover.extra_time_leave_hours,
                "carryover_low_time_seconds": carryover.low_time_seconds,
            },
        )

    return TimeBalance(
        period_start=period_start,
        period_end=period_end,
        as_of=as_of,
        state=state,
        low_time_seconds=low_time_seconds,
        extra_time_seconds=extra_time_seconds,
        extra_time_leave_hours=leave_hours,
        extra_time_leave_seconds=leave_seconds,
        final_difference_seconds=final_difference,
        performance=PerformanceLabel.GOOD if final_difference >= 0 else PerformanceLabel.NEEDS_IMPROVEMENT,
        remaining_extra_time_leave_hours=remaining,
        carryover=carryover,
    )
