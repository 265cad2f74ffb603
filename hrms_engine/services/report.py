from __future__ import annotations

import logging
from datetime import date

from pydantic import ValidationError

from hrms_engine.errors import InvalidSnapshotError
from hrms_engine.schemas import Carryover, EmployeeReport, EmployeeSnapshot
from hrms_engine.settings import get_normal_band_seconds, get_settings
from hrms_engine.services.attendance_time import summarize_month
from hrms_engine.services.bonds import bond_info
from hrms_engine.services.calendar_days import month_bounds
from hrms_engine.services.leave_hours import summarize_leaves
from hrms_engine.services.salary_breakdown import (
    generate_salary_breakdown,
    merge_salary_breakdown,
    overrides_from_entries,
    summarize_salary_breakdown,
)
from hrms_engine.services.time_balance import compute_time_balance

logger = logging.getLogger("hrms_engine.report")


def load_snapshot(raw: str | bytes) -> EmployeeSnapshot:
    try:
        return EmployeeSnapshot.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidSnapshotError(f"Snapshot failed validation with {exc.error_count()} error(s)") from exc


def build_employee_report(
    snapshot: EmployeeSnapshot,
    *,
    year: int,
    month: int,
    as_of: date,
    carryover_seed: Carryover | None = None,
) -> EmployeeReport:
    """Run every calculation for one employee and one calendar month.

    Attendance and the time balance are scoped to the month. The leave
    summary covers every leave in the snapshot, so the paid-leave balance
    reflects whatever allocation cycle the caller loaded.
    """
    settings = get_settings()
    min_normal, max_normal = get_normal_band_seconds()
    period = month_bounds(year, month)

    records = [
        record
        for record in snapshot.attendance
        if record.user_id == snapshot.user_id and period[0] <= record.day_date <= period[1]
    ]
    leaves = [leave for leave in snapshot.leaves if leave.user_id == snapshot.user_id]

    monthly_stats = summarize_month(records, min_normal_seconds=min_normal, max_normal_seconds=max_normal)
    time_balance = compute_time_balance(
        records,
        leaves,
        snapshot.holidays,
        period=period,
        as_of=as_of,
        carryover_seed=carryover_seed,
        min_normal_seconds=min_normal,
        max_normal_seconds=max_normal,
        half_day_hours=settings.half_day_leave_hours,
        fallback_hours_per_day=settings.extra_time_fallback_hours_per_day,
        marker=settings.extra_time_leave_marker,
    )

    allocation = snapshot.paid_leave_allocation
    if allocation is None:
        allocation = settings.default_paid_leave_allocation
    leave_summary = summarize_leaves(
        leaves,
        snapshot.holidays,
        paid_leave_allocation=allocation,
        half_day_hours=settings.half_day_leave_hours,
        fallback_hours_per_day=settings.extra_time_fallback_hours_per_day,
        marker=settings.extra_time_leave_marker,
    )

    defaults = generate_salary_breakdown(snapshot.joining_date, snapshot.bonds)
    salary_rows = merge_salary_breakdown(defaults, overrides_from_entries(snapshot.salary_breakdown, defaults))

    logger.info(
        "employee_report_built",
        extra={
            "user_id": snapshot.user_id,
            "year": year,
            "month": month,
            "as_of": as_of.isoformat(),
            "attendance_records": len(records),
            "salary_rows": len(salary_rows),
        },
    )

    return EmployeeReport(
        user_id=snapshot.user_id,
        year=year,
        month=month,
        as_of=as_of,
        monthly_stats=monthly_stats,
        time_balance=time_balance,
        leave_summary=leave_summary,
        bond_info=bond_info(snapshot.joining_date, snapshot.bonds, as_of),
        salary_breakdown=salary_rows,
        salary_summary=summarize_salary_breakdown(salary_rows),
    )
