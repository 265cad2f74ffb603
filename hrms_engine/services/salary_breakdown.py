from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from hrms_engine.schemas import (
    Bond,
    SalaryBreakdownEntry,
    SalaryBreakdownSummary,
    SalaryKey,
    SalaryOverride,
)
from hrms_engine.services.bonds import sorted_bonds
from hrms_engine.services.calendar_days import add_days, end_of_month, to_calendar_date

logger = logging.getLogger("hrms_engine.salary_breakdown")

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_name(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return ""


def display_label(start_date: date, end_date: date, *, is_partial_month: bool) -> str:
    name = month_name(start_date.month)
    if is_partial_month:
        return f"{name} {start_date.day}-{end_date.day}, {start_date.year}"
    return f"{name} {start_date.year}"


def _row(start_date: date, bond: Bond, *, is_partial_month: bool) -> SalaryBreakdownEntry:
    end_date = end_of_month(start_date)
    return SalaryBreakdownEntry(
        month=start_date.month,
        year=start_date.year,
        start_date=start_date,
        end_date=end_date,
        bond_type=bond.bond_type,
        is_partial_month=is_partial_month,
        amount=bond.salary,
        default_amount=bond.salary,
        display_label=display_label(start_date, end_date, is_partial_month=is_partial_month),
    )


def generate_salary_breakdown(joining_date: Any, bonds: Iterable[Bond]) -> list[SalaryBreakdownEntry]:
    """Default month-by-month pay schedule for a bond chain.

    A mid-month joining date produces a leading partial row billed at the
    first bond's salary. That row does not count toward the first bond, whose
    full months start on the 1st of the following month.
    """
    start = to_calendar_date(joining_date)
    if start is None:
        return []
    chain = [bond for bond in sorted_bonds(bonds) if bond.period_months > 0]
    if not chain:
        return []

    rows: list[SalaryBreakdownEntry] = []
    cursor = start
    if start.day > 1:
        rows.append(_row(start, chain[0], is_partial_month=True))
        cursor = add_days(end_of_month(start), 1)

    for bond in chain:
        for _ in range(bond.period_months):
            rows.append(_row(cursor, bond, is_partial_month=False))
            cursor = add_days(end_of_month(cursor), 1)
    return rows


def merge_salary_breakdown(
    defaults: Iterable[SalaryBreakdownEntry],
    overrides: Mapping[SalaryKey, SalaryOverride] | None = None,
) -> list[SalaryBreakdownEntry]:
    overrides = overrides or {}
    merged: list[SalaryBreakdownEntry] = []
    seen: set[SalaryKey] = set()
    for row in defaults:
        seen.add(row.key)
        override = overrides.get(row.key)
        if override is None:
            merged.append(row)
            continue
        merged.append(
            row.model_copy(
                update={
                    "amount": row.amount if override.amount is None else override.amount,
                    "is_paid": override.is_paid,
                    "paid_at": override.paid_at,
                    "paid_by": override.paid_by,
                }
            )
        )

    orphaned = [key for key in overrides if key not in seen]
    if orphaned:
        logger.info(
            "salary_overrides_outside_schedule",
            extra={"keys": [f"{key.month:02d}-{key.year}" for key in orphaned]},
        )
    return merged


def build_salary_breakdown(
    joining_date: Any,
    bonds: Iterable[Bond],
    overrides: Mapping[SalaryKey, SalaryOverride] | None = None,
) -> list[SalaryBreakdownEntry]:
    return merge_salary_breakdown(generate_salary_breakdown(joining_date, bonds), overrides)


def overrides_from_entries(
    entries: Iterable[SalaryBreakdownEntry],
    defaults: Iterable[SalaryBreakdownEntry] | None = None,
) -> dict[SalaryKey, SalaryOverride]:
    """Rebuild the override map from a persisted breakdown.

    An amount is an edit only when it differs from the generator amount the
    row was saved with (``default_amount``), so untouched rows follow a later
    salary change. Rows saved without ``default_amount`` are compared with
    ``defaults`` instead; after a salary change their old amount stays pinned.
    """
    default_amounts = {row.key: row.amount for row in (defaults or ())}
    result: dict[SalaryKey, SalaryOverride] = {}
    for entry in entries:
        default_amount = entry.default_amount
        if default_amount is None:
            default_amount = default_amounts.get(entry.key)
        custom_amount = None if default_amount is not None and entry.amount == default_amount else entry.amount
        if custom_amount is None and not entry.is_paid:
            continue
        result[entry.key] = SalaryOverride(
            amount=custom_amount,
            is_paid=entry.is_paid,
            paid_at=entry.paid_at,
            paid_by=entry.paid_by,
        )
    return result


def set_salary_amount(
    overrides: Mapping[SalaryKey, SalaryOverride],
    key: SalaryKey,
    amount: float,
) -> dict[SalaryKey, SalaryOverride]:
    updated = dict(overrides)
    current = updated.get(key, SalaryOverride())
    updated[key] = current.model_copy(update={"amount": max(0.0, amount)})
    return updated


def mark_salary_entry(
    overrides: Mapping[SalaryKey, SalaryOverride],
    key: SalaryKey,
    *,
    paid: bool,
    paid_by: str | None = None,
    at: datetime | None = None,
) -> dict[SalaryKey, SalaryOverride]:
    updated = dict(overrides)
    current = updated.get(key, SalaryOverride())
    updated[key] = current.model_copy(
        update={
            "is_paid": paid,
            "paid_at": at if paid else None,
            "paid_by": paid_by if paid else None,
        }
    )
    logger.info(
        "salary_entry_marked",
        extra={"month": key.month, "year": key.year, "is_paid": paid, "paid_by": paid_by},
    )
    return updated


def summarize_salary_breakdown(rows: Iterable[SalaryBreakdownEntry]) -> SalaryBreakdownSummary:
    months = 0
    partial_months = 0
    paid_months = 0
    total_amount = 0.0
    paid_amount = 0.0
    for row in rows:
        months += 1
        total_amount += row.amount
        if row.is_partial_month:
            partial_months += 1
        if row.is_paid:
            paid_months += 1
            paid_amount += row.amount

    return SalaryBreakdownSummary(
        months=months,
        partial_months=partial_months,
        paid_months=paid_months,
        total_amount=total_amount,
        paid_amount=paid_amount,
        pending_amount=total_amount - paid_amount,
    )
