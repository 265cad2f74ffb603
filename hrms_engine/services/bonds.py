from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from hrms_engine.errors import BondValidationError
from hrms_engine.models import BondStatus
from hrms_engine.schemas import Bond, BondInfo, BondPeriod, RemainingDuration
from hrms_engine.services.calendar_days import add_days, add_months, calendar_difference, to_calendar_date

logger = logging.getLogger("hrms_engine.bonds")

NO_REMAINING_DISPLAY = "-"
COMPLETED_DISPLAY = "Completed"


@dataclass(frozen=True)
class ScheduledBond:
    index: int
    bond: Bond
    start_date: date
    end_date: date


def sorted_bonds(bonds: Iterable[Bond]) -> list[Bond]:
    return sorted(bonds, key=lambda item: item.order)


def schedule_bonds(joining_date: Any, bonds: Iterable[Bond]) -> list[ScheduledBond]:
    """Chain bonds back to back from the joining date.

    Each bond starts the day after the previous one ends. Bonds without a
    positive period are dropped and do not take a slot in the chain.
    """
    start = to_calendar_date(joining_date)
    if start is None:
        logger.warning("bond_schedule_without_joining_date", extra={"joining_date": str(joining_date)})
        return []

    scheduled: list[ScheduledBond] = []
    for index, bond in enumerate(sorted_bonds(bonds)):
        if bond.period_months <= 0:
            logger.warning(
                "bond_skipped_non_positive_period",
                extra={"bond_index": index, "period_months": bond.period_months},
            )
            continue
        if scheduled:
            previous = scheduled[-1]
            start = add_days(add_months(previous.start_date, previous.bond.period_months), 1)
        scheduled.append(
            ScheduledBond(
                index=index,
                bond=bond,
                start_date=start,
                end_date=add_months(start, bond.period_months),
            )
        )
    return scheduled


def bond_status(start_date: date, end_date: date, today: date) -> BondStatus:
    if today >= end_date:
        return BondStatus.EXPIRED
    if start_date <= today:
        return BondStatus.ACTIVE
    return BondStatus.FUTURE


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}{'' if value == 1 else 's'}"


def format_span(years: int, months: int, days: int) -> str:
    parts = []
    if years:
        parts.append(_plural(years, "year"))
    if months:
        parts.append(_plural(months, "month"))
    if days:
        parts.append(_plural(days, "day"))
    return " ".join(parts) if parts else COMPLETED_DISPLAY


def remaining_duration(today: date, end_date: date) -> RemainingDuration:
    total_months, days = calendar_difference(today, end_date)
    years, months = divmod(total_months, 12)
    return RemainingDuration(
        years=years,
        months=months,
        days=days,
        display=format_span(years, months, days),
    )


def _expired_display(end_date: date, today: date) -> str:
    total_months, days = calendar_difference(end_date, today)
    if total_months == 0 and days == 0:
        return "Expired today"
    return f"Expired {format_span(0, total_months, days)} ago"


def _starts_in_display(start_date: date, today: date) -> str:
    return f"Starts in {_plural((start_date - today).days, 'day')}"


def _bond_period(item: ScheduledBond, today: date) -> BondPeriod:
    status = bond_status(item.start_date, item.end_date, today)
    if status == BondStatus.ACTIVE:
        remaining = remaining_duration(today, item.end_date)
    elif status == BondStatus.EXPIRED:
        remaining = RemainingDuration(display=_expired_display(item.end_date, today))
    else:
        remaining = RemainingDuration(display=_starts_in_display(item.start_date, today))

    return BondPeriod(
        index=item.index,
        bond_type=item.bond.bond_type,
        period_months=item.bond.period_months,
        salary=item.bond.salary,
        start_date=item.start_date,
        end_date=item.end_date,
        status=status,
        remaining=remaining,
    )


def bond_info(joining_date: Any, bonds: Iterable[Bond], today: date) -> BondInfo:
    periods = [_bond_period(item, today) for item in schedule_bonds(joining_date, bonds)]
    if not periods:
        return BondInfo()

    current = next((period for period in periods if period.status == BondStatus.ACTIVE), None)
    upcoming = next((period for period in periods if period.status == BondStatus.FUTURE), None)
    last = periods[-1]

    if current is not None:
        current_remaining = current.remaining
    elif upcoming is not None:
        current_remaining = RemainingDuration(display=upcoming.remaining.display)
    else:
        current_remaining = RemainingDuration(display=COMPLETED_DISPLAY)

    if current is not None or upcoming is not None:
        total_remaining = remaining_duration(today, last.end_date)
    else:
        total_remaining = RemainingDuration(display=NO_REMAINING_DISPLAY)

    first_open = next((period for period in periods if period.status != BondStatus.EXPIRED), last)

    return BondInfo(
        bonds=periods,
        current_bond=current,
        current_bond_remaining=current_remaining,
        total_remaining=total_remaining,
        finish_date=last.end_date,
        first_completion_date=first_open.end_date,
        first_completion_bond_type=first_open.bond_type,
        current_salary=current.salary if current is not None else 0.0,
    )


def validate_bond_chain(bonds: Iterable[Bond]) -> list[Bond]:
    """Reject a bond list before it is saved; the scheduler itself never raises."""
    ordered = sorted_bonds(bonds)
    for index, bond in enumerate(ordered):
        if bond.period_months <= 0:
            raise BondValidationError(f"Bond {index + 1} must have a positive period", index=index)
        if bond.salary < 0:
            raise BondValidationError(f"Bond {index + 1} salary cannot be negative", index=index)
    return ordered
