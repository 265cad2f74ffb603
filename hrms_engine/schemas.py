from datetime import date, datetime
from typing import Annotated, Any, NamedTuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hrms_engine.models import (
    BalanceState,
    BondStatus,
    BondType,
    BreakType,
    HolidayStatus,
    LeaveCategory,
    LeaveStatus,
    PerformanceLabel,
)
from hrms_engine.services.calendar_days import to_calendar_date


def _coerce_calendar_date(value: Any) -> Any:
    if value is None or isinstance(value, date):
        return value
    parsed = to_calendar_date(value)
    # Unparseable input is handed back so pydantic reports it.
    return parsed if parsed is not None else value


CalendarDate = Annotated[date, BeforeValidator(_coerce_calendar_date)]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Holiday(_WireModel):
    holiday_date: CalendarDate = Field(alias="date")
    description: str = ""


class HolidayView(_FrozenModel):
    holiday_date: date
    description: str
    status: HolidayStatus | None = None
    is_generated: bool = False


class BreakEntry(_WireModel):
    start: datetime | None = None
    end: datetime | None = None
    duration_seconds: float | None = None
    break_type: BreakType = Field(default=BreakType.STANDARD, alias="type")
    reason: str | None = None


class AttendanceRecord(_WireModel):
    user_id: str
    day_date: CalendarDate = Field(alias="date")
    check_in: datetime | None = None
    check_out: datetime | None = None
    breaks: list[BreakEntry] = Field(default_factory=list)
    notes: str | None = None


class LeaveRequest(_WireModel):
    id: str | None = None
    user_id: str
    start_date: CalendarDate
    end_date: CalendarDate
    category: LeaveCategory
    status: LeaveStatus = LeaveStatus.PENDING
    reason: str = ""
    start_time: str | None = None
    end_time: str | None = None


class Bond(_WireModel):
    bond_type: BondType = Field(alias="type")
    period_months: int = 0
    salary: float = 0.0
    order: int = 0


class SalaryKey(NamedTuple):
    month: int
    year: int


class SalaryBreakdownEntry(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    month: int = Field(ge=1, le=12)
    year: int
    start_date: CalendarDate
    end_date: CalendarDate
    bond_type: BondType
    is_partial_month: bool = False
    amount: float = 0.0
    # Amount the generator produced for this row; None on rows saved without it.
    default_amount: float | None = None
    is_paid: bool = False
    paid_at: datetime | None = None
    paid_by: str | None = None
    display_label: str = ""

    @property
    def key(self) -> SalaryKey:
        return SalaryKey(self.month, self.year)


class SalaryOverride(_FrozenModel):
    amount: float | None = None
    is_paid: bool = False
    paid_at: datetime | None = None
    paid_by: str | None = None


class SalaryBreakdownSummary(_FrozenModel):
    months: int
    partial_months: int
    paid_months: int
    total_amount: float
    paid_amount: float
    pending_amount: float


class MonthlyStats(_FrozenModel):
    days_present: int = 0
    absent_days: int = 0
    in_progress_days: int = 0
    normal_days: int = 0
    low_time_days: int = 0
    extra_time_days: int = 0
    total_worked_seconds: int = 0
    total_break_seconds: int = 0
    total_low_time_seconds: int = 0
    total_extra_time_seconds: int = 0
    final_difference_seconds: int = 0


class Carryover(_FrozenModel):
    extra_time_leave_hours: float = 0.0
    low_time_seconds: int = 0


class TimeBalance(_FrozenModel):
    period_start: date
    period_end: date
    as_of: date
    state: BalanceState
    low_time_seconds: int
    extra_time_seconds: int
    extra_time_leave_hours: float
    extra_time_leave_seconds: int
    final_difference_seconds: int
    performance: PerformanceLabel
    remaining_extra_time_leave_hours: float
    carryover: Carryover | None = None


class LeaveCategorySummary(_FrozenModel):
    category: LeaveCategory
    requests: int
    days: int


class LeaveSummary(_FrozenModel):
    by_category: list[LeaveCategorySummary]
    total_approved_requests: int
    paid_leave_allocation: float
    paid_leave_used_days: int
    paid_leave_remaining_days: float
    extra_time_leave_hours: float


class RemainingDuration(_FrozenModel):
    years: int = 0
    months: int = 0
    days: int = 0
    display: str = "-"


class BondPeriod(_FrozenModel):
    index: int
    bond_type: BondType
    period_months: int
    salary: float
    start_date: date
    end_date: date
    status: BondStatus
    remaining: RemainingDuration


class BondInfo(_FrozenModel):
    bonds: list[BondPeriod] = Field(default_factory=list)
    current_bond: BondPeriod | None = None
    current_bond_remaining: RemainingDuration = Field(default_factory=RemainingDuration)
    total_remaining: RemainingDuration = Field(default_factory=RemainingDuration)
    finish_date: date | None = None
    first_completion_date: date | None = None
    first_completion_bond_type: BondType | None = None
    current_salary: float = 0.0


class EmployeeSnapshot(_WireModel):
    user_id: str
    joining_date: CalendarDate | None = None
    bonds: list[Bond] = Field(default_factory=list)
    paid_leave_allocation: float | None = None
    salary_breakdown: list[SalaryBreakdownEntry] = Field(default_factory=list)
    attendance: list[AttendanceRecord] = Field(default_factory=list)
    leaves: list[LeaveRequest] = Field(default_factory=list)
    holidays: list[Holiday] = Field(default_factory=list)


class EmployeeReport(_FrozenModel):
    user_id: str
    year: int
    month: int
    as_of: date
    monthly_stats: MonthlyStats
    time_balance: TimeBalance
    leave_summary: LeaveSummary
    bond_info: BondInfo
    salary_breakdown: list[SalaryBreakdownEntry]
    salary_summary: SalaryBreakdownSummary
