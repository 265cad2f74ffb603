from __future__ import annotations

import enum


class LeaveCategory(str, enum.Enum):
    PAID = "Paid Leave"
    UNPAID = "Unpaid Leave"
    HALF_DAY = "Half Day Leave"
    EXTRA_TIME = "Extra Time Leave"
    OTHER = "Other"


class LeaveStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class BreakType(str, enum.Enum):
    STANDARD = "Standard"
    EXTRA = "Extra"


class BondType(str, enum.Enum):
    INTERNSHIP = "Internship"
    JOB = "Job"
    OTHER = "Other"


class BondStatus(str, enum.Enum):
    EXPIRED = "Expired"
    ACTIVE = "Active"
    FUTURE = "Future"


class DayClassification(str, enum.Enum):
    ABSENT = "Absent"
    IN_PROGRESS = "InProgress"
    LOW = "Low"
    NORMAL = "Normal"
    EXTRA = "Extra"


class BalanceState(str, enum.Enum):
    OPEN = "Open"
    EVALUATED_MID_PERIOD = "EvaluatedMidPeriod"
    EVALUATED_AT_MONTH_END = "EvaluatedAtMonthEnd"


class PerformanceLabel(str, enum.Enum):
    GOOD = "Good Performance"
    NEEDS_IMPROVEMENT = "Needs Improvement"


class HolidayStatus(str, enum.Enum):
    PAST = "past"
    UPCOMING = "upcoming"
