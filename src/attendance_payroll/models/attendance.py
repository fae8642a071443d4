from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class DayStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LATE = "late"
    EARLY_DEPARTURE = "early-departure"
    LATE_EARLY_DEPARTURE = "late-early-departure"


class MarkingMethod(str, Enum):
    CHECKIN_CHECKOUT = "checkinCheckout"
    WEEKLY_HOURS = "weeklyHours"


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance on one calendar date"""
    employee_id: str
    date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: Optional[DayStatus] = None
    working_hours: Decimal = Decimal('0')


@dataclass(frozen=True)
class LeaveRecord:
    """Leave request covering start_date..end_date inclusive"""
    employee_id: str
    start_date: date
    end_date: date
    approved: bool = False

    def covers(self, day: date) -> bool:
        return self.approved and self.start_date <= day <= self.end_date


@dataclass
class AttendanceCounts:
    """Per-status day counts for checkinCheckout mode"""
    present: int = 0
    absent: int = 0
    missing: int = 0
    late: int = 0
    half_day: int = 0
    early_departure: int = 0
    late_early_departure: int = 0
    leave: int = 0
    weekly_off_worked: int = 0


@dataclass
class HoursSummary:
    """Aggregate hours for weeklyHours mode"""
    actual_hours: Decimal = Decimal('0')
    expected_hours: Decimal = Decimal('0')

    @property
    def shortfall_hours(self) -> Decimal:
        return max(Decimal('0'), self.expected_hours - self.actual_hours)


@dataclass
class AttendanceSummary:
    """Output of the attendance aggregator; counts is None in weeklyHours mode"""
    method: MarkingMethod
    total_working_days: int
    counts: Optional[AttendanceCounts] = None
    hours: HoursSummary = field(default_factory=HoursSummary)
    extra_hours: Decimal = Decimal('0')
