from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from .attendance import MarkingMethod


@dataclass(frozen=True)
class CheckinCheckoutCriteria:
    """Day-status policy. Build through processors.criteria_validator.validate_criteria."""
    late_threshold: int
    half_day_threshold: int
    early_departure_threshold: int
    late_early_departure_threshold: int
    include_extra_working_hours: bool = False
    include_weekly_off_days_worked: bool = False
    perfect_attendance_bonus_enabled: bool = False
    perfect_attendance_threshold: Decimal = Decimal('100')
    perfect_attendance_bonus_amount: Decimal = Decimal('0')
    other_deductions: Decimal = Decimal('0')

    @property
    def method(self) -> MarkingMethod:
        return MarkingMethod.CHECKIN_CHECKOUT


@dataclass(frozen=True)
class WeeklyHoursCriteria:
    """Aggregate-hours policy. Build through processors.criteria_validator.validate_criteria."""
    hourly_deduction_rate: Decimal
    other_deductions: Decimal = Decimal('0')

    @property
    def method(self) -> MarkingMethod:
        return MarkingMethod.WEEKLY_HOURS


Criteria = Union[CheckinCheckoutCriteria, WeeklyHoursCriteria]
