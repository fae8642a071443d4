from decimal import Decimal, ROUND_HALF_UP

from ..models.attendance import AttendanceSummary
from ..models.criteria import CheckinCheckoutCriteria
from ..models.salary import AdditionBreakdown

CENTS = Decimal('0.01')


def calculate_additions(summary: AttendanceSummary, criteria: CheckinCheckoutCriteria,
                        per_day_salary: Decimal, daily_hours: Decimal) -> AdditionBreakdown:
    """Overtime and off-day pay, before the attendance bonus"""
    extra_hours_pay = Decimal('0')
    if criteria.include_extra_working_hours and summary.extra_hours > 0:
        hourly_rate = per_day_salary / daily_hours
        extra_hours_pay = (summary.extra_hours * hourly_rate).quantize(CENTS, rounding=ROUND_HALF_UP)

    off_day_work_pay = Decimal('0')
    if criteria.include_weekly_off_days_worked:
        off_day_work_pay = per_day_salary * summary.counts.weekly_off_worked

    return AdditionBreakdown(
        extra_hours_pay=extra_hours_pay,
        off_day_work_pay=off_day_work_pay,
        total_additions=extra_hours_pay + off_day_work_pay,
    )
