from decimal import Decimal, ROUND_DOWN

from ..models.attendance import AttendanceCounts
from ..models.criteria import CheckinCheckoutCriteria
from ..models.salary import AdditionBreakdown


def attendance_percentage(counts: AttendanceCounts, total_working_days: int) -> Decimal:
    """Late days count as attended, half-days as half a day"""
    attended = Decimal(counts.present + counts.late) + Decimal(counts.half_day) / Decimal('2')
    return attended / Decimal(total_working_days) * Decimal('100')


def apply_attendance_bonus(additions: AdditionBreakdown, counts: AttendanceCounts,
                           total_working_days: int, criteria: CheckinCheckoutCriteria) -> AdditionBreakdown:
    """Set the perfect-attendance bonus on `additions` and refresh its total"""
    percentage = attendance_percentage(counts, total_working_days)
    bonus = Decimal('0')
    if criteria.perfect_attendance_bonus_enabled and percentage >= criteria.perfect_attendance_threshold:
        bonus = criteria.perfect_attendance_bonus_amount

    # Truncated for display only; the comparison above uses the exact value
    additions.attendance_percentage = percentage.quantize(Decimal('0.01'), rounding=ROUND_DOWN)
    additions.perfect_attendance_bonus = bonus
    additions.total_additions = (additions.extra_hours_pay + additions.off_day_work_pay
                                 + bonus + additions.other_additions)
    return additions
