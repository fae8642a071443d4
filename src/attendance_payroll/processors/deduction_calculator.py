"""
Deduction rules.

checkinCheckout: every infraction bucket converts into whole absent-day
equivalents by floor division against its threshold. The conversions are
independent and additive. A threshold of 0 disables its rule. Approved
leave beyond the employee's paid allowance counts as absence too.

weeklyHours: shortfall hours times the hourly deduction rate.

Administrative ``other_deductions`` pass through unchanged in both modes.
"""

from decimal import Decimal

from ..models.attendance import AttendanceCounts, AttendanceSummary, MarkingMethod
from ..models.criteria import CheckinCheckoutCriteria, Criteria, WeeklyHoursCriteria
from ..models.salary import DeductionBreakdown


def threshold_equivalents(count: int, threshold: int) -> int:
    """Whole absent days earned by `count` occurrences; 0 when the rule is disabled"""
    if threshold <= 0:
        return 0
    return count // threshold


def calculate_deductions(summary: AttendanceSummary, criteria: Criteria,
                         per_day_salary: Decimal, leave_threshold: int) -> DeductionBreakdown:
    if summary.method is MarkingMethod.WEEKLY_HOURS:
        return _weekly_hours_deductions(summary, criteria)
    return _day_status_deductions(summary.counts, criteria, per_day_salary, leave_threshold)


def _day_status_deductions(counts: AttendanceCounts, criteria: CheckinCheckoutCriteria,
                           per_day_salary: Decimal, leave_threshold: int) -> DeductionBreakdown:
    late_as_absent = threshold_equivalents(counts.late, criteria.late_threshold)
    half_day_as_absent = threshold_equivalents(counts.half_day, criteria.half_day_threshold)
    early_as_absent = threshold_equivalents(counts.early_departure, criteria.early_departure_threshold)
    late_early_as_absent = threshold_equivalents(counts.late_early_departure,
                                                 criteria.late_early_departure_threshold)
    excess_leaves = max(0, counts.leave - leave_threshold)

    equivalents = (
        counts.absent
        + counts.missing
        + late_as_absent
        + half_day_as_absent
        + early_as_absent
        + late_early_as_absent
        + excess_leaves
    )
    absent_deduction = per_day_salary * equivalents

    return DeductionBreakdown(
        absent_deduction=absent_deduction,
        absent_day_equivalents=equivalents,
        late_as_absent=late_as_absent,
        half_day_as_absent=half_day_as_absent,
        early_departure_as_absent=early_as_absent,
        late_early_departure_as_absent=late_early_as_absent,
        excess_leaves=excess_leaves,
        other_deductions=criteria.other_deductions,
        total_deductions=absent_deduction + criteria.other_deductions,
    )


def _weekly_hours_deductions(summary: AttendanceSummary,
                             criteria: WeeklyHoursCriteria) -> DeductionBreakdown:
    hours_deduction = summary.hours.shortfall_hours * criteria.hourly_deduction_rate
    return DeductionBreakdown(
        hours_deduction=hours_deduction,
        other_deductions=criteria.other_deductions,
        total_deductions=hours_deduction + criteria.other_deductions,
    )
