from .employee import Employee, WorkSchedule, Department
from .attendance import (
    AttendanceRecord,
    LeaveRecord,
    DayStatus,
    MarkingMethod,
    AttendanceCounts,
    HoursSummary,
    AttendanceSummary
)
from .criteria import Criteria, CheckinCheckoutCriteria, WeeklyHoursCriteria
from .salary import (
    SalaryCalculationResult,
    SalaryStatus,
    DeductionBreakdown,
    AdditionBreakdown
)

__all__ = [
    'Employee',
    'WorkSchedule',
    'Department',
    'AttendanceRecord',
    'LeaveRecord',
    'DayStatus',
    'MarkingMethod',
    'AttendanceCounts',
    'HoursSummary',
    'AttendanceSummary',
    'Criteria',
    'CheckinCheckoutCriteria',
    'WeeklyHoursCriteria',
    'SalaryCalculationResult',
    'SalaryStatus',
    'DeductionBreakdown',
    'AdditionBreakdown'
]
