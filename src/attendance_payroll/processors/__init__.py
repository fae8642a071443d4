from .calendar_resolver import WorkingCalendar, resolve_working_days
from .attendance_aggregator import AttendanceAggregator, derive_day_status
from .criteria_validator import validate_criteria
from .deduction_calculator import calculate_deductions
from .addition_calculator import calculate_additions
from .bonus_evaluator import apply_attendance_bonus, attendance_percentage
from .salary_composer import SalaryComposer, per_day_salary
from .bulk_orchestrator import BulkOrchestrator, BulkCalculationReport, BulkCalculationError
from .salary_register_generator import SalaryRegisterGenerator


__all__ = [
    'WorkingCalendar',
    'resolve_working_days',
    'AttendanceAggregator',
    'derive_day_status',
    'validate_criteria',
    'calculate_deductions',
    'calculate_additions',
    'apply_attendance_bonus',
    'attendance_percentage',
    'SalaryComposer',
    'per_day_salary',
    'BulkOrchestrator',
    'BulkCalculationReport',
    'BulkCalculationError',
    'SalaryRegisterGenerator'
]
