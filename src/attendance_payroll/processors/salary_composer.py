"""
Salary composition for a single employee.

``preview`` computes a SalaryCalculationResult without touching the salary
store. ``commit`` computes the same result and upserts it keyed by
(employee_id, month, year), replacing any earlier record and resetting its
status to ``calculated``. Commits for one key are serialized by a lock; the
calculation itself runs outside the lock.

Collaborators:
    directory         get_employee(employee_id) -> Employee | None
    attendance_store  get_attendance(employee_id, start, end) -> [AttendanceRecord]
    leave_store       get_approved_leaves(employee_id, start, end) -> [LeaveRecord]
    salary_store      upsert_salary(result) -> SalaryCalculationResult
"""

import logging
import threading
from dataclasses import replace
from decimal import Decimal, ROUND_FLOOR
from typing import List, Tuple

from ..errors import InvalidScheduleError, MissingBaseSalaryError, NotFoundError, ValidationError
from ..models.attendance import MarkingMethod
from ..models.criteria import CheckinCheckoutCriteria, Criteria, WeeklyHoursCriteria
from ..models.employee import Employee
from ..models.salary import SalaryCalculationResult, SalaryStatus
from .addition_calculator import calculate_additions
from .attendance_aggregator import AttendanceAggregator
from .bonus_evaluator import apply_attendance_bonus
from .calendar_resolver import resolve_working_days
from .deduction_calculator import calculate_deductions

logger = logging.getLogger(__name__)


def per_day_salary(base_salary: Decimal, total_working_days: int) -> Decimal:
    """floor(base / days); never rounds up, so per_day * days <= base"""
    if total_working_days <= 0:
        raise ValidationError('totalWorkingDays', "must be greater than zero")
    return (base_salary / Decimal(total_working_days)).to_integral_value(rounding=ROUND_FLOOR)


class KeyedLocks:
    """Fixed pool of locks; a salary key always maps to the same stripe"""

    def __init__(self, stripes: int = 64):
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(max(1, stripes))]

    def __len__(self):
        return len(self._locks)

    def lock_for(self, key: Tuple) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]


class SalaryComposer:
    """Calculate (and optionally persist) a monthly salary for one employee"""

    def __init__(self, directory, attendance_store, leave_store, salary_store=None):
        self.directory = directory
        self.aggregator = AttendanceAggregator(attendance_store, leave_store)
        self.salary_store = salary_store
        self._locks = KeyedLocks()

    def preview(self, employee_id: str, month: int, year: int, criteria: Criteria) -> SalaryCalculationResult:
        """Compute without persisting"""
        employee = self._load_employee(employee_id)
        return self.compose(employee, month, year, criteria)

    def commit(self, employee_id: str, month: int, year: int, criteria: Criteria) -> SalaryCalculationResult:
        """Compute and upsert, replacing any earlier result for the same month"""
        if self.salary_store is None:
            raise RuntimeError("SalaryComposer.commit requires a salary_store")

        result = self.preview(employee_id, month, year, criteria)
        result = replace(result, status=SalaryStatus.CALCULATED)

        with self._locks.lock_for(result.key):
            stored = self.salary_store.upsert_salary(result)

        logger.info(f"Salary committed for {employee_id} {year}-{month:02d}: net {stored.net_salary}")
        return stored

    def compose(self, employee: Employee, month: int, year: int, criteria: Criteria) -> SalaryCalculationResult:
        """Pure calculation for an already-loaded employee"""
        if not isinstance(criteria, (CheckinCheckoutCriteria, WeeklyHoursCriteria)):
            raise ValidationError('criteria', "must be validated with validate_criteria first")

        base_salary = employee.base_salary
        if base_salary is None or base_salary <= 0:
            raise MissingBaseSalaryError(f"Employee {employee.employee_id} has no base salary configured")
        if employee.schedule.daily_hours <= 0:
            raise InvalidScheduleError(
                f"Employee {employee.employee_id} has daily hours {employee.schedule.daily_hours}, must be > 0"
            )

        working_calendar = resolve_working_days(year, month, employee.schedule.weekly_offs)
        summary = self.aggregator.aggregate(employee, working_calendar, criteria.method)
        day_rate = per_day_salary(base_salary, working_calendar.total_working_days)

        deductions = calculate_deductions(summary, criteria, day_rate, employee.leave_threshold)

        additions = None
        if criteria.method is MarkingMethod.CHECKIN_CHECKOUT:
            additions = calculate_additions(summary, criteria, day_rate, employee.schedule.daily_hours)
            additions = apply_attendance_bonus(additions, summary.counts,
                                               working_calendar.total_working_days, criteria)

        total_additions = additions.total_additions if additions else Decimal('0')
        net_salary = base_salary - deductions.total_deductions + total_additions
        if net_salary < 0:
            logger.warning(f"Negative net salary {net_salary} for {employee.employee_id} {year}-{month:02d}")

        return SalaryCalculationResult(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            month=month,
            year=year,
            marking_method=criteria.method,
            base_salary=base_salary,
            total_working_days=working_calendar.total_working_days,
            per_day_salary=day_rate,
            attendance=summary.counts,
            hours=summary.hours if criteria.method is MarkingMethod.WEEKLY_HOURS else None,
            deductions=deductions,
            additions=additions,
            net_salary=net_salary,
            status=SalaryStatus.PENDING,
        )

    def _load_employee(self, employee_id: str) -> Employee:
        employee = self.directory.get_employee(employee_id)
        if employee is None or not employee.is_active:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee
