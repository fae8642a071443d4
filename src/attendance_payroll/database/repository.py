import json
import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError

from .db import utcnow
from .models import AttendanceRecordDB, DepartmentDB, EmployeeDB, LeaveRecordDB, SalaryRecordDB
from ..errors import DataAccessError, NotFoundError, StatusTransitionError, ValidationError
from ..models.attendance import AttendanceRecord, DayStatus, LeaveRecord
from ..models.employee import Department, Employee, WorkSchedule
from ..models.salary import AdditionBreakdown, SalaryCalculationResult, SalaryStatus
from ..utils.validators import validate_time_of_day

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    SalaryStatus.CALCULATED: SalaryStatus.APPROVED,
    SalaryStatus.APPROVED: SalaryStatus.PAID,
}


class PayrollRepository:
    """Repository for HR reference data and salary records.

    Every call opens its own session from ``session_factory`` so one
    repository can be shared by the bulk calculation's worker threads.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"Database error: {exc}", exc_info=True)
            raise DataAccessError(f"Database error: {exc}") from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # ========== Department Operations ==========

    def save_department(self, department: Department) -> Department:
        """Save or update department"""
        with self._session() as db:
            db_department = db.query(DepartmentDB).filter_by(id=department.department_id).first()
            if not db_department:
                db.add(DepartmentDB(id=department.department_id, name=department.name))
            else:
                db_department.name = department.name
        return department

    def get_department(self, department_id: str) -> Optional[Department]:
        """Get department by ID"""
        with self._session() as db:
            row = db.query(DepartmentDB).filter_by(id=department_id).first()
            return Department(department_id=row.id, name=row.name) if row else None

    # ========== Employee Operations ==========

    def save_employee(self, employee: Employee) -> Employee:
        """Save or update employee"""
        schedule = employee.schedule
        for field, value in (('checkInTime', schedule.check_in_time), ('checkOutTime', schedule.check_out_time)):
            if not validate_time_of_day(value):
                raise ValidationError(field, f"must be HH:MM, got {value!r}")
        if schedule.daily_hours is None or schedule.daily_hours <= 0:
            raise ValidationError('dailyHours', f"must be > 0, got {schedule.daily_hours}")
        values = dict(
            name=employee.name,
            department_id=employee.department_id,
            is_active=employee.is_active,
            monthly_salary=employee.base_salary,
            leave_threshold=employee.leave_threshold,
            check_in_time=schedule.check_in_time,
            check_out_time=schedule.check_out_time,
            daily_hours=schedule.daily_hours,
            weekly_offs=','.join(sorted(schedule.weekly_offs)),
            check_in_grace_minutes=schedule.check_in_grace_minutes,
            check_out_grace_minutes=schedule.check_out_grace_minutes,
        )
        with self._session() as db:
            db_employee = db.query(EmployeeDB).filter_by(id=employee.employee_id).first()
            if not db_employee:
                db.add(EmployeeDB(id=employee.employee_id, **values))
            else:
                for key, value in values.items():
                    setattr(db_employee, key, value)
        return employee

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        """Get employee by ID"""
        with self._session() as db:
            row = db.query(EmployeeDB).filter_by(id=employee_id).first()
            return self._employee_from_row(row) if row else None

    def list_employees(self, department_id: Optional[str] = None, active_only: bool = True) -> List[Employee]:
        """Employees ordered by ID, optionally one department only"""
        with self._session() as db:
            query = db.query(EmployeeDB)
            if department_id is not None:
                query = query.filter_by(department_id=department_id)
            if active_only:
                query = query.filter_by(is_active=True)
            return [self._employee_from_row(row) for row in query.order_by(EmployeeDB.id).all()]

    # ========== Attendance / Leave Operations ==========

    def save_attendance(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or replace the attendance row for (employee, date)"""
        with self._session() as db:
            row = db.query(AttendanceRecordDB).filter_by(
                employee_id=record.employee_id, date=record.date
            ).first()
            if not row:
                row = AttendanceRecordDB(employee_id=record.employee_id, date=record.date)
                db.add(row)
            row.check_in = record.check_in
            row.check_out = record.check_out
            row.status = record.status.value if record.status else None
            row.working_hours = record.working_hours
        return record

    def get_attendance(self, employee_id: str, start: date, end: date) -> List[AttendanceRecord]:
        """Attendance rows in [start, end]"""
        with self._session() as db:
            rows = db.query(AttendanceRecordDB).filter(
                and_(
                    AttendanceRecordDB.employee_id == employee_id,
                    AttendanceRecordDB.date >= start,
                    AttendanceRecordDB.date <= end
                )
            ).order_by(AttendanceRecordDB.date).all()
            return [
                AttendanceRecord(
                    employee_id=row.employee_id,
                    date=row.date,
                    check_in=row.check_in,
                    check_out=row.check_out,
                    status=DayStatus(row.status) if row.status else None,
                    working_hours=Decimal(str(row.working_hours or 0)),
                )
                for row in rows
            ]

    def save_leave(self, leave: LeaveRecord) -> LeaveRecord:
        with self._session() as db:
            db.add(LeaveRecordDB(
                employee_id=leave.employee_id,
                start_date=leave.start_date,
                end_date=leave.end_date,
                approved=leave.approved
            ))
        return leave

    def get_approved_leaves(self, employee_id: str, start: date, end: date) -> List[LeaveRecord]:
        """Approved leaves overlapping [start, end]"""
        with self._session() as db:
            rows = db.query(LeaveRecordDB).filter(
                and_(
                    LeaveRecordDB.employee_id == employee_id,
                    LeaveRecordDB.approved.is_(True),
                    LeaveRecordDB.start_date <= end,
                    LeaveRecordDB.end_date >= start
                )
            ).all()
            return [
                LeaveRecord(employee_id=row.employee_id, start_date=row.start_date,
                            end_date=row.end_date, approved=row.approved)
                for row in rows
            ]

    # ========== Salary Operations ==========

    def upsert_salary(self, result: SalaryCalculationResult) -> SalaryCalculationResult:
        """Insert, or fully replace, the salary record for (employee, month, year)"""
        with self._session() as db:
            row = self._salary_row(db, result.employee_id, result.month, result.year)
            if not row:
                row = SalaryRecordDB(employee_id=result.employee_id, month=result.month, year=result.year)
                db.add(row)
                logger.debug(f"Creating salary record {result.key}")
            else:
                logger.debug(f"Replacing salary record {result.key} (was {row.status})")
            self._write_result(row, result)
            row.status = result.status.value
            row.remarks = result.remarks
            row.approved_at = None
            row.paid_on = None
            db.flush()
            return self._result_from_row(row)

    def get_salary(self, employee_id: str, month: int, year: int) -> Optional[SalaryCalculationResult]:
        """Get specific salary record"""
        with self._session() as db:
            row = self._salary_row(db, employee_id, month, year)
            return self._result_from_row(row) if row else None

    def list_salaries(self, month: Optional[int] = None, year: Optional[int] = None,
                      status: Optional[str] = None, employee_id: Optional[str] = None) -> List[SalaryCalculationResult]:
        """Salary records, newest period first"""
        with self._session() as db:
            query = db.query(SalaryRecordDB)
            if month:
                query = query.filter_by(month=month)
            if year:
                query = query.filter_by(year=year)
            if status:
                query = query.filter_by(status=status)
            if employee_id:
                query = query.filter_by(employee_id=employee_id)
            rows = query.order_by(
                SalaryRecordDB.year.desc(), SalaryRecordDB.month.desc(), SalaryRecordDB.employee_id
            ).all()
            return [self._result_from_row(row) for row in rows]

    def update_salary_status(self, employee_id: str, month: int, year: int,
                             status: SalaryStatus) -> SalaryCalculationResult:
        """Advance the salary lifecycle: calculated -> approved -> paid"""
        status = SalaryStatus(status)
        with self._session() as db:
            row = self._require_salary_row(db, employee_id, month, year)
            current = SalaryStatus(row.status)
            if ALLOWED_TRANSITIONS.get(current) is not status:
                raise StatusTransitionError(
                    f"Cannot change salary status from {current.value} to {status.value}"
                )
            row.status = status.value
            if status is SalaryStatus.APPROVED:
                row.approved_at = utcnow()
            elif status is SalaryStatus.PAID:
                row.paid_on = utcnow()
            logger.info(f"Salary {employee_id} {year}-{month:02d} marked {status.value}")
            return self._result_from_row(row)

    def adjust_salary(self, employee_id: str, month: int, year: int,
                      other_deductions: Optional[Decimal] = None,
                      other_additions: Optional[Decimal] = None,
                      remarks: Optional[str] = None) -> SalaryCalculationResult:
        """Manual adjustment of a calculated (not yet approved) record.

        Administrative deductions and allowances replace the previous
        values; totals and net salary are recomputed from the breakdown.
        """
        other_deductions = _amount('otherDeductions', other_deductions)
        other_additions = _amount('otherAdditions', other_additions)

        with self._session() as db:
            row = self._require_salary_row(db, employee_id, month, year)
            if row.status != SalaryStatus.CALCULATED.value:
                raise StatusTransitionError(f"Only calculated salaries can be adjusted, this one is {row.status}")

            result = self._result_from_row(row)
            if other_deductions is not None:
                deductions = result.deductions
                deductions.other_deductions = other_deductions
                deductions.total_deductions = (
                    deductions.absent_deduction + deductions.hours_deduction + other_deductions
                )
            if other_additions is not None:
                additions = result.additions or AdditionBreakdown()
                additions.other_additions = other_additions
                additions.total_additions = (
                    additions.extra_hours_pay + additions.off_day_work_pay
                    + additions.perfect_attendance_bonus + other_additions
                )
                result = replace(result, additions=additions)
            result.net_salary = result.base_salary - result.deductions.total_deductions + result.total_additions
            if remarks is not None:
                result = replace(result, remarks=remarks)
                row.remarks = remarks

            self._write_result(row, result)
            logger.info(f"Salary {employee_id} {year}-{month:02d} adjusted: net {result.net_salary}")
            return self._result_from_row(row)

    # ========== Helper Methods ==========

    def _salary_row(self, db, employee_id: str, month: int, year: int) -> Optional[SalaryRecordDB]:
        return db.query(SalaryRecordDB).filter(
            and_(
                SalaryRecordDB.employee_id == employee_id,
                SalaryRecordDB.month == month,
                SalaryRecordDB.year == year
            )
        ).first()

    def _require_salary_row(self, db, employee_id: str, month: int, year: int) -> SalaryRecordDB:
        row = self._salary_row(db, employee_id, month, year)
        if not row:
            raise NotFoundError(f"No salary record for {employee_id} {year}-{month:02d}")
        return row

    def _write_result(self, row: SalaryRecordDB, result: SalaryCalculationResult):
        row.base_salary = result.base_salary
        row.per_day_salary = result.per_day_salary
        row.total_deductions = result.deductions.total_deductions
        row.total_additions = result.total_additions
        row.net_salary = result.net_salary
        row.data_json = json.dumps(result.to_dict())

    def _result_from_row(self, row: SalaryRecordDB) -> SalaryCalculationResult:
        result = SalaryCalculationResult.from_dict(json.loads(row.data_json))
        return replace(result, status=SalaryStatus(row.status), remarks=row.remarks or '')

    def _employee_from_row(self, row: EmployeeDB) -> Employee:
        offs = frozenset(day for day in (row.weekly_offs or '').split(',') if day)
        return Employee(
            employee_id=row.id,
            name=row.name,
            base_salary=Decimal(str(row.monthly_salary)) if row.monthly_salary is not None else None,
            schedule=WorkSchedule(
                check_in_time=row.check_in_time,
                check_out_time=row.check_out_time,
                daily_hours=Decimal(str(row.daily_hours)),
                weekly_offs=offs,
                check_in_grace_minutes=row.check_in_grace_minutes,
                check_out_grace_minutes=row.check_out_grace_minutes,
            ),
            leave_threshold=row.leave_threshold or 0,
            department_id=row.department_id,
            is_active=bool(row.is_active),
        )


def _amount(field: str, value) -> Optional[Decimal]:
    """Non-negative money amount from a form value; None passes through"""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number, not a boolean")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(field, f"must be a number, got {value!r}") from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError(field, f"must be >= 0, got {amount}")
    return amount
