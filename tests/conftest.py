import pytest
from decimal import Decimal

from attendance_payroll.api.mock_hr import MockHRStore
from attendance_payroll.database.db import init_db, make_engine, make_session_factory
from attendance_payroll.database.repository import PayrollRepository
from attendance_payroll.models import AttendanceRecord, DayStatus, Department, Employee, WorkSchedule
from attendance_payroll.processors.calendar_resolver import resolve_working_days
from attendance_payroll.processors.criteria_validator import validate_criteria
from attendance_payroll.processors.salary_composer import SalaryComposer

DEPARTMENTS = [Department("ENG", "Engineering"), Department("OPS", "Operations")]


def build_employee(employee_id="EMP001", name=None, base_salary="50000",
                   weekly_offs=("Saturday", "Sunday"), daily_hours="8",
                   leave_threshold=0, department_id="ENG", is_active=True):
    return Employee(
        employee_id=employee_id,
        name=name or f"Employee {employee_id}",
        base_salary=Decimal(base_salary) if base_salary is not None else None,
        schedule=WorkSchedule(daily_hours=Decimal(daily_hours), weekly_offs=frozenset(weekly_offs)),
        leave_threshold=leave_threshold,
        department_id=department_id,
        is_active=is_active,
    )


@pytest.fixture
def store():
    return MockHRStore(employees=[], departments=DEPARTMENTS)


@pytest.fixture
def add_employee(store):
    def _add(**kwargs):
        return store.add_employee(build_employee(**kwargs))
    return _add


@pytest.fixture
def mark(store):
    """Record a day with an explicit status"""
    def _mark(employee_id, day, status="present", hours="8"):
        return store.add_attendance(AttendanceRecord(
            employee_id=employee_id,
            date=day,
            status=DayStatus(status),
            working_hours=Decimal(hours),
        ))
    return _mark


@pytest.fixture
def mark_month(mark):
    """Mark every working day present; returns the working dates"""
    def _mark_month(employee_id, year, month, weekly_offs=("Saturday", "Sunday"), hours="8"):
        days = list(resolve_working_days(year, month, weekly_offs).working_days)
        for day in days:
            mark(employee_id, day, "present", hours)
        return days
    return _mark_month


@pytest.fixture
def composer(store):
    return SalaryComposer(store, store, store, store)


@pytest.fixture
def checkin_criteria():
    def _criteria(**overrides):
        raw = {
            'attendanceMarkingMethod': 'checkinCheckout',
            'lateThreshold': 3,
            'halfDayThreshold': 0,
            'earlyDepartureThreshold': 0,
            'lateEarlyDepartureThreshold': 0,
        }
        raw.update(overrides)
        return validate_criteria(raw)
    return _criteria


@pytest.fixture
def weekly_criteria():
    def _criteria(rate="50", **overrides):
        raw = {'attendanceMarkingMethod': 'weeklyHours', 'hourlyDeductionRate': rate}
        raw.update(overrides)
        return validate_criteria(raw)
    return _criteria


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def repo(session_factory):
    repository = PayrollRepository(session_factory)
    for department in DEPARTMENTS:
        repository.save_department(department)
    return repository
