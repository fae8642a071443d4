import copy
import random
import threading
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from ..models.attendance import AttendanceRecord, LeaveRecord
from ..models.employee import Department, Employee, WorkSchedule
from ..models.salary import SalaryCalculationResult
from ..processors.calendar_resolver import resolve_working_days


class MockHRStore:
    """In-memory HR directory, attendance, leave and salary store"""

    # Sample reference data
    MOCK_DEPARTMENTS = [
        Department(department_id="ENG", name="Engineering"),
        Department(department_id="OPS", name="Operations"),
    ]

    MOCK_EMPLOYEES = [
        Employee(
            employee_id="EMP001",
            name="Ayesha Khan",
            base_salary=Decimal('50000'),
            department_id="ENG",
            leave_threshold=2,
        ),
        Employee(
            employee_id="EMP002",
            name="Bilal Ahmed",
            base_salary=Decimal('65000'),
            department_id="ENG",
            leave_threshold=1,
            schedule=WorkSchedule(check_in_time="10:00", check_out_time="18:00"),
        ),
        Employee(
            employee_id="EMP003",
            name="Sana Iqbal",
            base_salary=Decimal('42000'),
            department_id="OPS",
            schedule=WorkSchedule(daily_hours=Decimal('9'), check_out_time="18:00",
                                  weekly_offs=frozenset({"Sunday"})),
        ),
    ]

    def __init__(self, employees: Optional[List[Employee]] = None,
                 departments: Optional[List[Department]] = None):
        self.employees: Dict[str, Employee] = {
            e.employee_id: e for e in (self.MOCK_EMPLOYEES if employees is None else employees)
        }
        self.departments: Dict[str, Department] = {
            d.department_id: d for d in (self.MOCK_DEPARTMENTS if departments is None else departments)
        }
        self.attendance: Dict[Tuple[str, date], AttendanceRecord] = {}
        self.leaves: List[LeaveRecord] = []
        self.salaries: Dict[Tuple[str, int, int], SalaryCalculationResult] = {}
        self.upsert_count = 0
        self._lock = threading.Lock()

    # Directory

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def get_department(self, department_id: str) -> Optional[Department]:
        return self.departments.get(department_id)

    def list_employees(self, department_id: Optional[str] = None, active_only: bool = True) -> List[Employee]:
        employees = sorted(self.employees.values(), key=lambda e: e.employee_id)
        if department_id is not None:
            employees = [e for e in employees if e.department_id == department_id]
        if active_only:
            employees = [e for e in employees if e.is_active]
        return employees

    def add_employee(self, employee: Employee) -> Employee:
        self.employees[employee.employee_id] = employee
        return employee

    # Attendance and leave

    def add_attendance(self, record: AttendanceRecord) -> AttendanceRecord:
        self.attendance[(record.employee_id, record.date)] = record
        return record

    def get_attendance(self, employee_id: str, start: date, end: date) -> List[AttendanceRecord]:
        return sorted(
            (r for (emp, day), r in self.attendance.items() if emp == employee_id and start <= day <= end),
            key=lambda r: r.date,
        )

    def add_leave(self, leave: LeaveRecord) -> LeaveRecord:
        self.leaves.append(leave)
        return leave

    def get_approved_leaves(self, employee_id: str, start: date, end: date) -> List[LeaveRecord]:
        return [
            leave for leave in self.leaves
            if leave.employee_id == employee_id and leave.approved
            and leave.start_date <= end and leave.end_date >= start
        ]

    # Salary store

    def upsert_salary(self, result: SalaryCalculationResult) -> SalaryCalculationResult:
        stored = copy.deepcopy(result)
        with self._lock:
            self.salaries[result.key] = stored
            self.upsert_count += 1
        return copy.deepcopy(stored)

    def get_salary(self, employee_id: str, month: int, year: int) -> Optional[SalaryCalculationResult]:
        stored = self.salaries.get((employee_id, month, year))
        return copy.deepcopy(stored) if stored else None

    # Sample data

    def generate_month(self, year: int, month: int, seed: Optional[int] = None) -> int:
        """Populate realistic punches for every employee; returns the number of records"""
        rng = random.Random(seed)
        created = 0
        for employee in self.employees.values():
            schedule = employee.schedule
            working_calendar = resolve_working_days(year, month, schedule.weekly_offs)
            for day in working_calendar.working_days:
                roll = rng.random()
                if roll < 0.05:
                    continue  # no punch at all
                if roll < 0.08:
                    self.add_leave(LeaveRecord(employee.employee_id, day, day, approved=True))
                    continue
                start = _at(day, schedule.check_in_time) + timedelta(minutes=rng.choice([-10, 0, 5, 10, 25, 40]))
                length = float(schedule.daily_hours) + rng.choice([-4.5, -0.5, 0, 0, 0.25, 1.5])
                self.add_attendance(AttendanceRecord(
                    employee_id=employee.employee_id,
                    date=day,
                    check_in=start,
                    check_out=start + timedelta(hours=length),
                ))
                created += 1
        return created


def seed_demo_data(repository, year: int, month: int, seed: Optional[int] = None) -> MockHRStore:
    """Copy the sample directory plus one generated month of punches into `repository`"""
    store = MockHRStore()
    store.generate_month(year, month, seed=seed)

    for department in store.departments.values():
        repository.save_department(department)
    for employee in store.employees.values():
        repository.save_employee(employee)
    for record in store.attendance.values():
        repository.save_attendance(record)
    for leave in store.leaves:
        repository.save_leave(leave)
    return store


def _at(day: date, hhmm: str) -> datetime:
    hour, minute = (int(part) for part in hhmm.split(':'))
    return datetime(day.year, day.month, day.day, hour, minute)
