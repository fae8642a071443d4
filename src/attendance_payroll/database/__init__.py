from .db import engine, SessionLocal, Base, init_db, make_engine, make_session_factory
from .models import (
    DepartmentDB,
    EmployeeDB,
    AttendanceRecordDB,
    LeaveRecordDB,
    SalaryRecordDB
)
from .repository import PayrollRepository

__all__ = [
    'engine',
    'SessionLocal',
    'Base',
    'init_db',
    'make_engine',
    'make_session_factory',
    'DepartmentDB',
    'EmployeeDB',
    'AttendanceRecordDB',
    'LeaveRecordDB',
    'SalaryRecordDB',
    'PayrollRepository'
]
