from sqlalchemy import (
    Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from .db import Base, utcnow


class DepartmentDB(Base):
    """Department database model"""
    __tablename__ = "departments"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)

    employees = relationship("EmployeeDB", back_populates="department")

    def __repr__(self):
        return f"<Department(id={self.id}, name={self.name})>"


class EmployeeDB(Base):
    """Employee database model"""
    __tablename__ = "employees"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    department_id = Column(String, ForeignKey('departments.id'), index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Salary
    monthly_salary = Column(Numeric(12, 2))
    leave_threshold = Column(Integer, default=0, nullable=False)

    # Work schedule
    check_in_time = Column(String(5), default="09:00", nullable=False)
    check_out_time = Column(String(5), default="17:00", nullable=False)
    daily_hours = Column(Numeric(5, 2), default=8, nullable=False)
    weekly_offs = Column(String(100), default="Saturday,Sunday", nullable=False)  # comma separated
    check_in_grace_minutes = Column(Integer, default=15, nullable=False)
    check_out_grace_minutes = Column(Integer, default=10, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    department = relationship("DepartmentDB", back_populates="employees")

    def __repr__(self):
        return f"<Employee(id={self.id}, name={self.name})>"


class AttendanceRecordDB(Base):
    """One attendance row per employee per date"""
    __tablename__ = "attendance_records"
    __table_args__ = (UniqueConstraint('employee_id', 'date', name='uq_attendance_employee_date'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(String, ForeignKey('employees.id'), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    check_in = Column(DateTime)
    check_out = Column(DateTime)
    status = Column(String(30))  # NULL until derived
    working_hours = Column(Numeric(6, 2), default=0, nullable=False)

    def __repr__(self):
        return f"<Attendance(employee={self.employee_id}, date={self.date}, status={self.status})>"


class LeaveRecordDB(Base):
    """Leave request"""
    __tablename__ = "leave_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(String, ForeignKey('employees.id'), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    approved = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Leave(employee={self.employee_id}, {self.start_date}..{self.end_date})>"


class SalaryRecordDB(Base):
    """Persisted monthly salary calculation, one per employee per month"""
    __tablename__ = "salary_records"
    __table_args__ = (UniqueConstraint('employee_id', 'month', 'year', name='uq_salary_employee_period'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(String, ForeignKey('employees.id'), nullable=False, index=True)

    # Period information
    year = Column(Integer, nullable=False, index=True)
    month = Column(Integer, nullable=False, index=True)

    # Financial totals
    base_salary = Column(Numeric(12, 2), nullable=False)
    per_day_salary = Column(Numeric(12, 2), nullable=False)
    total_deductions = Column(Numeric(12, 2), nullable=False)
    total_additions = Column(Numeric(12, 2), nullable=False)
    net_salary = Column(Numeric(12, 2), nullable=False)

    # Lifecycle
    status = Column(String(20), default='calculated', nullable=False)  # 'pending', 'calculated', 'approved', 'paid'
    remarks = Column(Text, default='')
    approved_at = Column(DateTime)
    paid_on = Column(DateTime)

    # Full calculation breakdown stored as JSON
    data_json = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<SalaryRecord(employee={self.employee_id}, period={self.year}-{self.month:02d}, status={self.status})>"
