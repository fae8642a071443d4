from dataclasses import dataclass, field
from decimal import Decimal
from typing import FrozenSet, Optional

from ..config.settings import DEFAULT_CHECK_IN_GRACE_MINUTES, DEFAULT_CHECK_OUT_GRACE_MINUTES


@dataclass(frozen=True)
class WorkSchedule:
    """Expected working pattern of an employee"""
    check_in_time: str = "09:00"
    check_out_time: str = "17:00"
    daily_hours: Decimal = Decimal('8')
    weekly_offs: FrozenSet[str] = frozenset({"Saturday", "Sunday"})
    check_in_grace_minutes: int = DEFAULT_CHECK_IN_GRACE_MINUTES
    check_out_grace_minutes: int = DEFAULT_CHECK_OUT_GRACE_MINUTES


@dataclass(frozen=True)
class Department:
    """Department reference data"""
    department_id: str
    name: str


@dataclass(frozen=True)
class Employee:
    """Employee data model, read-only to the salary engine"""
    employee_id: str
    name: str
    base_salary: Optional[Decimal]
    schedule: WorkSchedule = field(default_factory=WorkSchedule)
    leave_threshold: int = 0
    department_id: Optional[str] = None
    is_active: bool = True

    def __str__(self):
        return f"Employee({self.employee_id}, {self.name})"
