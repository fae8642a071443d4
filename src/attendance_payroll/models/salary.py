from dataclasses import dataclass, field, asdict
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from .attendance import AttendanceCounts, HoursSummary, MarkingMethod


class SalaryStatus(str, Enum):
    PENDING = "pending"
    CALCULATED = "calculated"
    APPROVED = "approved"
    PAID = "paid"


@dataclass
class DeductionBreakdown:
    """Salary deductions"""
    absent_deduction: Decimal = Decimal('0')
    absent_day_equivalents: int = 0
    late_as_absent: int = 0
    half_day_as_absent: int = 0
    early_departure_as_absent: int = 0
    late_early_departure_as_absent: int = 0
    excess_leaves: int = 0
    hours_deduction: Decimal = Decimal('0')
    other_deductions: Decimal = Decimal('0')
    total_deductions: Decimal = Decimal('0')


@dataclass
class AdditionBreakdown:
    """Salary additions"""
    extra_hours_pay: Decimal = Decimal('0')
    off_day_work_pay: Decimal = Decimal('0')
    perfect_attendance_bonus: Decimal = Decimal('0')
    other_additions: Decimal = Decimal('0')
    attendance_percentage: Decimal = Decimal('0')
    total_additions: Decimal = Decimal('0')


@dataclass
class SalaryCalculationResult:
    """Complete monthly salary calculation for one employee"""
    employee_id: str
    employee_name: str
    month: int
    year: int
    marking_method: MarkingMethod
    base_salary: Decimal
    total_working_days: int
    per_day_salary: Decimal
    deductions: DeductionBreakdown
    net_salary: Decimal
    attendance: Optional[AttendanceCounts] = None
    hours: Optional[HoursSummary] = None
    additions: Optional[AdditionBreakdown] = None
    status: SalaryStatus = SalaryStatus.PENDING
    remarks: str = ""

    @property
    def key(self):
        return (self.employee_id, self.month, self.year)

    @property
    def total_additions(self) -> Decimal:
        return self.additions.total_additions if self.additions else Decimal('0')

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation with camelCase keys"""
        data = {
            'employeeId': self.employee_id,
            'employeeName': self.employee_name,
            'month': self.month,
            'year': self.year,
            'markingMethod': self.marking_method.value,
            'baseSalary': str(self.base_salary),
            'totalWorkingDays': self.total_working_days,
            'perDaySalary': str(self.per_day_salary),
            'attendance': _camel(asdict(self.attendance)) if self.attendance else None,
            'hours': None,
            'deductions': _camel(asdict(self.deductions)),
            'additions': _camel(asdict(self.additions)) if self.additions else None,
            'netSalary': str(self.net_salary),
            'status': self.status.value,
            'remarks': self.remarks,
        }
        if self.hours is not None:
            data['hours'] = {
                'actualHours': str(self.hours.actual_hours),
                'expectedHours': str(self.hours.expected_hours),
                'shortfallHours': str(self.hours.shortfall_hours),
            }
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SalaryCalculationResult':
        attendance = data.get('attendance')
        hours = data.get('hours')
        additions = data.get('additions')
        return cls(
            employee_id=data['employeeId'],
            employee_name=data.get('employeeName', ''),
            month=int(data['month']),
            year=int(data['year']),
            marking_method=MarkingMethod(data['markingMethod']),
            base_salary=Decimal(data['baseSalary']),
            total_working_days=int(data['totalWorkingDays']),
            per_day_salary=Decimal(data['perDaySalary']),
            attendance=AttendanceCounts(**_snake(attendance)) if attendance else None,
            hours=HoursSummary(
                actual_hours=Decimal(hours['actualHours']),
                expected_hours=Decimal(hours['expectedHours']),
            ) if hours else None,
            deductions=_decimal_fields(DeductionBreakdown, _snake(data['deductions'])),
            additions=_decimal_fields(AdditionBreakdown, _snake(additions)) if additions else None,
            net_salary=Decimal(data['netSalary']),
            status=SalaryStatus(data.get('status', SalaryStatus.PENDING.value)),
            remarks=data.get('remarks', ''),
        )


def _to_camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def _to_snake(name: str) -> str:
    return ''.join('_' + c.lower() if c.isupper() else c for c in name)


def _camel(values: Dict[str, Any]) -> Dict[str, Any]:
    return {
        _to_camel(k): str(v) if isinstance(v, Decimal) else v
        for k, v in values.items()
    }


def _snake(values: Dict[str, Any]) -> Dict[str, Any]:
    return {_to_snake(k): v for k, v in values.items()}


def _decimal_fields(cls, values: Dict[str, Any]):
    defaults = cls()
    converted = {}
    for key, value in values.items():
        if isinstance(getattr(defaults, key), Decimal):
            converted[key] = Decimal(str(value))
        else:
            converted[key] = value
    return cls(**converted)
