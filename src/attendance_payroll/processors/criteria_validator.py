"""
Criteria validation.

Administrators submit Criteria as loosely typed form data (camelCase keys
from the JSON API, or snake_case keys from Python callers). This module is
the only way to obtain a Criteria value: it checks every field of the
selected marking method and returns a frozen dataclass.

A threshold of 0 for the half-day, early-departure and late-early-departure
rules is a documented value meaning "rule disabled"; it is not an error and
not the same as 1.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from ..errors import ValidationError
from ..models.attendance import MarkingMethod
from ..models.criteria import CheckinCheckoutCriteria, Criteria, WeeklyHoursCriteria
from ..utils.validators import validate_percentage

logger = logging.getLogger(__name__)

_MISSING = object()

CHECKIN_FIELDS = (
    'lateThreshold', 'halfDayThreshold', 'earlyDepartureThreshold',
    'lateEarlyDepartureThreshold', 'includeExtraWorkingHours',
    'includeWeeklyOffDaysWorked', 'perfectAttendanceBonusEnabled',
    'perfectAttendanceThreshold', 'perfectAttendanceBonusAmount',
)
WEEKLY_FIELDS = ('hourlyDeductionRate',)


def validate_criteria(raw: Mapping[str, Any]) -> Criteria:
    """Validate raw criteria and return the immutable value for its marking method"""
    if isinstance(raw, (CheckinCheckoutCriteria, WeeklyHoursCriteria)):
        return raw
    if not isinstance(raw, Mapping):
        raise ValidationError('criteria', "must be an object")

    method_value = _get(raw, 'attendanceMarkingMethod')
    if method_value is _MISSING:
        raise ValidationError('attendanceMarkingMethod', "is required")
    try:
        method = MarkingMethod(method_value)
    except ValueError:
        allowed = ', '.join(m.value for m in MarkingMethod)
        raise ValidationError('attendanceMarkingMethod',
                              f"must be one of {allowed}, got {method_value!r}") from None

    other_deductions = _decimal(raw, 'otherDeductions', required=False, default=Decimal('0'))

    if method is MarkingMethod.WEEKLY_HOURS:
        _log_ignored(raw, CHECKIN_FIELDS, method)
        return WeeklyHoursCriteria(
            hourly_deduction_rate=_decimal(raw, 'hourlyDeductionRate'),
            other_deductions=other_deductions,
        )

    _log_ignored(raw, WEEKLY_FIELDS, method)

    bonus_enabled = _boolean(raw, 'perfectAttendanceBonusEnabled')
    threshold = _decimal(raw, 'perfectAttendanceThreshold', required=bonus_enabled,
                         default=Decimal('100'))
    if not validate_percentage(threshold, Decimal('50'), Decimal('100')):
        raise ValidationError('perfectAttendanceThreshold', f"must be between 50 and 100, got {threshold}")

    return CheckinCheckoutCriteria(
        late_threshold=_integer(raw, 'lateThreshold', minimum=1),
        half_day_threshold=_integer(raw, 'halfDayThreshold'),
        early_departure_threshold=_integer(raw, 'earlyDepartureThreshold'),
        late_early_departure_threshold=_integer(raw, 'lateEarlyDepartureThreshold'),
        include_extra_working_hours=_boolean(raw, 'includeExtraWorkingHours'),
        include_weekly_off_days_worked=_boolean(raw, 'includeWeeklyOffDaysWorked'),
        perfect_attendance_bonus_enabled=bonus_enabled,
        perfect_attendance_threshold=threshold,
        perfect_attendance_bonus_amount=_decimal(raw, 'perfectAttendanceBonusAmount',
                                                 required=bonus_enabled, default=Decimal('0')),
        other_deductions=other_deductions,
    )


def _snake_case(name: str) -> str:
    return ''.join('_' + c.lower() if c.isupper() else c for c in name)


def _get(raw: Mapping[str, Any], field: str):
    if field in raw:
        return raw[field]
    return raw.get(_snake_case(field), _MISSING)


def _integer(raw, field: str, minimum: int = 0) -> int:
    value = _get(raw, field)
    if value is _MISSING or value is None:
        raise ValidationError(field, "is required")
    if isinstance(value, bool):
        raise ValidationError(field, "must be an integer, not a boolean")
    if isinstance(value, str):
        value = value.strip()
        if not value.lstrip('-').isdigit():
            raise ValidationError(field, f"must be an integer, got {value!r}")
        value = int(value)
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(field, f"must be a whole number, got {value}")
        value = int(value)
    elif not isinstance(value, int):
        raise ValidationError(field, f"must be an integer, got {type(value).__name__}")
    if value < minimum:
        raise ValidationError(field, f"must be >= {minimum}, got {value}")
    return value


def _decimal(raw, field: str, required: bool = True, default: Optional[Decimal] = None) -> Decimal:
    value = _get(raw, field)
    if value is _MISSING or value is None or value == '':
        if required:
            raise ValidationError(field, "is required")
        return default
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number, not a boolean")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(field, f"must be a number, got {value!r}") from None
    if not number.is_finite():
        raise ValidationError(field, "must be a finite number")
    if number < 0:
        raise ValidationError(field, f"must be >= 0, got {number}")
    return number


def _boolean(raw, field: str) -> bool:
    value = _get(raw, field)
    if value is _MISSING or value is None:
        return False
    if not isinstance(value, bool):
        raise ValidationError(field, f"must be true or false, got {value!r}")
    return value


def _log_ignored(raw, fields, method: MarkingMethod):
    ignored = [f for f in fields if _get(raw, f) is not _MISSING]
    if ignored:
        logger.debug(f"Ignoring criteria fields not used by {method.value}: {', '.join(ignored)}")
