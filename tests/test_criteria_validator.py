import pytest
from decimal import Decimal

from attendance_payroll.errors import ValidationError
from attendance_payroll.models import CheckinCheckoutCriteria, MarkingMethod, WeeklyHoursCriteria
from attendance_payroll.processors.criteria_validator import validate_criteria

CHECKIN = {
    'attendanceMarkingMethod': 'checkinCheckout',
    'lateThreshold': 3,
    'halfDayThreshold': 2,
    'earlyDepartureThreshold': 0,
    'lateEarlyDepartureThreshold': 0,
}


def test_checkin_criteria_defaults():
    criteria = validate_criteria(CHECKIN)
    assert isinstance(criteria, CheckinCheckoutCriteria)
    assert criteria.method is MarkingMethod.CHECKIN_CHECKOUT
    assert criteria.late_threshold == 3
    assert criteria.half_day_threshold == 2
    assert criteria.include_extra_working_hours is False
    assert criteria.perfect_attendance_bonus_enabled is False
    assert criteria.perfect_attendance_threshold == Decimal('100')
    assert criteria.other_deductions == Decimal('0')


def test_weekly_hours_criteria():
    criteria = validate_criteria({'attendanceMarkingMethod': 'weeklyHours',
                                  'hourlyDeductionRate': 50, 'otherDeductions': '250.50'})
    assert isinstance(criteria, WeeklyHoursCriteria)
    assert criteria.hourly_deduction_rate == Decimal('50')
    assert criteria.other_deductions == Decimal('250.50')


def test_snake_case_keys_are_accepted():
    criteria = validate_criteria({
        'attendance_marking_method': 'checkinCheckout',
        'late_threshold': 4,
        'half_day_threshold': 0,
        'early_departure_threshold': 0,
        'late_early_departure_threshold': 0,
    })
    assert criteria.late_threshold == 4


def test_validated_criteria_pass_through():
    criteria = validate_criteria(CHECKIN)
    assert validate_criteria(criteria) is criteria


def test_fields_of_other_method_are_ignored():
    criteria = validate_criteria({'attendanceMarkingMethod': 'weeklyHours',
                                  'hourlyDeductionRate': 10, 'lateThreshold': 'nonsense'})
    assert isinstance(criteria, WeeklyHoursCriteria)


@pytest.mark.parametrize("raw, field", [
    ({}, 'attendanceMarkingMethod'),
    ({'attendanceMarkingMethod': 'biometric'}, 'attendanceMarkingMethod'),
    ({'attendanceMarkingMethod': 'weeklyHours'}, 'hourlyDeductionRate'),
    ({'attendanceMarkingMethod': 'weeklyHours', 'hourlyDeductionRate': -1}, 'hourlyDeductionRate'),
    ({'attendanceMarkingMethod': 'weeklyHours', 'hourlyDeductionRate': 'abc'}, 'hourlyDeductionRate'),
    ({**CHECKIN, 'lateThreshold': 0}, 'lateThreshold'),
    ({**CHECKIN, 'halfDayThreshold': -1}, 'halfDayThreshold'),
    ({**CHECKIN, 'earlyDepartureThreshold': 1.5}, 'earlyDepartureThreshold'),
    ({**CHECKIN, 'lateThreshold': True}, 'lateThreshold'),
    ({k: v for k, v in CHECKIN.items() if k != 'lateEarlyDepartureThreshold'}, 'lateEarlyDepartureThreshold'),
    ({**CHECKIN, 'includeExtraWorkingHours': 'yes'}, 'includeExtraWorkingHours'),
    ({**CHECKIN, 'otherDeductions': -5}, 'otherDeductions'),
])
def test_invalid_criteria(raw, field):
    with pytest.raises(ValidationError) as excinfo:
        validate_criteria(raw)
    assert excinfo.value.field == field


def test_criteria_must_be_a_mapping():
    with pytest.raises(ValidationError) as excinfo:
        validate_criteria(["checkinCheckout"])
    assert excinfo.value.field == 'criteria'


def test_bonus_requires_threshold_and_amount():
    with pytest.raises(ValidationError) as excinfo:
        validate_criteria({**CHECKIN, 'perfectAttendanceBonusEnabled': True,
                           'perfectAttendanceBonusAmount': 1000})
    assert excinfo.value.field == 'perfectAttendanceThreshold'

    with pytest.raises(ValidationError) as excinfo:
        validate_criteria({**CHECKIN, 'perfectAttendanceBonusEnabled': True,
                           'perfectAttendanceThreshold': 95})
    assert excinfo.value.field == 'perfectAttendanceBonusAmount'


@pytest.mark.parametrize("threshold", [49, "100.5"])
def test_bonus_threshold_range(threshold):
    with pytest.raises(ValidationError) as excinfo:
        validate_criteria({**CHECKIN, 'perfectAttendanceBonusEnabled': True,
                           'perfectAttendanceThreshold': threshold,
                           'perfectAttendanceBonusAmount': 1000})
    assert excinfo.value.field == 'perfectAttendanceThreshold'


def test_bonus_configuration():
    criteria = validate_criteria({**CHECKIN, 'perfectAttendanceBonusEnabled': True,
                                  'perfectAttendanceThreshold': 95,
                                  'perfectAttendanceBonusAmount': "2500"})
    assert criteria.perfect_attendance_threshold == Decimal('95')
    assert criteria.perfect_attendance_bonus_amount == Decimal('2500')
