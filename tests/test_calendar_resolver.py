import pytest
from datetime import date

from attendance_payroll.errors import InvalidScheduleError, ValidationError
from attendance_payroll.processors.calendar_resolver import resolve_working_days


def test_weekend_offs_october_2025():
    calendar = resolve_working_days(2025, 10, {"Saturday", "Sunday"})
    assert calendar.total_working_days == 23
    assert len(calendar.off_days) == 8
    assert calendar.first_day == date(2025, 10, 1)
    assert calendar.last_day == date(2025, 10, 31)
    assert date(2025, 10, 4) in calendar.off_days
    assert date(2025, 10, 6) in calendar.working_days


def test_sunday_only_february():
    calendar = resolve_working_days(2025, 2, ["Sunday"])
    assert calendar.total_working_days == 24


def test_leap_year_february_has_29_days():
    calendar = resolve_working_days(2024, 2, [])
    assert calendar.total_working_days == 29


def test_weekday_names_are_case_insensitive():
    calendar = resolve_working_days(2025, 10, ["saturday", "SUNDAY"])
    assert calendar.total_working_days == 23


def test_every_day_off_is_invalid_schedule():
    all_days = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    with pytest.raises(InvalidScheduleError):
        resolve_working_days(2025, 10, all_days)


def test_unknown_weekday_is_invalid_schedule():
    with pytest.raises(InvalidScheduleError):
        resolve_working_days(2025, 10, ["Caturday"])


@pytest.mark.parametrize("month", [0, 13])
def test_month_out_of_range(month):
    with pytest.raises(ValidationError) as excinfo:
        resolve_working_days(2025, month, ["Sunday"])
    assert excinfo.value.field == 'month'
