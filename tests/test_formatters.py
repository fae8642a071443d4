from decimal import Decimal

from attendance_payroll.utils.formatters import format_currency, format_percentage, format_period
from attendance_payroll.utils.validators import normalize_weekday, validate_time_of_day


def test_format_currency():
    assert format_currency(Decimal('45654')) == "PKR 45,654.00"
    assert format_currency(Decimal('-979'), symbol="Rs") == "Rs -979.00"


def test_format_period_and_percentage():
    assert format_period(2025, 8) == "August 2025"
    assert format_percentage(Decimal('99.99')) == "99.99%"


def test_time_of_day():
    assert validate_time_of_day("09:00")
    assert validate_time_of_day("23:59")
    assert not validate_time_of_day("24:00")
    assert not validate_time_of_day("9:00")
    assert not validate_time_of_day(None)


def test_normalize_weekday():
    assert normalize_weekday(" sunday ") == "Sunday"
    assert normalize_weekday("Sun") == ""
    assert normalize_weekday(6) == ""
