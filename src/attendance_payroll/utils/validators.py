import re
from decimal import Decimal

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def validate_time_of_day(value: str) -> bool:
    """Validate an "HH:MM" 24h clock string"""
    match = re.match(r'^(\d{2}):(\d{2})$', value or '')
    if not match:
        return False
    return int(match.group(1)) < 24 and int(match.group(2)) < 60


def normalize_weekday(name: str) -> str:
    """Return the canonical weekday name, or '' if it is not one"""
    if not isinstance(name, str):
        return ''
    candidate = name.strip().capitalize()
    return candidate if candidate in WEEKDAY_NAMES else ''


def validate_percentage(rate: Decimal, low: Decimal = Decimal('0'), high: Decimal = Decimal('100')) -> bool:
    """Validate a percentage is within bounds"""
    return low <= rate <= high
