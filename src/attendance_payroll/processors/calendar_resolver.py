import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Tuple

from ..errors import InvalidScheduleError, ValidationError
from ..utils.validators import WEEKDAY_NAMES, normalize_weekday


@dataclass(frozen=True)
class WorkingCalendar:
    """Working and weekly-off dates of one month for one schedule"""
    year: int
    month: int
    working_days: Tuple[date, ...]
    off_days: Tuple[date, ...]

    @property
    def total_working_days(self) -> int:
        return len(self.working_days)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])


def resolve_working_days(year: int, month: int, weekly_offs: Iterable[str]) -> WorkingCalendar:
    """Split the days of year/month into working days and weekly-off days"""
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError('month', f"must be between 1 and 12, got {month!r}")
    if not isinstance(year, int) or year < 1:
        raise ValidationError('year', f"must be a positive integer, got {year!r}")

    off_names = set()
    for name in weekly_offs:
        canonical = normalize_weekday(name)
        if not canonical:
            raise InvalidScheduleError(f"Unknown weekday in weekly offs: {name!r}")
        off_names.add(canonical)

    if len(off_names) == len(WEEKDAY_NAMES):
        raise InvalidScheduleError("Weekly offs cover every day of the week; no working days remain")

    working, off = [], []
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        current = date(year, month, day)
        if WEEKDAY_NAMES[current.weekday()] in off_names:
            off.append(current)
        else:
            working.append(current)

    return WorkingCalendar(year=year, month=month, working_days=tuple(working), off_days=tuple(off))
