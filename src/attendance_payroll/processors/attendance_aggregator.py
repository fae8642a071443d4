"""
Attendance aggregation.

Turns one month of attendance records into an AttendanceSummary. In
checkinCheckout mode every working day is classified into exactly one
bucket: the record's own status, or, for a day with no record, ``leave``
when an approved leave covers it and ``missing`` otherwise. In weeklyHours
mode only actual against expected hours is produced.

Store failures are not handled here; they propagate to the caller.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Tuple

from ..models.attendance import (
    AttendanceCounts,
    AttendanceRecord,
    AttendanceSummary,
    DayStatus,
    HoursSummary,
    MarkingMethod,
)
from ..models.employee import Employee, WorkSchedule
from .calendar_resolver import WorkingCalendar

logger = logging.getLogger(__name__)

_STATUS_FIELDS = {
    DayStatus.PRESENT: 'present',
    DayStatus.ABSENT: 'absent',
    DayStatus.LATE: 'late',
    DayStatus.HALF_DAY: 'half_day',
    DayStatus.EARLY_DEPARTURE: 'early_departure',
    DayStatus.LATE_EARLY_DEPARTURE: 'late_early_departure',
}


def _scheduled(moment: datetime, hhmm: str) -> datetime:
    hour, minute = (int(part) for part in hhmm.split(':'))
    return moment.replace(hour=hour, minute=minute, second=0, microsecond=0)


def derive_day_status(record: AttendanceRecord, schedule: WorkSchedule) -> Tuple[DayStatus, Decimal]:
    """Classify raw check-in/check-out punches into a day status and worked hours"""
    if record.check_in is None:
        return DayStatus.ABSENT, Decimal('0')

    late_limit = _scheduled(record.check_in, schedule.check_in_time) \
        + timedelta(minutes=schedule.check_in_grace_minutes)
    arrived_late = record.check_in > late_limit

    if record.check_out is None:
        # Unpaired punch: no hours can be measured
        return (DayStatus.LATE if arrived_late else DayStatus.PRESENT), Decimal('0')

    seconds = Decimal(str((record.check_out - record.check_in).total_seconds()))
    hours = max(Decimal('0'), seconds / Decimal('3600'))

    early_limit = _scheduled(record.check_out, schedule.check_out_time) \
        - timedelta(minutes=schedule.check_out_grace_minutes)
    left_early = record.check_out < early_limit

    grace_hours = Decimal(schedule.check_in_grace_minutes + schedule.check_out_grace_minutes) / Decimal('60')
    minimum_hours = schedule.daily_hours - grace_hours
    half_day_hours = schedule.daily_hours / Decimal('2')

    if hours >= minimum_hours:
        if arrived_late and left_early:
            return DayStatus.LATE_EARLY_DEPARTURE, hours
        if left_early:
            return DayStatus.EARLY_DEPARTURE, hours
        if arrived_late:
            return DayStatus.LATE, hours
        return DayStatus.PRESENT, hours
    if hours >= half_day_hours:
        return DayStatus.HALF_DAY, hours
    if hours > 0:
        return DayStatus.LATE, hours
    return DayStatus.ABSENT, hours


class AttendanceAggregator:
    """Aggregate a month of attendance for one employee"""

    def __init__(self, attendance_store, leave_store):
        self.attendance_store = attendance_store
        self.leave_store = leave_store

    def aggregate(self, employee: Employee, working_calendar: WorkingCalendar,
                  method: MarkingMethod) -> AttendanceSummary:
        records = self.attendance_store.get_attendance(
            employee.employee_id, working_calendar.first_day, working_calendar.last_day
        )
        by_date = self._index_records(employee, records)

        if method is MarkingMethod.WEEKLY_HOURS:
            return self._aggregate_hours(employee, working_calendar, by_date)
        return self._aggregate_days(employee, working_calendar, by_date)

    def _index_records(self, employee: Employee,
                       records: List[AttendanceRecord]) -> Dict:
        by_date = {}
        for record in records:
            if record.status is None:
                status, hours = derive_day_status(record, employee.schedule)
            else:
                status, hours = record.status, Decimal(str(record.working_hours or 0))
            if record.date in by_date:
                logger.warning(f"Duplicate attendance for {employee.employee_id} on {record.date}; "
                               f"keeping the first record")
                continue
            by_date[record.date] = (status, hours)
        return by_date

    def _aggregate_hours(self, employee: Employee, working_calendar: WorkingCalendar,
                         by_date: Dict) -> AttendanceSummary:
        actual = sum((hours for _, hours in by_date.values()), Decimal('0'))
        expected = employee.schedule.daily_hours * working_calendar.total_working_days
        return AttendanceSummary(
            method=MarkingMethod.WEEKLY_HOURS,
            total_working_days=working_calendar.total_working_days,
            hours=HoursSummary(actual_hours=actual, expected_hours=expected),
        )

    def _aggregate_days(self, employee: Employee, working_calendar: WorkingCalendar,
                        by_date: Dict) -> AttendanceSummary:
        counts = AttendanceCounts()
        total_hours = Decimal('0')
        extra_hours = Decimal('0')
        daily_hours = employee.schedule.daily_hours

        leaves = self.leave_store.get_approved_leaves(
            employee.employee_id, working_calendar.first_day, working_calendar.last_day
        )

        for day in working_calendar.working_days:
            entry = by_date.get(day)
            if entry is None:
                if any(leave.covers(day) for leave in leaves):
                    counts.leave += 1
                else:
                    counts.missing += 1
                continue
            status, hours = entry
            field = _STATUS_FIELDS[status]
            setattr(counts, field, getattr(counts, field) + 1)
            total_hours += hours
            extra_hours += max(Decimal('0'), hours - daily_hours)

        for day in working_calendar.off_days:
            entry = by_date.get(day)
            if entry is not None and entry[0] != DayStatus.ABSENT:
                counts.weekly_off_worked += 1
                total_hours += entry[1]

        logger.debug(f"Aggregated {employee.employee_id} {working_calendar.year}-{working_calendar.month:02d}: {counts}")
        return AttendanceSummary(
            method=MarkingMethod.CHECKIN_CHECKOUT,
            total_working_days=working_calendar.total_working_days,
            counts=counts,
            hours=HoursSummary(
                actual_hours=total_hours,
                expected_hours=daily_hours * working_calendar.total_working_days,
            ),
            extra_hours=extra_hours,
        )
