from typing import Optional


class PayrollError(Exception):
    """Base class for every error raised by the salary engine"""


class ValidationError(PayrollError, ValueError):
    """Malformed input, usually a Criteria field"""

    def __init__(self, field: Optional[str], reason: str):
        self.field = field
        self.reason = reason
        if field:
            super().__init__(f"{field}: {reason}")
        else:
            super().__init__(reason)


class InvalidScheduleError(PayrollError):
    """Weekly-off configuration that leaves no working day (or names an unknown day)"""


class MissingBaseSalaryError(PayrollError):
    """Employee has no usable monthly salary"""


class NotFoundError(PayrollError, LookupError):
    """Employee, department or salary record does not exist"""


class DataAccessError(PayrollError):
    """A backing store failed; never retried here"""


class StatusTransitionError(PayrollError):
    """Salary lifecycle change that is not allowed from the current status"""
