"""Attendance-driven monthly salary calculation."""

__version__ = "0.2.0"
