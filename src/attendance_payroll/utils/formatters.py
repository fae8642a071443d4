from decimal import Decimal
import calendar


def format_currency(amount: Decimal, symbol: str = "PKR") -> str:
    """Format currency amount"""
    return f"{symbol} {amount:,.2f}"


def format_period(year: int, month: int) -> str:
    """e.g. 'August 2025'"""
    return f"{calendar.month_name[month]} {year}"


def format_percentage(rate: Decimal) -> str:
    """Format percentage"""
    return f"{rate:.2f}%"
