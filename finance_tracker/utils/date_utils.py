"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import Tuple


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)"""
    return (end - start).days


def trailing_window(today: date, days: int) -> Tuple[date, date]:
    """Inclusive window covering the `days` days before today plus today"""
    return today - timedelta(days=days), today


def in_window(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def add_months(from_date: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month's length"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_bounds(today: date, months_back: int) -> Tuple[date, date]:
    """First and last day of the month `months_back` months before today's month"""
    start = add_months(today.replace(day=1), -months_back)
    end = start.replace(day=calendar.monthrange(start.year, start.month)[1])
    return start, end
