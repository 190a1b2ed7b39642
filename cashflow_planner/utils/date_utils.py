"""Date manipulation utilities"""

from datetime import date
from typing import List, Tuple

from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the month's last day.

    add_months(date(2025, 1, 31), 1) -> date(2025, 2, 28)
    """
    return from_date + relativedelta(months=months)


def months_ago(from_date: date, months: int) -> date:
    """Same day-of-month `months` calendar months earlier"""
    return from_date - relativedelta(months=months)


def day_span(dates: List[date]) -> int:
    """Days between the earliest and latest date (0 for fewer than 2 dates)"""
    if len(dates) < 2:
        return 0
    return (max(dates) - min(dates)).days


def month_key(d: date) -> Tuple[int, int]:
    """(year, month) bucket for a date"""
    return d.year, d.month
