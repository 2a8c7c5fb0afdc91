"""Date manipulation utilities"""

from datetime import date
from typing import List
from dateutil.relativedelta import relativedelta


def add_months(start: date, months: int) -> date:
    """Shift a date by calendar months, clamping to the last day of short months"""
    return start + relativedelta(months=months)


def monthly_due_dates(start: date, count: int) -> List[date]:
    """Due dates one, two, ... count months after start (anchored to start's day)"""
    return [add_months(start, i) for i in range(1, count + 1)]
