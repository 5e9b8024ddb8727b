# flow/recurrence.py
"""Due date arithmetic for recurring tasks."""
import calendar
from datetime import date, timedelta
from typing import Optional


def add_months(start: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_due_date(current: date, recurrence_type: str, interval: int = 1) -> Optional[date]:
    interval = interval or 1
    if recurrence_type == "daily":
        return current + timedelta(days=interval)
    if recurrence_type == "weekly":
        return current + timedelta(weeks=interval)
    if recurrence_type == "monthly":
        return add_months(current, interval)
    if recurrence_type == "yearly":
        return add_months(current, 12 * interval)
    return None
