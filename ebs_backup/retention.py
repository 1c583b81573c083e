"""
Snapshot retention policy.

Generational scheme: keep the snapshot taken on the 1st of every month
(which covers January 1st) and every snapshot from the current calendar month.
Everything else is deleted. Each snapshot is judged on its own date, so the
decision needs no history and is stable within a month.
"""

from __future__ import annotations

from datetime import date, datetime


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def should_keep(created: date | datetime, now: date | datetime) -> bool:
    """
    Decide whether a snapshot survives a purge pass.

    Args:
        created: Snapshot creation date or timestamp
        now: Current date or timestamp

    Returns:
        True to keep, False to delete
    """
    created_day = _as_date(created)
    today = _as_date(now)

    # 1st day of the year
    if created_day.month == 1 and created_day.day == 1:
        return True

    # 1st day of any month
    if created_day.day == 1:
        return True

    # Anything from the current month of the current year
    if (created_day.year, created_day.month) == (today.year, today.month):
        return True

    return False
