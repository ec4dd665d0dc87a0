"""Game calendar: absolute day counter mapped onto fixed 30-day months.

Day 1 is the first day of the game. Every month has exactly 30 days and days
are 1-indexed within a month. Paydays fall on the 1st and 15th; each account
has its own monthly due day.
"""

from __future__ import annotations

from typing import Iterable, Protocol

DAYS_IN_MONTH = 30
PAYDAYS = (1, 15)


class _HasDueDate(Protocol):
    balance: float
    due_date: int


def day_of_month(day: int) -> int:
    """1-based day within the month for an absolute day."""
    return ((day - 1) % DAYS_IN_MONTH) + 1


def month_index(day: int) -> int:
    """Zero-based month index for an absolute day."""
    return (day - 1) // DAYS_IN_MONTH


def days_until(target_day_of_month: int, from_day: int) -> int:
    """Days from ``from_day`` to the next strictly-later ``target_day_of_month``.

    Always in [1, 30]; a target equal to today's day-of-month rolls over to
    next month.
    """
    delta = target_day_of_month - day_of_month(from_day)
    if delta <= 0:
        delta += DAYS_IN_MONTH
    return delta


def next_payday(from_day: int) -> int:
    """Smallest absolute day after ``from_day`` landing on a payday."""
    return from_day + min(days_until(p, from_day) for p in PAYDAYS)


def next_due_date(accounts: Iterable[_HasDueDate], from_day: int) -> int:
    """Earliest upcoming due date among accounts that still carry a balance.

    Returns ``from_day + 30`` when nothing is owed.
    """
    candidates = [
        from_day + days_until(acct.due_date, from_day)
        for acct in accounts
        if acct.balance > 0
    ]
    if not candidates:
        return from_day + DAYS_IN_MONTH
    return min(candidates)
