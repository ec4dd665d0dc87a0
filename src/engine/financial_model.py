"""Financial model for the debt avalanche game.

Implements the core per-account math:
- Daily interest accrual on revolving balances (rounded every step)
- Late fee eligibility and posting
- Payment application with the monthly minimum tracker
- Utilization computation

Accounts are frozen; every function returns a new Account instead of
mutating its argument.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from src.engine.clock import month_index

EPSILON = 0.01          # Tolerance for UI-derived currency amounts
LATE_FEE = 35.0         # Flat fee per missed minimum, per account per month
DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class Account:
    """One revolving credit line."""

    id: str
    name: str
    balance: float                  # Outstanding balance, never negative
    limit: float                    # Credit ceiling (display only)
    interest_rate: float            # Annual percentage (19.0 means 19%)
    minimum_payment: float          # Fixed amount due each billing month
    due_date: int                   # Day of month in [1, 30]
    color: str = "#333333"
    last_payment_date: int | None = None
    last_minimum_payment_month: int | None = None
    total_payments_this_month: float = 0.0
    current_month: int | None = None
    last_late_fee_month: int | None = None

    @property
    def daily_rate(self) -> float:
        """APR ÷ 100 ÷ 365."""
        return self.interest_rate / 100.0 / DAYS_PER_YEAR

    @property
    def utilization(self) -> float:
        """Current balance / credit limit. 0 if limit is 0."""
        if self.limit <= 0:
            return 0.0
        return self.balance / self.limit


def round_currency(amount: float) -> float:
    """Round to the nearest whole currency unit, halves away from zero for positives."""
    return float(math.floor(amount + 0.5))


def has_balance(balance: float) -> bool:
    """True if ``balance`` still rounds to something owed."""
    return round_currency(balance) > 0


def clamp_balance(balance: float) -> float:
    """Floor at zero and snap residue that rounds to nothing to exactly zero."""
    if not has_balance(balance):
        return 0.0
    return balance


def elapsed_days(account: Account, day: int) -> int:
    """Days of unposted interest on ``account`` as of ``day``.

    With no prior balance event the anchor is day 1.
    """
    if account.last_payment_date is None:
        return max(0, day - 1)
    return max(0, day - account.last_payment_date)


def compute_interest(account: Account, days: int) -> float:
    """Interest accrued over ``days`` on the current balance.

    Formula: I = round(B × APR/100/365 × days)

    Simple within the window; compounds across calls because the rounded
    interest is folded into the balance before the next accrual.
    """
    if days <= 0 or account.balance <= 0:
        return 0.0
    return round_currency(account.balance * account.daily_rate * days)


def current_balance(account: Account, as_of_day: int) -> float:
    """Display balance including interest accrued but not yet posted."""
    interest = compute_interest(account, elapsed_days(account, as_of_day))
    return round_currency(account.balance + interest)


def accrue_interest(account: Account, to_day: int) -> tuple[Account, float]:
    """Post interest from the account's anchor up to ``to_day``.

    Returns:
        (updated account anchored at ``to_day``, interest posted)
    """
    interest = compute_interest(account, elapsed_days(account, to_day))
    updated = replace(
        account,
        balance=round_currency(account.balance + interest),
        last_payment_date=to_day,
    )
    return updated, interest


def late_fee_due(account: Account, month: int) -> bool:
    """Whether a due-day crossing in ``month`` triggers a late fee.

    Requires an outstanding balance, no minimum met this month, and no fee
    already posted this month.
    """
    if not has_balance(account.balance):
        return False
    if account.last_minimum_payment_month is not None and account.last_minimum_payment_month >= month:
        return False
    if account.last_late_fee_month is not None and account.last_late_fee_month >= month:
        return False
    return True


def apply_late_fee(account: Account, month: int) -> tuple[Account, float]:
    """Levy the late fee for ``month`` if due.

    A fee is not a payment: the minimum tracker is left alone.

    Returns:
        (updated account, fee charged or 0)
    """
    if not late_fee_due(account, month):
        return account, 0.0
    updated = replace(
        account,
        balance=round_currency(account.balance + LATE_FEE),
        last_late_fee_month=month,
    )
    return updated, LATE_FEE


def roll_month(account: Account, month: int) -> Account:
    """Reset the monthly payment accumulator when ``month`` is new."""
    if account.current_month == month:
        return account
    return replace(account, total_payments_this_month=0.0, current_month=month)


def apply_payment(account: Account, amount: float, day: int) -> tuple[Account, float]:
    """Post pending interest, then subtract ``amount`` from the balance.

    Updates the payment anchor and the monthly accumulator; the month counts
    as paid once cumulative payments reach the minimum.

    Returns:
        (updated account, interest posted before the payment)
    """
    accrued, interest = accrue_interest(account, day)
    month = month_index(day)
    accrued = roll_month(accrued, month)

    paid_this_month = accrued.total_payments_this_month + amount
    last_min_month = accrued.last_minimum_payment_month
    if paid_this_month >= account.minimum_payment - 1e-9:
        last_min_month = month

    updated = replace(
        accrued,
        balance=clamp_balance(accrued.balance - amount),
        total_payments_this_month=paid_this_month,
        last_minimum_payment_month=last_min_month,
    )
    return updated, interest


def compute_overall_utilization(accounts: list[Account] | tuple[Account, ...]) -> float:
    """Overall utilization = sum(balances) / sum(limits).

    Returns 0 if the total limit is 0.
    """
    total_balance = sum(a.balance for a in accounts)
    total_limit = sum(a.limit for a in accounts)
    if total_limit <= 0:
        return 0.0
    return total_balance / total_limit


def compute_weighted_avg_rate(accounts: list[Account] | tuple[Account, ...]) -> float:
    """Balance-weighted average interest rate (percent).

    Returns 0 if nothing is owed.
    """
    total_balance = sum(a.balance for a in accounts)
    if total_balance <= 0:
        return 0.0
    return sum(a.interest_rate * a.balance for a in accounts) / total_balance
