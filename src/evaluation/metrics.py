"""Scoring and strategy analysis for a finished (or in-progress) game.

Provides the efficiency score shown on the scoreboard, the end-of-game
review of where the player's money went, avalanche advice, and a
minimum-payment payoff projection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from src.engine.financial_model import Account, has_balance
from src.engine.game_state import GameState

MAX_PROJECTION_DAYS = 1000
AVALANCHE_RATIO_TARGET = 0.4


def calculate_efficiency_score(state: GameState) -> float:
    """Score the run on a 0–1000+ scale.

    Starts at 1000 and deducts:
        - 2 points per unit of interest
        - 5 points per unit of late fees
        - 0.5 points per elapsed day
    Adds 50 points for each paid-off account that sits directly above a
    still-owing account in rate order (paying the expensive debt first).
    Never below 0.
    """
    base_score = 1000.0
    interest_penalty = state.total_interest_paid * 2
    late_fee_penalty = state.total_late_fees * 5
    time_penalty = state.current_day * 0.5

    by_rate = sorted(state.accounts, key=lambda a: a.interest_rate, reverse=True)
    strategy_bonus = 0.0
    for higher, lower in zip(by_rate, by_rate[1:]):
        if not has_balance(higher.balance) and has_balance(lower.balance):
            strategy_bonus += 50

    return max(0.0, base_score - interest_penalty - late_fee_penalty - time_penalty + strategy_bonus)


def score_grade(score: float) -> str:
    """Letter grade for an efficiency score."""
    for threshold, grade in ((900, "A+"), (800, "A"), (700, "B"), (600, "C"), (500, "D")):
        if score >= threshold:
            return grade
    return "F"


@dataclass
class StrategyAnalysis:
    """End-of-game review of the payment log."""

    avalanche_ratio: float
    total_payments: float
    payments_by_account: dict[str, float] = field(default_factory=dict)
    payment_counts: dict[str, int] = field(default_factory=dict)
    mistakes: list[str] = field(default_factory=list)
    months: int = 0


def analyze_player_strategy(state: GameState, late_fee: float = 35.0) -> StrategyAnalysis:
    """Review how closely the player followed the avalanche method.

    The avalanche ratio is the share of all payments that went to the
    highest-rate account.
    """
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for entry in state.payment_log:
        totals[entry.account_id] = totals.get(entry.account_id, 0.0) + entry.amount_paid
        counts[entry.account_id] = counts.get(entry.account_id, 0) + 1
    total_payments = sum(totals.values())

    by_rate = sorted(state.accounts, key=lambda a: a.interest_rate, reverse=True)
    mistakes: list[str] = []
    avalanche_ratio = 0.0
    if by_rate:
        highest, lowest = by_rate[0], by_rate[-1]
        to_highest = totals.get(highest.id, 0.0)
        to_lowest = totals.get(lowest.id, 0.0)
        avalanche_ratio = to_highest / total_payments if total_payments > 0 else 0.0

        if avalanche_ratio < AVALANCHE_RATIO_TARGET:
            mistakes.append(
                f"Should have focused more on {highest.name} "
                f"({highest.interest_rate:g}% APR) - the highest rate card"
            )
        if to_lowest > to_highest and to_lowest > 100:
            mistakes.append(
                f"Paid more to {lowest.name} ({lowest.interest_rate:g}% APR) "
                f"than {highest.name} ({highest.interest_rate:g}% APR)"
            )

    if state.total_late_fees > 0:
        missed = round(state.total_late_fees / late_fee)
        plural = "s" if missed > 1 else ""
        mistakes.append(
            f"Missed {missed} minimum payment{plural} resulting in "
            f"${state.total_late_fees:.0f} in late fees"
        )

    return StrategyAnalysis(
        avalanche_ratio=avalanche_ratio,
        total_payments=total_payments,
        payments_by_account=totals,
        payment_counts=counts,
        mistakes=mistakes,
        months=math.ceil(state.current_day / 30),
    )


def payment_advice(accounts: list[Account] | tuple[Account, ...], available_money: float) -> str:
    """One-line avalanche hint for the current situation."""
    owing = [a for a in accounts if has_balance(a.balance)]
    if not owing:
        return "Congratulations! You've mastered the Debt Avalanche Method!"

    highest = max(owing, key=lambda a: a.interest_rate)
    total_minimums = sum(a.minimum_payment for a in owing)
    if available_money < total_minimums:
        return (
            "Use the Debt Avalanche Method: Pay minimums first, then focus on the "
            "highest interest rate cards to avoid late fees."
        )
    return (
        f"Debt Avalanche Method: Make minimum payments on all cards, then put extra "
        f"money toward the {highest.name} ({highest.interest_rate:g}% interest) "
        f"to save the most money."
    )


@dataclass
class PaymentOutcome:
    new_balance: float
    interest_saved: float
    months_to_payoff: int
    capped: bool            # True if the projection hit MAX_PROJECTION_DAYS


def simulate_payment_outcome(
    account: Account,
    payment_amount: float,
    days_until_due: int,
) -> PaymentOutcome:
    """Project the effect of a payment on one account.

    Interest saved is the daily interest the paid amount would have accrued
    until the due date. Time to payoff assumes the minimum is paid in equal
    daily slices afterwards; the projection stops at MAX_PROJECTION_DAYS and
    reports ``capped`` instead of running forever.
    """
    new_balance = max(0.0, account.balance - payment_amount)
    daily_rate = account.daily_rate
    interest_saved = payment_amount * daily_rate * days_until_due

    days = 0
    remaining = new_balance
    daily_payment = account.minimum_payment / 30
    while remaining > 0 and days < MAX_PROJECTION_DAYS:
        remaining = remaining + remaining * daily_rate - daily_payment
        days += 1

    return PaymentOutcome(
        new_balance=new_balance,
        interest_saved=interest_saved,
        months_to_payoff=math.ceil(days / 30),
        capped=remaining > 0,
    )
