"""Optimal avalanche comparator.

Replays the game with a perfect avalanche payer against the same accounts,
starting cash and paycheck schedule the player had, so the player's totals
can be measured against the best achievable ones.

Each pay period the optimal payer covers every minimum, then sends all
remaining cash to the highest-rate account, cascading to the next-highest
once an account is cleared. It then advances to the next payday and
collects the next paycheck from the schedule. After the last paycheck it
follows due dates up to the player's current day.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from src.engine import game_engine
from src.engine.clock import next_due_date
from src.engine.financial_model import EPSILON, Account, current_balance, has_balance
from src.engine.game_state import GameState
from src.utils.config import GameConfig, default_game_config

MAX_COMPARATOR_PAYDAYS = 240


def avalanche_allocation(
    accounts: Sequence[Account],
    available_money: float,
    day: int,
) -> list[tuple[str, float]]:
    """Split ``available_money`` the avalanche way.

    Minimums first (highest rate first when cash is short), then every
    remaining unit to the highest-rate account still owing.

    Returns:
        (account_id, amount) pairs, one per account that gets paid, ordered
        by descending rate.
    """
    owing = sorted(
        (a for a in accounts if has_balance(a.balance)),
        key=lambda a: a.interest_rate,
        reverse=True,
    )
    remaining = available_money
    planned: dict[str, float] = {}
    owed = {a.id: current_balance(a, day) for a in owing}

    for acct in owing:
        amount = min(acct.minimum_payment, owed[acct.id], remaining)
        if amount > 0:
            planned[acct.id] = amount
            remaining -= amount

    for acct in owing:
        if remaining <= EPSILON:
            break
        extra = min(remaining, owed[acct.id] - planned.get(acct.id, 0.0))
        if extra > 0:
            planned[acct.id] = planned.get(acct.id, 0.0) + extra
            remaining -= extra

    return [(a.id, planned[a.id]) for a in owing if planned.get(a.id, 0.0) > EPSILON]


def pay_avalanche(state: GameState) -> GameState:
    """Apply one round of avalanche payments with all available cash."""
    plan = avalanche_allocation(state.accounts, state.total_money, state.current_day)
    for account_id, amount in plan:
        state = game_engine.pay(state, account_id, min(amount, state.total_money))
    return state


@dataclass
class OptimalResult:
    final_state: GameState
    total_interest: float
    total_late_fees: float
    days: int
    completed: bool


def simulate_optimal_strategy(
    config: GameConfig | None = None,
    income_schedule: Sequence[float] = (),
    max_paydays: int = MAX_COMPARATOR_PAYDAYS,
    horizon_day: int | None = None,
) -> OptimalResult:
    """Run the perfect avalanche payer over ``income_schedule``.

    Stops when every balance is paid or after ``max_paydays`` paydays. Once
    the schedule runs out the payer keeps stepping through due dates, paying
    with whatever cash is left, as long as the next due date falls on or
    before ``horizon_day``. Without a horizon it stops with the schedule.
    """
    state = game_engine.initial_state(config or default_game_config())
    incomes = list(income_schedule)[:max_paydays]

    for income in [None] + incomes:
        if income is not None:
            state = game_engine.advance_to_next_payday(state)
            state = game_engine.complete_earning(state, income)
        state = pay_avalanche(state)
        if game_engine.all_paid_off(state):
            state = game_engine.pay_everything(state)
            break

    if horizon_day is not None:
        while not state.is_complete and next_due_date(state.accounts, state.current_day) <= horizon_day:
            state = game_engine.advance_to_next_due_date(state)
            if state.is_complete:
                break
            state = pay_avalanche(state)
            if game_engine.all_paid_off(state):
                state = game_engine.pay_everything(state)

    return OptimalResult(
        final_state=state,
        total_interest=state.total_interest_paid,
        total_late_fees=state.total_late_fees,
        days=state.current_day,
        completed=state.is_complete,
    )


def compare_to_optimal(state: GameState, config: GameConfig | None = None) -> dict:
    """Player totals next to the optimal payer's on the same cash schedule.

    The optimal payer plays up to the player's current day, so both sides
    cover the same stretch of time unless the optimal payer finishes first.

    Args:
        state: The player's game state; its income log is the cash schedule.
        config: The configuration the player's game started from.

    Returns:
        Dict with player/optimal interest, late fees and days, plus the
        interest and fees the player could have saved.
    """
    optimal = simulate_optimal_strategy(
        config,
        [e.amount for e in state.income_log],
        horizon_day=state.current_day,
    )
    return {
        "player_interest": state.total_interest_paid,
        "optimal_interest": optimal.total_interest,
        "player_late_fees": state.total_late_fees,
        "optimal_late_fees": optimal.total_late_fees,
        "player_days": state.current_day,
        "optimal_days": optimal.days,
        "optimal_completed": optimal.completed,
        "interest_saved_possible": max(0.0, state.total_interest_paid - optimal.total_interest),
        "fees_saved_possible": max(0.0, state.total_late_fees - optimal.total_late_fees),
    }
