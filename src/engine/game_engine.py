"""Debt game engine: pure command functions over an immutable GameState.

Every command has the shape ``(state, ...) -> GameState``. The caller owns
the current state; the engine never keeps one. A rejected command raises
``InvalidCommandError`` and leaves the input state untouched.

Stage machine:
    paying  --advance_to_next_payday-->  earning
    earning --complete_earning-------->  paying
    paying  --advance_to_next_due_date-> paying | complete
    paying  --pay_everything---------->  complete  (when cash covers all debt)
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

from src.engine.clock import day_of_month, month_index, next_due_date, next_payday
from src.engine.financial_model import (
    EPSILON,
    Account,
    accrue_interest,
    apply_late_fee,
    apply_payment,
    current_balance,
    has_balance,
    roll_month,
)
from src.engine.game_state import (
    GameState,
    IncomeEntry,
    PaymentLogEntry,
    PayoffMilestone,
    Stage,
    with_snapshot,
)
from src.utils.config import GameConfig, default_game_config

logger = logging.getLogger(__name__)


class InvalidCommandError(ValueError):
    """A command was rejected; the state it was issued against is unchanged."""


def _require_stage(state: GameState, stage: Stage, command: str) -> None:
    if state.stage is not stage:
        raise InvalidCommandError(
            f"{command} requires stage {stage.value!r}, game is {state.stage.value!r}"
        )


# ──────────────────────────────────────────────────────────────────────────
# Setup
# ──────────────────────────────────────────────────────────────────────────

def initial_state(config: GameConfig | None = None) -> GameState:
    """Fresh game on day 1 with the configured accounts and starting cash."""
    config = config or default_game_config()
    accounts = tuple(
        Account(
            id=ac.id,
            name=ac.name,
            balance=float(ac.balance),
            limit=float(ac.limit),
            interest_rate=float(ac.interest_rate),
            minimum_payment=float(ac.minimum_payment),
            due_date=int(ac.due_date),
            color=ac.color,
        )
        for ac in config.accounts
    )
    state = GameState(
        accounts=accounts,
        current_day=1,
        total_money=float(config.starting_cash),
        stage=Stage.PAYING,
        next_pay_day=next_payday(1),
        next_due_date=next_due_date(accounts, 1),
    )
    return with_snapshot(state)


def reset(config: GameConfig | None = None) -> GameState:
    """Discard all state and ledger history and start over."""
    logger.info("Game reset")
    return initial_state(config)


# ──────────────────────────────────────────────────────────────────────────
# Queries
# ──────────────────────────────────────────────────────────────────────────

def total_outstanding(state: GameState) -> float:
    """Rounded total owed today, including interest not yet posted."""
    return sum(current_balance(a, state.current_day) for a in state.accounts)


def all_paid_off(state: GameState) -> bool:
    return not any(has_balance(a.balance) for a in state.accounts)


def can_pay_everything(state: GameState) -> bool:
    return total_outstanding(state) <= state.total_money + EPSILON


# ──────────────────────────────────────────────────────────────────────────
# Commands
# ──────────────────────────────────────────────────────────────────────────

def complete_earning(state: GameState, amount: float) -> GameState:
    """Credit the earning round's cash and return to the paying stage."""
    _require_stage(state, Stage.EARNING, "complete_earning")
    if not math.isfinite(amount) or amount < 0:
        raise InvalidCommandError(f"Earned amount must be finite and non-negative, got {amount!r}")

    logger.info("Day %d: earned %.2f", state.current_day, amount)
    return replace(
        state,
        total_money=state.total_money + amount,
        money_earned_this_round=amount,
        stage=Stage.PAYING,
        income_log=state.income_log + (IncomeEntry(day=state.current_day, amount=amount),),
    )


def pay(state: GameState, account_id: str, amount: float) -> GameState:
    """Apply a payment of ``amount`` to one account.

    Interest accrued since the account's last balance event is posted first;
    the payment then comes off the interest-inflated balance. An unknown
    ``account_id`` is a no-op.

    Raises:
        InvalidCommandError: amount is not a positive number, exceeds available cash,
            or exceeds what the account owes (each beyond EPSILON).
    """
    _require_stage(state, Stage.PAYING, "pay")
    target = state.account(account_id)
    if target is None:
        return state

    if not math.isfinite(amount) or amount <= 0:
        raise InvalidCommandError(f"Payment must be a positive amount, got {amount!r}")
    if amount > state.total_money + EPSILON:
        raise InvalidCommandError(
            f"Payment {amount:.2f} exceeds available cash {state.total_money:.2f}"
        )
    owed = current_balance(target, state.current_day)
    if amount > owed + EPSILON:
        raise InvalidCommandError(
            f"Payment {amount:.2f} exceeds {target.name} balance {owed:.2f}"
        )

    updated, interest = apply_payment(target, amount, state.current_day)
    paid_off = has_balance(target.balance + interest) and not has_balance(updated.balance)
    total_interest = state.total_interest_paid + interest

    logger.debug(
        "Day %d: paid %.2f to %s (interest %.0f, balance %.2f -> %.2f)",
        state.current_day, amount, target.id, interest, target.balance, updated.balance,
    )

    milestones = state.payoff_milestones
    freed = state.freed_minimums
    if paid_off and account_id not in milestones:
        milestones = dict(milestones)
        milestones[account_id] = PayoffMilestone(
            day=state.current_day,
            cumulative_interest=total_interest,
            account_name=target.name,
            interest_rate=target.interest_rate,
        )
        logger.info("Day %d: %s paid off", state.current_day, target.name)
    if paid_off:
        freed += target.minimum_payment

    entry = PaymentLogEntry(
        day=state.current_day,
        account_id=account_id,
        amount_paid=amount,
        interest_accrued=interest,
        resulting_balance=updated.balance,
    )

    new_state = replace(
        state,
        accounts=tuple(updated if a.id == account_id else a for a in state.accounts),
        total_money=max(0.0, state.total_money - amount),
        total_interest_paid=total_interest,
        freed_minimums=freed,
        payment_log=state.payment_log + (entry,),
        payoff_milestones=milestones,
    )
    return with_snapshot(new_state)


def advance_to_next_payday(state: GameState) -> GameState:
    """Jump to the next payday, integrating interest and late fees on the way.

    Each account accrues interest for the whole span in one step, then every
    day in (current_day, payday] is checked for a due-day crossing. The game
    moves to the earning stage.
    """
    _require_stage(state, Stage.PAYING, "advance_to_next_payday")
    start = state.current_day
    target_day = next_payday(start)
    target_month = month_index(target_day)

    interest_total = state.total_interest_paid
    fee_total = state.total_late_fees
    accounts = []
    for acct in state.accounts:
        updated, interest = accrue_interest(acct, target_day)
        interest_total += interest
        for day in range(start + 1, target_day + 1):
            if day_of_month(day) != acct.due_date:
                continue
            updated, fee = apply_late_fee(updated, month_index(day))
            if fee:
                fee_total += fee
                logger.debug("Day %d: late fee %.0f on %s", day, fee, acct.id)
        accounts.append(roll_month(updated, target_month))

    accounts = tuple(accounts)
    logger.info("Advanced to payday: day %d -> %d", start, target_day)
    new_state = replace(
        state,
        accounts=accounts,
        current_day=target_day,
        total_interest_paid=interest_total,
        total_late_fees=fee_total,
        stage=Stage.EARNING,
        next_pay_day=next_payday(target_day),
        next_due_date=next_due_date(accounts, target_day),
        money_earned_this_round=0.0,
    )
    return with_snapshot(new_state)


def advance_to_next_due_date(state: GameState) -> GameState:
    """Jump to the nearest due date among accounts that still owe.

    Interest accrues for the span on every account; only accounts whose due
    day is the target day get a late fee check. The game completes if every
    balance rounds to zero afterwards.
    """
    _require_stage(state, Stage.PAYING, "advance_to_next_due_date")
    start = state.current_day
    target_day = next_due_date(state.accounts, start)
    target_month = month_index(target_day)
    target_dom = day_of_month(target_day)

    interest_total = state.total_interest_paid
    fee_total = state.total_late_fees
    accounts = []
    for acct in state.accounts:
        updated, interest = accrue_interest(acct, target_day)
        interest_total += interest
        updated = roll_month(updated, target_month)
        if acct.due_date == target_dom:
            updated, fee = apply_late_fee(updated, target_month)
            if fee:
                fee_total += fee
                logger.debug("Day %d: late fee %.0f on %s", target_day, fee, acct.id)
        accounts.append(updated)

    accounts = tuple(accounts)
    complete = not any(has_balance(a.balance) for a in accounts)
    logger.info("Advanced to due date: day %d -> %d", start, target_day)
    new_state = replace(
        state,
        accounts=accounts,
        current_day=target_day,
        total_interest_paid=interest_total,
        total_late_fees=fee_total,
        next_due_date=next_due_date(accounts, target_day),
        stage=Stage.COMPLETE if complete else state.stage,
    )
    return with_snapshot(new_state)


def pay_everything(state: GameState) -> GameState:
    """Clear every balance at once if cash covers the rounded total owed.

    Returns ``state`` itself (unchanged) when funds are insufficient.
    """
    _require_stage(state, Stage.PAYING, "pay_everything")
    total = total_outstanding(state)
    if total > state.total_money + EPSILON:
        logger.info("pay_everything refused: owe %.0f, have %.2f", total, state.total_money)
        return state

    day = state.current_day
    interest_total = state.total_interest_paid
    freed = state.freed_minimums
    milestones = dict(state.payoff_milestones)
    log = list(state.payment_log)
    accounts = []
    for acct in state.accounts:
        posted, interest = accrue_interest(acct, day)
        interest_total += interest
        owed = posted.balance
        if has_balance(owed):
            freed += acct.minimum_payment
            log.append(PaymentLogEntry(day, acct.id, owed, interest, 0.0))
            if acct.id not in milestones:
                milestones[acct.id] = PayoffMilestone(
                    day=day,
                    cumulative_interest=interest_total,
                    account_name=acct.name,
                    interest_rate=acct.interest_rate,
                )
        accounts.append(replace(posted, balance=0.0))

    logger.info("Day %d: paid everything (%.0f)", day, total)
    new_state = replace(
        state,
        accounts=tuple(accounts),
        total_money=max(0.0, state.total_money - total),
        total_interest_paid=interest_total,
        freed_minimums=freed,
        payment_log=tuple(log),
        payoff_milestones=milestones,
        stage=Stage.COMPLETE,
    )
    return with_snapshot(new_state)
