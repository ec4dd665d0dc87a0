"""Game state aggregate and its append-only ledger records."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from src.engine.financial_model import Account, has_balance, round_currency


class Stage(str, Enum):
    EARNING = "earning"
    PAYING = "paying"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PaymentLogEntry:
    day: int
    account_id: str
    amount_paid: float
    interest_accrued: float     # Interest posted on this account just before the payment
    resulting_balance: float


@dataclass(frozen=True)
class PayoffMilestone:
    day: int
    cumulative_interest: float  # Game-wide interest total at the moment of payoff
    account_name: str
    interest_rate: float


@dataclass(frozen=True)
class DailySnapshot:
    day: int
    total_balance: float
    cumulative_interest_paid: float
    accounts_remaining: int


@dataclass(frozen=True)
class IncomeEntry:
    """Cash credited after an earning round."""

    day: int
    amount: float


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the whole game.

    Commands in ``src.engine.game_engine`` never mutate a GameState; they
    build a new one. Collections are tuples, and ``payoff_milestones`` is
    always copied before being extended.
    """

    accounts: tuple[Account, ...]
    current_day: int = 1
    total_money: float = 0.0
    total_interest_paid: float = 0.0
    total_late_fees: float = 0.0
    stage: Stage = Stage.PAYING
    next_pay_day: int = 1
    next_due_date: int = 1
    money_earned_this_round: float = 0.0
    freed_minimums: float = 0.0
    payment_log: tuple[PaymentLogEntry, ...] = ()
    payoff_milestones: dict[str, PayoffMilestone] = field(default_factory=dict)
    daily_snapshots: tuple[DailySnapshot, ...] = ()
    income_log: tuple[IncomeEntry, ...] = ()

    @property
    def total_balance(self) -> float:
        return sum(a.balance for a in self.accounts)

    @property
    def accounts_remaining(self) -> int:
        return sum(1 for a in self.accounts if has_balance(a.balance))

    @property
    def is_complete(self) -> bool:
        return self.stage is Stage.COMPLETE

    def account(self, account_id: str) -> Account | None:
        """Look up an account by id; None if absent."""
        for acct in self.accounts:
            if acct.id == account_id:
                return acct
        return None


def create_daily_snapshot(state: GameState) -> DailySnapshot:
    """Point-in-time aggregate debt figures for progress charts."""
    return DailySnapshot(
        day=state.current_day,
        total_balance=round_currency(state.total_balance),
        cumulative_interest_paid=state.total_interest_paid,
        accounts_remaining=state.accounts_remaining,
    )


def with_snapshot(state: GameState) -> GameState:
    """Return ``state`` with a fresh snapshot appended to its ledger."""
    return replace(state, daily_snapshots=state.daily_snapshots + (create_daily_snapshot(state),))
