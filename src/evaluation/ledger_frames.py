"""Ledger export: the game's audit trail as pandas DataFrames."""

from __future__ import annotations

from dataclasses import asdict

import pandas as pd

from src.engine.game_state import GameState

PAYMENT_COLUMNS = ["day", "account_id", "amount_paid", "interest_accrued", "resulting_balance"]
SNAPSHOT_COLUMNS = ["day", "total_balance", "cumulative_interest_paid", "accounts_remaining"]
MILESTONE_COLUMNS = ["account_id", "day", "cumulative_interest", "account_name", "interest_rate"]


def payment_log_frame(state: GameState) -> pd.DataFrame:
    """One row per payment, in insertion order."""
    return pd.DataFrame([asdict(e) for e in state.payment_log], columns=PAYMENT_COLUMNS)


def snapshots_frame(state: GameState) -> pd.DataFrame:
    """Debt-progress time series, one row per state-changing command."""
    return pd.DataFrame([asdict(s) for s in state.daily_snapshots], columns=SNAPSHOT_COLUMNS)


def milestones_frame(state: GameState) -> pd.DataFrame:
    """Payoff milestones ordered by the day each account was cleared."""
    rows = [{"account_id": k, **asdict(m)} for k, m in state.payoff_milestones.items()]
    df = pd.DataFrame(rows, columns=MILESTONE_COLUMNS)
    return df.sort_values("day", kind="stable").reset_index(drop=True)


def payments_by_account(state: GameState) -> pd.DataFrame:
    """Total paid and payment count per account, highest rate first.

    Accounts that never received a payment appear with zeros.
    """
    log = payment_log_frame(state)
    grouped = log.groupby("account_id")["amount_paid"].agg(["sum", "count"])
    rows = []
    for acct in sorted(state.accounts, key=lambda a: a.interest_rate, reverse=True):
        total = float(grouped.loc[acct.id, "sum"]) if acct.id in grouped.index else 0.0
        count = int(grouped.loc[acct.id, "count"]) if acct.id in grouped.index else 0
        rows.append({
            "account_id": acct.id,
            "name": acct.name,
            "interest_rate": acct.interest_rate,
            "total_paid": total,
            "payments": count,
        })
    return pd.DataFrame(rows)
