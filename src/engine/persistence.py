"""Save/restore a GameState as an opaque JSON blob.

The host application decides where blobs live. A restored state is trusted
as-is: nothing is recomputed beyond rebuilding the dataclasses.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any

from src.engine.financial_model import Account
from src.engine.game_engine import initial_state
from src.engine.game_state import (
    DailySnapshot,
    GameState,
    IncomeEntry,
    PaymentLogEntry,
    PayoffMilestone,
    Stage,
)
from src.utils.config import GameConfig

logger = logging.getLogger(__name__)


class StateFormatError(ValueError):
    """A persisted blob could not be turned back into a GameState."""


def state_to_dict(state: GameState) -> dict[str, Any]:
    """Plain JSON-compatible dict for ``state``."""
    raw = asdict(state)
    raw["stage"] = state.stage.value
    return raw


def state_from_dict(raw: dict[str, Any]) -> GameState:
    """Rebuild a GameState from ``state_to_dict`` output.

    Raises:
        StateFormatError: required fields are missing or of the wrong shape.
    """
    if not isinstance(raw, dict) or "accounts" not in raw or "current_day" not in raw:
        raise StateFormatError("Saved state is missing 'accounts' or 'current_day'")

    try:
        return GameState(
            accounts=tuple(Account(**a) for a in raw["accounts"]),
            current_day=int(raw["current_day"]),
            total_money=float(raw.get("total_money", 0.0)),
            total_interest_paid=float(raw.get("total_interest_paid", 0.0)),
            total_late_fees=float(raw.get("total_late_fees", 0.0)),
            stage=Stage(raw.get("stage", Stage.PAYING.value)),
            next_pay_day=int(raw.get("next_pay_day", 1)),
            next_due_date=int(raw.get("next_due_date", 1)),
            money_earned_this_round=float(raw.get("money_earned_this_round", 0.0)),
            freed_minimums=float(raw.get("freed_minimums", 0.0)),
            payment_log=tuple(PaymentLogEntry(**e) for e in raw.get("payment_log", [])),
            payoff_milestones={
                k: PayoffMilestone(**m) for k, m in raw.get("payoff_milestones", {}).items()
            },
            daily_snapshots=tuple(DailySnapshot(**s) for s in raw.get("daily_snapshots", [])),
            income_log=tuple(IncomeEntry(**i) for i in raw.get("income_log", [])),
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise StateFormatError(f"Saved state is malformed: {exc}") from exc


def serialize_state(state: GameState) -> str:
    return json.dumps(state_to_dict(state))


def deserialize_state(blob: str) -> GameState:
    """Parse a blob produced by ``serialize_state``.

    Raises:
        StateFormatError: the blob is not valid JSON or not a saved state.
    """
    try:
        raw = json.loads(blob)
    except (TypeError, json.JSONDecodeError) as exc:
        raise StateFormatError(f"Saved state is not valid JSON: {exc}") from exc
    return state_from_dict(raw)


def load_state(blob: str | None, config: GameConfig | None = None) -> GameState:
    """Restore a saved game, or start a fresh one if the blob is unusable.

    A missing or corrupt blob is a recovered condition, never fatal.
    """
    if not blob:
        return initial_state(config)
    try:
        return deserialize_state(blob)
    except StateFormatError as exc:
        logger.warning("Failed to load saved game, starting fresh: %s", exc)
        return initial_state(config)
