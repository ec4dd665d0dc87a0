"""YAML configuration loader and dataclasses for game setup."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.envs.reward import RewardConfig


def _resolve_config_path(path: str | Path) -> Path:
    """Resolve a config path, anchoring relative paths to the project root.

    The project root is identified as the nearest ancestor directory that
    contains ``pyproject.toml``.  If the file exists as-is (e.g. an absolute
    path or the CWD happens to be the project root already), it is returned
    unchanged.
    """
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p

    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "pyproject.toml").exists():
            # Missing files still surface as a descriptive FileNotFoundError from open()
            return parent / p

    return p


@dataclass
class AccountConfig:
    """Starting terms for a single credit account."""

    id: str = "card"
    name: str = "Card"
    balance: float = 500.0
    limit: float = 2000.0
    interest_rate: float = 19.0     # Annual percent
    minimum_payment: float = 25.0
    due_date: int = 15              # Day of month, 1..30
    color: str = "#333333"

    def __post_init__(self) -> None:
        if not 1 <= self.due_date <= 30:
            raise ValueError(f"due_date must be in [1, 30], got {self.due_date!r} for {self.id!r}")
        if self.balance < 0:
            raise ValueError(f"balance must be non-negative, got {self.balance!r} for {self.id!r}")


def _default_accounts() -> list[AccountConfig]:
    return [
        AccountConfig("visa", "Visa Card", balance=350, limit=3000, interest_rate=19,
                      minimum_payment=25, due_date=15, color="#1a365d"),
        AccountConfig("mastercard", "MasterCard", balance=400, limit=2000, interest_rate=23,
                      minimum_payment=20, due_date=5, color="#e53e3e"),
        AccountConfig("discover", "Discover Card", balance=300, limit=1500, interest_rate=16,
                      minimum_payment=15, due_date=25, color="#38a169"),
    ]


@dataclass
class GameConfig:
    """Full game configuration.

    ``paycheck_amount`` and ``max_paydays`` only drive scripted play
    (environment and baselines); the engine itself takes income from
    ``complete_earning``.
    """

    accounts: list[AccountConfig] = field(default_factory=_default_accounts)
    starting_cash: float = 200.0
    paycheck_amount: float = 500.0
    max_paydays: int = 48
    reward: RewardConfig = field(default_factory=RewardConfig)

    @property
    def num_accounts(self) -> int:
        return len(self.accounts)

    @property
    def total_initial_debt(self) -> float:
        return sum(a.balance for a in self.accounts)

    @property
    def total_credit_limit(self) -> float:
        return sum(a.limit for a in self.accounts)


def default_game_config() -> GameConfig:
    """The built-in three-card game."""
    return GameConfig()


def load_game_config(path: str | Path) -> GameConfig:
    """Load a GameConfig from a YAML file.

    Args:
        path: Path to a YAML config file (e.g., configs/game/default.yaml).

    Returns:
        Populated GameConfig instance.
    """
    path = _resolve_config_path(path)
    with open(path, "r") as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}

    account_dicts = raw.get("accounts")
    if account_dicts is None:
        accounts = _default_accounts()
    else:
        accounts = []
        for i, ad in enumerate(account_dicts):
            if not isinstance(ad, dict):
                raise ValueError(f"Account entry {i} must be a mapping, got {type(ad).__name__}")
            accounts.append(
                AccountConfig(
                    id=str(ad.get("id", f"card{i + 1}")),
                    name=str(ad.get("name", f"Card {i + 1}")),
                    balance=float(ad.get("balance", 500.0)),
                    limit=float(ad.get("limit", 2000.0)),
                    interest_rate=float(ad.get("interest_rate", 19.0)),
                    minimum_payment=float(ad.get("minimum_payment", 25.0)),
                    due_date=int(ad.get("due_date", 15)),
                    color=str(ad.get("color", "#333333")),
                )
            )

    ids = [a.id for a in accounts]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Account ids must be unique, got {ids}")

    reward_cfg = RewardConfig(**raw.get("reward", {}))

    return GameConfig(
        accounts=accounts,
        starting_cash=float(raw.get("starting_cash", 200.0)),
        paycheck_amount=float(raw.get("paycheck_amount", 500.0)),
        max_paydays=int(raw.get("max_paydays", 48)),
        reward=reward_cfg,
    )


def load_eval_config(path: str | Path) -> dict[str, Any]:
    """Load evaluation protocol from a YAML file."""
    path = _resolve_config_path(path)
    with open(path, "r") as f:
        return yaml.safe_load(f)
