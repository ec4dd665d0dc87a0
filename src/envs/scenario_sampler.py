"""ScenarioSampler: generates varied debt games for benchmarking strategies.

Produces random GameConfig instances with varied account terms, due days,
starting cash and paychecks. Also provides named presets for reproducible
benchmarking.
"""

from __future__ import annotations

import numpy as np

from src.envs.reward import RewardConfig
from src.utils.config import AccountConfig, GameConfig, default_game_config


_CARD_NAMES = [
    "Visa Platinum", "Mastercard Gold", "Store Card", "Rewards Card",
    "Travel Card", "Gas Card", "Medical Card", "Cash Back Card",
    "Student Card", "Department Store", "Airline Card", "Hotel Card",
]


class ScenarioSampler:
    """Generate randomized or preset debt games."""

    def __init__(
        self,
        num_accounts: int = 3,
        rate_range: tuple[float, float] = (12.0, 29.0),
        balance_range: tuple[float, float] = (200.0, 3000.0),
        limit_multiplier_range: tuple[float, float] = (1.5, 5.0),
        minimum_ratio_range: tuple[float, float] = (0.03, 0.07),
        starting_cash_range: tuple[float, float] = (0.0, 400.0),
        paycheck_range: tuple[float, float] = (300.0, 900.0),
        max_paydays: int = 48,
        reward_config: RewardConfig | None = None,
    ):
        self.num_accounts = num_accounts
        self.rate_range = rate_range
        self.balance_range = balance_range
        self.limit_multiplier_range = limit_multiplier_range
        self.minimum_ratio_range = minimum_ratio_range
        self.starting_cash_range = starting_cash_range
        self.paycheck_range = paycheck_range
        self.max_paydays = max_paydays
        self.reward_config = reward_config or RewardConfig()

    def sample(self, rng: np.random.Generator | None = None) -> GameConfig:
        """Sample a random game.

        Args:
            rng: Numpy random Generator for reproducibility.

        Returns:
            A randomized GameConfig with ``num_accounts`` accounts.
        """
        if rng is None:
            rng = np.random.default_rng()

        name_indices = rng.choice(len(_CARD_NAMES), size=self.num_accounts, replace=False)

        accounts = []
        for n, idx in enumerate(name_indices):
            balance = float(round(rng.uniform(*self.balance_range)))
            minimum = max(10.0, float(round(balance * rng.uniform(*self.minimum_ratio_range))))
            accounts.append(
                AccountConfig(
                    id=f"card{n + 1}",
                    name=_CARD_NAMES[idx],
                    balance=balance,
                    limit=float(round(balance * rng.uniform(*self.limit_multiplier_range))),
                    interest_rate=round(float(rng.uniform(*self.rate_range)), 1),
                    minimum_payment=minimum,
                    due_date=int(rng.integers(1, 31)),
                )
            )

        return GameConfig(
            accounts=accounts,
            starting_cash=float(round(rng.uniform(*self.starting_cash_range))),
            paycheck_amount=float(round(rng.uniform(*self.paycheck_range))),
            max_paydays=self.max_paydays,
            reward=self.reward_config,
        )

    @staticmethod
    def preset(name: str) -> GameConfig:
        """Return a named preset game for reproducible experiments.

        Available presets:
            - "default": The built-in three-card game
            - "tight_budget": Larger balances, small paychecks
            - "high_rates": Three cards near the top of the rate range

        Raises:
            ValueError: If preset name is unknown.
        """
        presets = {
            "default": default_game_config,
            "tight_budget": lambda: GameConfig(
                accounts=[
                    AccountConfig("visa", "Visa Card", balance=1800, limit=3000,
                                  interest_rate=21.9, minimum_payment=55, due_date=12),
                    AccountConfig("store", "Store Card", balance=900, limit=1200,
                                  interest_rate=26.9, minimum_payment=30, due_date=3),
                    AccountConfig("gas", "Gas Card", balance=450, limit=800,
                                  interest_rate=17.9, minimum_payment=20, due_date=22),
                ],
                starting_cash=100,
                paycheck_amount=250,
            ),
            "high_rates": lambda: GameConfig(
                accounts=[
                    AccountConfig("platinum", "Platinum", balance=1200, limit=2000,
                                  interest_rate=28.9, minimum_payment=40, due_date=8),
                    AccountConfig("medical", "Medical", balance=800, limit=1000,
                                  interest_rate=24.9, minimum_payment=25, due_date=18),
                    AccountConfig("dept", "Dept Store", balance=600, limit=900,
                                  interest_rate=26.9, minimum_payment=20, due_date=28),
                ],
                starting_cash=150,
                paycheck_amount=400,
            ),
        }

        if name not in presets:
            valid = ", ".join(sorted(presets.keys()))
            raise ValueError(f"Unknown preset {name!r}. Valid: {valid}")

        return presets[name]()
