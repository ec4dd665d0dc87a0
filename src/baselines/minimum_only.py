"""Minimum-payment-only baseline: worst-case reference strategy."""

from __future__ import annotations

import numpy as np

from src.baselines.base_policy import BaselinePolicy
from src.envs.debt_env import DebtAvalancheEnv


class MinimumOnlyPolicy(BaselinePolicy):
    """Pay only the minimum on each account and hoard the rest."""

    @property
    def name(self) -> str:
        return "MinimumOnly"

    def allocate(self, env: DebtAvalancheEnv) -> np.ndarray:
        # Zero weights: the env pays minimums and keeps the surplus as cash
        return np.zeros(env.num_accounts, dtype=np.float32)
