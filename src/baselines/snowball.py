"""Snowball strategy: all surplus to smallest balance first."""

from __future__ import annotations

import numpy as np

from src.baselines.base_policy import BaselinePolicy
from src.engine.financial_model import has_balance
from src.envs.debt_env import DebtAvalancheEnv


class SnowballPolicy(BaselinePolicy):
    """Debt snowball: direct all surplus to the account with the smallest balance.

    Quick wins from eliminating small debts first.
    """

    @property
    def name(self) -> str:
        return "Snowball"

    def allocate(self, env: DebtAvalancheEnv) -> np.ndarray:
        action = np.zeros(env.num_accounts, dtype=np.float32)

        active = [
            (i, a.balance) for i, a in enumerate(env.state.accounts)
            if has_balance(a.balance)
        ]
        if not active:
            return action

        target_idx = min(active, key=lambda x: x[1])[0]
        action[target_idx] = 1.0
        return action
