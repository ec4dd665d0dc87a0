"""Avalanche strategy: all surplus to highest interest rate account first."""

from __future__ import annotations

import numpy as np

from src.baselines.base_policy import BaselinePolicy
from src.engine.financial_model import has_balance
from src.envs.debt_env import DebtAvalancheEnv


class AvalanchePolicy(BaselinePolicy):
    """Debt avalanche: direct all surplus to the account with the highest rate.

    Mathematically optimal single-target strategy for minimizing total interest.
    """

    @property
    def name(self) -> str:
        return "Avalanche"

    def allocate(self, env: DebtAvalancheEnv) -> np.ndarray:
        action = np.zeros(env.num_accounts, dtype=np.float32)

        active = [
            (i, a.interest_rate) for i, a in enumerate(env.state.accounts)
            if has_balance(a.balance)
        ]
        if not active:
            return action

        target_idx = max(active, key=lambda x: x[1])[0]
        action[target_idx] = 1.0
        return action
