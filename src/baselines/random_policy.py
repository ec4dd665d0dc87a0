"""Random policy: uniformly random allocations for lower-bound reference."""

from __future__ import annotations

import numpy as np

from src.baselines.base_policy import BaselinePolicy
from src.engine.financial_model import has_balance
from src.envs.debt_env import DebtAvalancheEnv


class RandomPolicy(BaselinePolicy):
    """Allocate surplus randomly across accounts still owing."""

    def __init__(self, seed: int | None = None):
        self._rng = np.random.default_rng(seed)

    @property
    def name(self) -> str:
        return "Random"

    def allocate(self, env: DebtAvalancheEnv) -> np.ndarray:
        action = self._rng.random(env.num_accounts).astype(np.float32)
        for i, a in enumerate(env.state.accounts):
            if not has_balance(a.balance):
                action[i] = 0.0
        return action
