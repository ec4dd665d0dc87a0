"""Abstract base class for heuristic baseline policies."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from src.envs.debt_env import DebtAvalancheEnv


class BaselinePolicy(ABC):
    """Interface for scripted payment allocation strategies.

    Subclasses implement `allocate()` which returns allocation weights for
    the cash left over after the environment has paid every minimum.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this strategy."""
        ...

    @abstractmethod
    def allocate(self, env: DebtAvalancheEnv) -> np.ndarray:
        """Decide how to split surplus cash across accounts.

        The environment guarantees minimum payments. This method decides
        how to distribute whatever cash remains after them.

        Args:
            env: The environment instance (read game state, paycheck, etc.).

        Returns:
            Weight array compatible with env.action_space.
        """
        ...

    def run_episode(
        self,
        env: DebtAvalancheEnv,
        seed: int | None = None,
    ) -> dict:
        """Run a full episode using this policy.

        Args:
            env: Environment instance.
            seed: Reset seed.

        Returns:
            Dict with episode metrics: total_interest, total_late_fees, days,
            paydays, final_debt, all_paid, debt_history, interest_history.
        """
        obs, info = env.reset(seed=seed)

        debt_history = []
        interest_history = []

        terminated = truncated = False
        while not (terminated or truncated):
            action = self.allocate(env)
            obs, reward, terminated, truncated, info = env.step(action)

            interest_history.append(info.get("interest", 0.0))
            debt_history.append(info.get("total_debt", 0.0))

        return {
            "strategy": self.name,
            "total_interest": env.state.total_interest_paid,
            "total_late_fees": env.state.total_late_fees,
            "days": env.state.current_day,
            "paydays": env.paydays,
            "final_debt": env.state.total_balance,
            "all_paid": env.state.is_complete,
            "debt_history": debt_history,
            "interest_history": interest_history,
        }
