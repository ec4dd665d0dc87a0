"""DebtAvalancheEnv: Gymnasium environment over the debt game engine.

Each step is one pay period: the environment pays every account's minimum,
splits the remaining cash according to the agent's action, advances the game
clock to the next payday, and collects a fixed paycheck.

Action space:
  - Box(num_accounts,) → weights normalized over accounts still owing → proportional
    allocation of cash left after minimums (all-zero weights keep the cash)

Observation space:
  - Box(4 * num_accounts + 3): per-account features + global features, normalized to [0,1]
"""

from __future__ import annotations

from typing import Any

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from src.engine import game_engine
from src.engine.clock import days_until
from src.engine.financial_model import EPSILON, current_balance, has_balance
from src.engine.game_state import GameState
from src.envs.reward import compute_step_reward, compute_terminal_reward
from src.utils.config import GameConfig


class DebtAvalancheEnv(gym.Env):
    """Gymnasium environment simulating payday-by-payday debt repayment."""

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 1}

    def __init__(
        self,
        config: GameConfig | None = None,
        render_mode: str | None = None,
    ):
        """Initialize environment from a typed GameConfig.

        Args:
            config: Game configuration. Uses the built-in game if None.
            render_mode: "human" for printed output, "ansi" for string return.
        """
        super().__init__()

        self.config = config or GameConfig()
        self.render_mode = render_mode

        self.num_accounts = self.config.num_accounts
        self.max_paydays = self.config.max_paydays
        self.paycheck_amount = self.config.paycheck_amount
        self.reward_cfg = self.config.reward

        # ── Observation space ──────────────────────────────────────────────
        # Per account (4 features × num_accounts):
        #   balance_norm, rate_norm, minimum_norm, days_until_due_norm
        # Global (3 features):
        #   cash_norm, payday_norm, total_debt_norm
        obs_dim = 4 * self.num_accounts + 3
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )
        self.action_space = spaces.Box(
            low=0.0, high=1.0, shape=(self.num_accounts,), dtype=np.float32
        )

        # ── State variables (set in reset) ────────────────────────────────
        self.state: GameState = game_engine.initial_state(self.config)
        self.paydays: int = 0
        self.initial_total_debt: float = self.config.total_initial_debt
        self._last_step_info: dict[str, Any] = {}

    # ──────────────────────────────────────────────────────────────────────
    # Gymnasium API
    # ──────────────────────────────────────────────────────────────────────

    def reset(
        self,
        seed: int | None = None,
        options: dict[str, Any] | None = None,
    ) -> tuple[np.ndarray, dict[str, Any]]:
        """Reset to a fresh game.

        Args:
            seed: RNG seed for reproducibility.
            options: Optional dict; can contain 'config' to override GameConfig.

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        if options and "config" in options:
            cfg: GameConfig = options["config"]
            if cfg.num_accounts != self.num_accounts:
                raise ValueError(
                    f"Config has {cfg.num_accounts} accounts, env was built for {self.num_accounts}"
                )
            self.config = cfg
            self.max_paydays = cfg.max_paydays
            self.paycheck_amount = cfg.paycheck_amount
            self.reward_cfg = cfg.reward

        self.state = game_engine.reset(self.config)
        self.paydays = 0
        self.initial_total_debt = self.config.total_initial_debt
        self._last_step_info = {}

        return self._get_obs(), self._build_info()

    def step(
        self, action: np.ndarray
    ) -> tuple[np.ndarray, float, bool, bool, dict[str, Any]]:
        """Execute one pay period.

        Pipeline:
            1. Pay minimums, then allocate remaining cash per the action
            2. Finish the game if everything is paid, otherwise advance to
               the next payday and collect the paycheck
            3. Compute reward from the ledger deltas
            4. Check termination

        Args:
            action: Allocation weights, one per account.

        Returns:
            (obs, reward, terminated, truncated, info)
        """
        prev = self.state

        # ── 1. Payments ───────────────────────────────────────────────────
        state, payments = self._apply_payments(prev, action)

        # ── 2. Clock ──────────────────────────────────────────────────────
        if game_engine.all_paid_off(state):
            state = game_engine.pay_everything(state)
        else:
            state = game_engine.advance_to_next_payday(state)
            state = game_engine.complete_earning(state, self.paycheck_amount)
            self.paydays += 1
        self.state = state

        # ── 3. Reward ─────────────────────────────────────────────────────
        interest = state.total_interest_paid - prev.total_interest_paid
        fees = state.total_late_fees - prev.total_late_fees
        newly_paid_off = len(state.payoff_milestones) - len(prev.payoff_milestones)

        terminated = state.is_complete
        truncated = self.paydays >= self.max_paydays and not terminated

        reward = compute_step_reward(
            cfg=self.reward_cfg,
            interest_accrued=interest,
            late_fees=fees,
            initial_total_debt=self.initial_total_debt,
            accounts_paid_off_this_step=newly_paid_off,
        )
        if terminated or truncated:
            reward += compute_terminal_reward(
                cfg=self.reward_cfg,
                all_debt_paid=terminated,
                paydays_elapsed=self.paydays,
                max_paydays=self.max_paydays,
            )

        # ── 4. Info ───────────────────────────────────────────────────────
        info = self._build_info(
            payments=payments,
            interest=interest,
            late_fees=fees,
            newly_paid_off=newly_paid_off,
            all_paid=terminated,
        )
        self._last_step_info = info

        return self._get_obs(), float(reward), terminated, truncated, info

    def render(self) -> str | None:
        """Print or return a human-readable pay-period statement."""
        info = self._last_step_info
        payments = info.get("payments", [0.0] * self.num_accounts)
        lines = [
            f"\n{'='*60}",
            f"  Day {self.state.current_day}  (payday {self.paydays} / {self.max_paydays})",
            f"{'='*60}",
        ]
        for i, acct in enumerate(self.state.accounts):
            status = "✓ PAID OFF" if not has_balance(acct.balance) else f"${acct.balance:,.2f}"
            lines.append(
                f"  {acct.name:.<25s} Balance: {status:>12s}  "
                f"APR: {acct.interest_rate:>5.1f}%  "
                f"Payment: ${payments[i]:>8,.2f}"
            )
        lines.append(f"  {'─'*56}")
        lines.append(
            f"  Total debt: ${self.state.total_balance:>10,.2f}  "
            f"Cash: ${self.state.total_money:>9,.2f}  "
            f"Interest: ${self.state.total_interest_paid:,.0f}  "
            f"Fees: ${self.state.total_late_fees:,.0f}"
        )
        output = "\n".join(lines)

        if self.render_mode == "human":
            print(output)
            return None
        return output

    # ──────────────────────────────────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────────────────────────────────

    def _apply_payments(
        self, state: GameState, action: np.ndarray
    ) -> tuple[GameState, list[float]]:
        """Pay minimums, then spread the remaining cash by the action weights.

        Returns:
            (state after payments, dollars paid per account)
        """
        payments = [0.0] * self.num_accounts
        day = state.current_day

        # Minimums first, in account order, bounded by cash and what is owed
        for i, acct in enumerate(state.accounts):
            owed = current_balance(acct, day)
            amount = min(acct.minimum_payment, owed, state.total_money)
            if amount > EPSILON:
                state = game_engine.pay(state, acct.id, amount)
                payments[i] += amount

        surplus = state.total_money
        if surplus <= EPSILON:
            return state, payments

        raw = np.array(action, dtype=np.float64).flatten()[:self.num_accounts]
        raw = np.clip(raw, 0.0, None)
        mask = np.array([1.0 if has_balance(a.balance) else 0.0 for a in state.accounts])
        raw = raw * mask
        total = raw.sum()
        if total <= 1e-8:
            # All-zero weights keep the surplus as cash
            return state, payments
        proportions = raw / total

        allocations = proportions * surplus
        for i, acct in enumerate(state.accounts):
            owed = current_balance(acct, day)
            amount = float(min(allocations[i], owed, state.total_money))
            if amount > EPSILON:
                state = game_engine.pay(state, acct.id, amount)
                payments[i] += amount

        return state, payments

    def _get_obs(self) -> np.ndarray:
        """Build normalized observation vector.

        Per account (4 features):
            balance / initial balance  (or 0 if initial was 0)
            interest_rate / 30
            minimum_payment / paycheck
            days_until_due / 30

        Global (3 features):
            cash / paycheck
            paydays / max_paydays
            total_debt / initial_total_debt
        """
        obs = []
        paycheck = max(self.paycheck_amount, 1.0)
        day = self.state.current_day

        for i, acct in enumerate(self.state.accounts):
            initial_bal = self.config.accounts[i].balance
            obs.append(acct.balance / max(initial_bal, 1.0))
            obs.append(acct.interest_rate / 30.0)
            obs.append(acct.minimum_payment / paycheck)
            obs.append(days_until(acct.due_date, day) / 30.0)

        obs.append(self.state.total_money / paycheck)
        obs.append(self.paydays / max(self.max_paydays, 1))
        obs.append(self.state.total_balance / max(self.initial_total_debt, 1.0))

        obs_array = np.array(obs, dtype=np.float32)
        # Fees and interest can push balances past their starting values
        return np.clip(obs_array, 0.0, 1.0)

    def _build_info(self, **kwargs) -> dict[str, Any]:
        """Build info dict for step/reset."""
        info: dict[str, Any] = {
            "day": self.state.current_day,
            "paydays": self.paydays,
            "balances": [a.balance for a in self.state.accounts],
            "cash": self.state.total_money,
            "total_debt": self.state.total_balance,
            "total_interest": self.state.total_interest_paid,
            "total_late_fees": self.state.total_late_fees,
            "accounts_paid_off": len(self.state.payoff_milestones),
        }
        info.update(kwargs)
        return info
