"""Reward function for the debt avalanche environment.

Configurable via RewardConfig dataclass. Computes per-step and terminal rewards.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RewardConfig:
    """Reward shaping coefficients."""

    alpha: float = 1.0      # Interest penalty weight (normalized by initial debt)
    eta: float = 2.0        # Dense interest penalty: -eta * (interest / 100)
    fee_weight: float = 0.1  # Late fee penalty per currency unit of fees
    delta: float = 0.5      # Per-account payoff bonus
    epsilon: float = 10.0   # All-debt-cleared terminal bonus
    zeta: float = 1.0       # Time pressure terminal penalty


def compute_step_reward(
    cfg: RewardConfig,
    interest_accrued: float,
    late_fees: float,
    initial_total_debt: float,
    accounts_paid_off_this_step: int,
) -> float:
    """Compute the per-step (pay period) reward.

    reward_step = (
        - α × (interest / initial_total_debt)
        - η × (interest / 100)
        - fee_weight × late_fees
        + δ × accounts_paid_off_this_step
    )

    Args:
        cfg: Reward coefficients.
        interest_accrued: Interest posted across all accounts this step.
        late_fees: Late fees posted across all accounts this step.
        initial_total_debt: Total debt at episode start (for normalization).
        accounts_paid_off_this_step: Number of accounts newly zeroed this step.

    Returns:
        Scalar reward for this time step.
    """
    if initial_total_debt > 0:
        interest_penalty = cfg.alpha * (interest_accrued / initial_total_debt)
    else:
        interest_penalty = 0.0
    interest_penalty += cfg.eta * (interest_accrued / 100.0)

    fee_penalty = cfg.fee_weight * late_fees
    payoff_bonus = cfg.delta * accounts_paid_off_this_step

    return -interest_penalty - fee_penalty + payoff_bonus


def compute_terminal_reward(
    cfg: RewardConfig,
    all_debt_paid: bool,
    paydays_elapsed: int,
    max_paydays: int,
) -> float:
    """Compute the terminal (end-of-episode) reward.

    reward_terminal = (
        + ε × (1.0 if all_debt_paid else 0.0)
        - ζ × (paydays_elapsed / max_paydays)
    )
    """
    completion_bonus = cfg.epsilon * (1.0 if all_debt_paid else 0.0)
    time_penalty = cfg.zeta * (paydays_elapsed / max(max_paydays, 1))
    return completion_bonus - time_penalty
