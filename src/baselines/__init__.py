"""Baseline policies for debt repayment."""

from src.baselines.base_policy import BaselinePolicy
from src.baselines.minimum_only import MinimumOnlyPolicy
from src.baselines.snowball import SnowballPolicy
from src.baselines.avalanche import AvalanchePolicy
from src.baselines.random_policy import RandomPolicy

ALL_BASELINES = [
    MinimumOnlyPolicy,
    SnowballPolicy,
    AvalanchePolicy,
    RandomPolicy,
]

__all__ = [
    "BaselinePolicy",
    "MinimumOnlyPolicy",
    "SnowballPolicy",
    "AvalanchePolicy",
    "RandomPolicy",
    "ALL_BASELINES",
]
