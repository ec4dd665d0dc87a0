"""Tests for the optimal avalanche comparator."""

import pytest

from src.baselines import MinimumOnlyPolicy, SnowballPolicy
from src.engine import game_engine
from src.envs.debt_env import DebtAvalancheEnv
from src.evaluation.comparator import (
    avalanche_allocation,
    compare_to_optimal,
    pay_avalanche,
    simulate_optimal_strategy,
)
from src.utils.config import GameConfig


@pytest.fixture
def start():
    return game_engine.initial_state()


class TestAvalancheAllocation:

    def test_minimums_then_highest_rate(self, start):
        plan = avalanche_allocation(start.accounts, 200, start.current_day)
        assert plan == [("mastercard", 160), ("visa", 25), ("discover", 15)]

    def test_short_cash_covers_highest_rate_minimums_first(self, start):
        plan = avalanche_allocation(start.accounts, 30, start.current_day)
        assert plan == [("mastercard", 20), ("visa", 10)]

    def test_surplus_cascades(self, start):
        plan = avalanche_allocation(start.accounts, 1000, start.current_day)
        assert plan == [("mastercard", 400), ("visa", 350), ("discover", 250)]

    def test_no_cash_no_plan(self, start):
        assert avalanche_allocation(start.accounts, 0, start.current_day) == []

    def test_pay_avalanche_spends_all_cash(self, start):
        state = pay_avalanche(start)
        assert state.total_money == pytest.approx(0.0)
        assert state.account("mastercard").balance == 240


class TestSimulateOptimal:

    def test_empty_schedule_stops_after_first_round(self):
        result = simulate_optimal_strategy(GameConfig(), [])
        assert not result.completed
        assert result.days == 1
        assert result.total_interest == 0

    def test_completes_with_enough_income(self):
        result = simulate_optimal_strategy(GameConfig(), [500] * 10)
        assert result.completed
        assert result.total_late_fees == 0
        assert result.final_state.total_balance == 0

    def test_rich_start_finishes_on_day_one(self):
        result = simulate_optimal_strategy(GameConfig(starting_cash=2000), [500])
        assert result.completed
        assert result.days == 1
        assert result.final_state.total_money == pytest.approx(950.0)


class TestCompareToOptimal:

    @pytest.mark.parametrize("policy_cls", [MinimumOnlyPolicy, SnowballPolicy])
    def test_optimal_never_worse(self, policy_cls):
        cfg = GameConfig()
        env = DebtAvalancheEnv(config=cfg)
        policy_cls().run_episode(env, seed=0)

        result = compare_to_optimal(env.state, cfg)
        assert result["optimal_completed"]
        assert result["optimal_interest"] <= result["player_interest"]
        assert result["interest_saved_possible"] == pytest.approx(
            result["player_interest"] - result["optimal_interest"]
        )
        assert result["fees_saved_possible"] == 0

    def test_replays_player_income(self):
        state = game_engine.initial_state()
        state = game_engine.advance_to_next_payday(state)
        state = game_engine.complete_earning(state, 0)
        result = compare_to_optimal(state)
        assert result["optimal_days"] == 15
        assert not result["optimal_completed"]

    def test_follows_player_past_last_paycheck(self):
        """A player who only skips through due dates is compared over the same days."""
        state = game_engine.initial_state()
        state = game_engine.advance_to_next_due_date(state)   # day 5, mastercard fee
        state = game_engine.advance_to_next_due_date(state)   # day 15, visa fee
        assert state.current_day == 15

        result = compare_to_optimal(state)
        assert result["optimal_days"] == 15
        assert result["optimal_late_fees"] == 0
        assert result["fees_saved_possible"] == 70
        assert 0 < result["optimal_interest"] <= result["player_interest"]

    def test_horizon_stops_before_next_due_date(self):
        result = simulate_optimal_strategy(GameConfig(), [], horizon_day=10)
        assert result.days == 5
        assert not result.completed
