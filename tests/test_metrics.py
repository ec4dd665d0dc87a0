"""Tests for scoring, strategy analysis and payment projections."""

from dataclasses import replace

import pytest

from src.engine import game_engine
from src.engine.financial_model import Account
from src.evaluation.metrics import (
    MAX_PROJECTION_DAYS,
    analyze_player_strategy,
    calculate_efficiency_score,
    payment_advice,
    score_grade,
    simulate_payment_outcome,
)
from src.utils.config import GameConfig


@pytest.fixture
def rich_state():
    return game_engine.initial_state(GameConfig(starting_cash=1000))


class TestEfficiencyScore:

    def test_fresh_game(self):
        state = game_engine.initial_state()
        assert calculate_efficiency_score(state) == pytest.approx(999.5)

    def test_highest_rate_paid_first_bonus(self, rich_state):
        state = game_engine.pay(rich_state, "mastercard", 400)
        assert calculate_efficiency_score(state) == pytest.approx(1049.5)

    def test_lowest_rate_paid_first_no_bonus(self, rich_state):
        state = game_engine.pay(rich_state, "discover", 300)
        assert calculate_efficiency_score(state) == pytest.approx(999.5)

    def test_penalties(self, rich_state):
        state = replace(rich_state, total_interest_paid=10, total_late_fees=35, current_day=21)
        assert calculate_efficiency_score(state) == pytest.approx(1000 - 20 - 175 - 10.5)

    def test_floored_at_zero(self, rich_state):
        state = replace(rich_state, total_late_fees=1000)
        assert calculate_efficiency_score(state) == 0.0


class TestScoreGrade:

    @pytest.mark.parametrize("score,grade", [
        (1049.5, "A+"), (900, "A+"), (899.9, "A"), (800, "A"),
        (750, "B"), (600, "C"), (500, "D"), (499.9, "F"), (0, "F"),
    ])
    def test_thresholds(self, score, grade):
        assert score_grade(score) == grade


class TestAnalyzePlayerStrategy:

    def test_pure_avalanche(self, rich_state):
        state = game_engine.pay(rich_state, "mastercard", 400)
        analysis = analyze_player_strategy(state)
        assert analysis.avalanche_ratio == pytest.approx(1.0)
        assert analysis.total_payments == 400
        assert analysis.mistakes == []
        assert analysis.months == 1

    def test_lowest_rate_focus(self, rich_state):
        state = game_engine.pay(rich_state, "discover", 150)
        analysis = analyze_player_strategy(state)
        assert analysis.avalanche_ratio == 0.0
        assert analysis.mistakes == [
            "Should have focused more on MasterCard (23% APR) - the highest rate card",
            "Paid more to Discover Card (16% APR) than MasterCard (23% APR)",
        ]

    def test_late_fees_reported(self):
        state = replace(game_engine.initial_state(), total_late_fees=70)
        analysis = analyze_player_strategy(state)
        assert "Missed 2 minimum payments resulting in $70 in late fees" in analysis.mistakes

    def test_payment_counts(self, rich_state):
        state = game_engine.pay(rich_state, "visa", 25)
        state = game_engine.pay(state, "visa", 25)
        state = game_engine.pay(state, "mastercard", 100)
        analysis = analyze_player_strategy(state)
        assert analysis.payment_counts == {"visa": 2, "mastercard": 1}
        assert analysis.payments_by_account["visa"] == 50


class TestPaymentAdvice:

    def test_everything_paid(self, rich_state):
        accounts = [replace(a, balance=0.0) for a in rich_state.accounts]
        assert payment_advice(accounts, 0).startswith("Congratulations!")

    def test_short_of_minimums(self, rich_state):
        assert payment_advice(rich_state.accounts, 50).startswith(
            "Use the Debt Avalanche Method: Pay minimums first"
        )

    def test_points_at_highest_rate(self, rich_state):
        advice = payment_advice(rich_state.accounts, 200)
        assert "toward the MasterCard (23% interest)" in advice


class TestPaymentOutcome:

    def test_full_payment(self, rich_state):
        visa = rich_state.account("visa")
        outcome = simulate_payment_outcome(visa, 350, 14)
        assert outcome.new_balance == 0
        assert outcome.months_to_payoff == 0
        assert not outcome.capped
        assert outcome.interest_saved == pytest.approx(350 * 0.19 / 365 * 14)

    def test_partial_payment_pays_off_eventually(self, rich_state):
        visa = rich_state.account("visa")
        outcome = simulate_payment_outcome(visa, 100, 14)
        assert outcome.new_balance == 250
        assert 0 < outcome.months_to_payoff < 24
        assert not outcome.capped

    def test_never_paid_off_is_capped(self):
        acct = Account("x", "X", balance=500, limit=1000, interest_rate=20,
                       minimum_payment=0, due_date=10)
        outcome = simulate_payment_outcome(acct, 0, 10)
        assert outcome.capped
        assert outcome.months_to_payoff == -(-MAX_PROJECTION_DAYS // 30)
