"""Unit tests for the financial model functions.

Tests verify interest accrual, rounding, late fee eligibility, and payment
application against hand-calculated expected values.
"""

from dataclasses import replace

import pytest

from src.engine.financial_model import (
    LATE_FEE,
    Account,
    accrue_interest,
    apply_late_fee,
    apply_payment,
    clamp_balance,
    compute_interest,
    compute_overall_utilization,
    compute_weighted_avg_rate,
    current_balance,
    elapsed_days,
    late_fee_due,
    roll_month,
    round_currency,
)


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def mastercard() -> Account:
    """$400 at 23% APR, $20 minimum, due on the 5th."""
    return Account("mastercard", "MasterCard", balance=400.0, limit=2000.0,
                   interest_rate=23.0, minimum_payment=20.0, due_date=5)


@pytest.fixture
def discover() -> Account:
    """$300 at 16% APR, $15 minimum, due on the 25th."""
    return Account("discover", "Discover Card", balance=300.0, limit=1500.0,
                   interest_rate=16.0, minimum_payment=15.0, due_date=25)


@pytest.fixture
def paid_off() -> Account:
    return Account("done", "Done Card", balance=0.0, limit=1000.0,
                   interest_rate=20.0, minimum_payment=25.0, due_date=10)


# ── Rounding ──────────────────────────────────────────────────────────────

class TestRounding:

    @pytest.mark.parametrize("amount,expected", [(2.5, 3.0), (2.49, 2.0), (0.5, 1.0), (1.008, 1.0), (0.0, 0.0)])
    def test_round_half_up(self, amount, expected):
        assert round_currency(amount) == expected

    def test_clamp_negative(self):
        assert clamp_balance(-5.0) == 0.0

    def test_clamp_sub_unit_residue(self):
        assert clamp_balance(0.005) == 0.0
        assert clamp_balance(0.3) == 0.0
        assert clamp_balance(0.49) == 0.0
        assert clamp_balance(0.5) == 0.5


# ── Interest Accrual ──────────────────────────────────────────────────────

class TestInterestAccrual:

    def test_four_days(self, mastercard):
        """400 × 0.23 / 365 × 4 = 1.008 → 1."""
        assert compute_interest(mastercard, 4) == 1.0

    def test_fourteen_days(self, discover):
        """300 × 0.16 / 365 × 14 = 1.84 → 2."""
        assert compute_interest(discover, 14) == 2.0

    def test_zero_days(self, mastercard):
        assert compute_interest(mastercard, 0) == 0.0

    def test_zero_balance(self, paid_off):
        assert compute_interest(paid_off, 30) == 0.0

    def test_elapsed_anchored_at_day_one(self, mastercard):
        assert elapsed_days(mastercard, 1) == 0
        assert elapsed_days(mastercard, 5) == 4

    def test_elapsed_since_last_event(self, mastercard):
        acct = replace(mastercard, last_payment_date=10)
        assert elapsed_days(acct, 15) == 5

    def test_accrue_posts_and_reanchors(self, mastercard):
        updated, interest = accrue_interest(mastercard, 5)
        assert interest == 1.0
        assert updated.balance == 401.0
        assert updated.last_payment_date == 5
        # Input account is untouched
        assert mastercard.balance == 400.0
        assert mastercard.last_payment_date is None

    def test_accrue_twice_same_day_is_noop(self, mastercard):
        once, _ = accrue_interest(mastercard, 20)
        twice, interest = accrue_interest(once, 20)
        assert interest == 0.0
        assert twice.balance == once.balance

    def test_current_balance_includes_unposted_interest(self, mastercard):
        assert current_balance(mastercard, 5) == 401.0
        assert mastercard.balance == 400.0


# ── Late Fees ────────────────────────────────────────────────────────────

class TestLateFees:

    def test_fee_due_when_no_minimum_paid(self, mastercard):
        assert late_fee_due(mastercard, 0) is True

    def test_no_fee_after_minimum_this_month(self, mastercard):
        acct = replace(mastercard, last_minimum_payment_month=0)
        assert late_fee_due(acct, 0) is False
        # Last month's minimum does not cover this month
        assert late_fee_due(acct, 1) is True

    def test_no_fee_on_zero_balance(self, paid_off):
        assert late_fee_due(paid_off, 0) is False

    def test_one_fee_per_month(self, mastercard):
        charged, fee = apply_late_fee(mastercard, 0)
        assert fee == LATE_FEE
        again, fee2 = apply_late_fee(charged, 0)
        assert fee2 == 0.0
        assert again.balance == charged.balance

    def test_fee_is_not_a_payment(self, mastercard):
        charged, _ = apply_late_fee(mastercard, 0)
        assert charged.balance == 435.0
        assert charged.last_minimum_payment_month is None
        assert charged.last_late_fee_month == 0


# ── Payments ─────────────────────────────────────────────────────────────

class TestApplyPayment:

    def test_interest_before_payment(self, mastercard):
        updated, interest = apply_payment(mastercard, 100.0, day=5)
        assert interest == 1.0
        assert updated.balance == pytest.approx(301.0)
        assert updated.last_payment_date == 5

    def test_exact_payoff(self, discover):
        updated, _ = apply_payment(discover, 300.0, day=1)
        assert updated.balance == 0.0

    def test_overpayment_clamps_to_zero(self, discover):
        updated, _ = apply_payment(discover, 300.005, day=1)
        assert updated.balance == 0.0

    def test_minimum_met_sets_month(self, discover):
        updated, _ = apply_payment(discover, 15.0, day=1)
        assert updated.last_minimum_payment_month == 0
        assert updated.total_payments_this_month == 15.0

    def test_partial_payments_accumulate(self, mastercard):
        first, _ = apply_payment(mastercard, 10.0, day=2)
        assert first.last_minimum_payment_month is None
        second, _ = apply_payment(first, 10.0, day=3)
        assert second.last_minimum_payment_month == 0
        assert second.total_payments_this_month == pytest.approx(20.0)

    def test_accumulator_resets_next_month(self, mastercard):
        first, _ = apply_payment(mastercard, 10.0, day=29)
        second, _ = apply_payment(first, 10.0, day=31)
        assert second.current_month == 1
        assert second.total_payments_this_month == pytest.approx(10.0)
        assert second.last_minimum_payment_month is None

    def test_roll_month_same_month_untouched(self, mastercard):
        acct = replace(mastercard, current_month=2, total_payments_this_month=7.0)
        assert roll_month(acct, 2) is acct
        assert roll_month(acct, 3).total_payments_this_month == 0.0


# ── Utilization ───────────────────────────────────────────────────────────

class TestUtilization:

    def test_single_account(self, mastercard):
        assert mastercard.utilization == pytest.approx(0.2)

    def test_overall_utilization(self, mastercard, discover):
        util = compute_overall_utilization([mastercard, discover])
        assert util == pytest.approx(700 / 3500)

    def test_weighted_avg_rate(self, mastercard, discover):
        avg = compute_weighted_avg_rate([mastercard, discover])
        assert avg == pytest.approx((23 * 400 + 16 * 300) / 700)

    def test_weighted_avg_rate_all_paid(self, paid_off):
        assert compute_weighted_avg_rate([paid_off]) == 0.0
