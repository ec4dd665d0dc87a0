"""Unit tests for the 30-day game calendar."""

import pytest

from src.engine.clock import day_of_month, days_until, month_index, next_due_date, next_payday
from src.engine.financial_model import Account


def _account(acct_id: str, due: int, balance: float = 100.0) -> Account:
    return Account(acct_id, acct_id, balance=balance, limit=1000, interest_rate=20,
                   minimum_payment=25, due_date=due)


@pytest.fixture
def accounts() -> list[Account]:
    return [_account("visa", 15), _account("mastercard", 5), _account("discover", 25)]


class TestDayMapping:

    @pytest.mark.parametrize("day,expected", [(1, 1), (15, 15), (30, 30), (31, 1), (45, 15), (60, 30)])
    def test_day_of_month(self, day, expected):
        assert day_of_month(day) == expected

    @pytest.mark.parametrize("day,expected", [(1, 0), (30, 0), (31, 1), (60, 1), (61, 2)])
    def test_month_index(self, day, expected):
        assert month_index(day) == expected

    def test_days_until_rolls_over_on_same_day(self):
        assert days_until(5, 5) == 30
        assert days_until(5, 4) == 1
        assert days_until(1, 30) == 1


class TestNextPayday:

    @pytest.mark.parametrize("from_day,expected", [
        (1, 15),
        (14, 15),
        (15, 31),   # 15th already reached → 1st of next month
        (29, 31),
        (30, 31),
        (31, 45),
        (45, 61),
    ])
    def test_next_payday(self, from_day, expected):
        assert next_payday(from_day) == expected

    def test_strictly_after(self):
        for day in range(1, 120):
            assert next_payday(day) > day


class TestNextDueDate:

    def test_earliest_due_from_start(self, accounts):
        assert next_due_date(accounts, 1) == 5

    def test_due_today_is_not_next(self, accounts):
        assert next_due_date(accounts, 5) == 15

    def test_rolls_into_next_month(self, accounts):
        # After the 25th only next month's 5th remains
        assert next_due_date(accounts, 25) == 35

    def test_paid_off_accounts_ignored(self):
        accts = [_account("a", 5, balance=0.0), _account("b", 20)]
        assert next_due_date(accts, 1) == 20

    def test_nothing_owed(self):
        accts = [_account("a", 5, balance=0.0)]
        assert next_due_date(accts, 12) == 42
