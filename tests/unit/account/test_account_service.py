"""Tests for balance and transaction history lookups."""

from datetime import date
from decimal import Decimal

import pytest

from minibank.core.modules.account.service import SELECT_BALANCE, SELECT_TRANSACTIONS
from minibank.errors import StoreError


@pytest.fixture
def accounts(core):
    return core.services.account


class TestGetBalance:
    async def test_returns_stored_balance(self, accounts, fake_db):
        fake_db.balances[1] = Decimal("125.50")

        assert await accounts.get_balance(1) == Decimal("125.50")

    async def test_missing_account_is_zero(self, accounts):
        assert await accounts.get_balance(1) == Decimal(0)

    async def test_query_is_scoped_by_user_id_parameter(self, accounts, fake_db):
        await accounts.get_balance(42)

        assert (SELECT_BALANCE, (42,)) in fake_db.calls
        assert "user_id = $1" in SELECT_BALANCE

    async def test_store_error_propagates(self, accounts, fake_db):
        fake_db.error = StoreError("Database query failed")

        with pytest.raises(StoreError):
            await accounts.get_balance(1)


class TestGetTransactions:
    async def test_newest_first_with_insertion_id_tiebreak(self, accounts, fake_db):
        older = fake_db.add_transaction(1, date(2024, 1, 1), "Salary", "1000.00")
        first_same_day = fake_db.add_transaction(1, date(2024, 1, 2), "Coffee", "-3.50")
        second_same_day = fake_db.add_transaction(1, date(2024, 1, 2), "Lunch", "-12.00")

        transactions = await accounts.get_transactions(1)

        assert [t.id for t in transactions] == [second_same_day, first_same_day, older]
        assert transactions[0].amount == Decimal("-12.00")

    async def test_only_own_transactions(self, accounts, fake_db):
        fake_db.add_transaction(1, date(2024, 1, 1), "Mine", "10.00")
        fake_db.add_transaction(2, date(2024, 1, 1), "Not mine", "99.00")

        transactions = await accounts.get_transactions(1)

        assert [t.description for t in transactions] == ["Mine"]

    async def test_capped_at_twenty(self, accounts, fake_db):
        for day in range(1, 26):
            fake_db.add_transaction(1, date(2024, 1, day), f"Txn {day}", "1.00")

        transactions = await accounts.get_transactions(1)

        assert len(transactions) == 20
        assert transactions[0].txn_date == date(2024, 1, 25)

    @pytest.mark.parametrize(("requested", "expected"), [(500, 20), (0, 1), (5, 5)])
    async def test_limit_is_clamped(self, accounts, fake_db, requested, expected):
        await accounts.get_transactions(1, limit=requested)

        assert fake_db.calls[-1] == (SELECT_TRANSACTIONS, (1, expected))

    def test_query_orders_by_date_then_id(self):
        """FakeDatabase sorts rows on its own, so ordering against PostgreSQL rests on this SQL."""
        assert "ORDER BY txn_date DESC, id DESC" in SELECT_TRANSACTIONS
        assert "WHERE user_id = $1" in SELECT_TRANSACTIONS
        assert "ORDER BY txn_date DESC, id DESC" in SELECT_TRANSACTIONS
        assert "LIMIT $2" in SELECT_TRANSACTIONS
