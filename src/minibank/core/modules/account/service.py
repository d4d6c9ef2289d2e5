from decimal import Decimal

import structlog

from minibank.core.core import Service
from minibank.core.modules.account.models import Transaction

logger = structlog.get_logger(__name__)

MAX_TRANSACTIONS = 20

CREATE_ACCOUNTS_TABLE = """
CREATE TABLE IF NOT EXISTS accounts (
    id SERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL UNIQUE REFERENCES users (id),
    balance NUMERIC(14, 2) NOT NULL DEFAULT 0
)
"""
CREATE_TRANSACTIONS_TABLE = """
CREATE TABLE IF NOT EXISTS transactions (
    id SERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users (id),
    txn_date DATE NOT NULL,
    description TEXT NOT NULL,
    amount NUMERIC(14, 2) NOT NULL
)
"""
CREATE_TRANSACTIONS_INDEX = (
    "CREATE INDEX IF NOT EXISTS transactions_user_date_idx ON transactions (user_id, txn_date DESC, id DESC)"
)
SELECT_BALANCE = "SELECT balance FROM accounts WHERE user_id = $1"
SELECT_TRANSACTIONS = """
SELECT id, txn_date, description, amount
FROM transactions
WHERE user_id = $1
ORDER BY txn_date DESC, id DESC
LIMIT $2
"""


class AccountService(Service):
    """Read-only account views. Callers pass the id of the authenticated user only."""

    async def on_start(self) -> None:
        """Create the account tables if missing."""
        await self.database.execute(CREATE_ACCOUNTS_TABLE)
        await self.database.execute(CREATE_TRANSACTIONS_TABLE)
        await self.database.execute(CREATE_TRANSACTIONS_INDEX)

    async def get_balance(self, user_id: int) -> Decimal:
        """Balance of the user's account. A user without an account row has a zero balance."""
        balance = await self.database.fetchval(SELECT_BALANCE, user_id)
        if balance is None:
            logger.debug("account_missing", user_id=user_id)
            return Decimal(0)
        return Decimal(balance)

    async def get_transactions(self, user_id: int, limit: int = MAX_TRANSACTIONS) -> list[Transaction]:
        """Most recent transactions, newest first, ties broken by newest insertion."""
        limit = max(1, min(limit, MAX_TRANSACTIONS))
        rows = await self.database.fetch(SELECT_TRANSACTIONS, user_id, limit)
        return Transaction.list_rows(rows)
