from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from minibank.core.db import DbModel


class Transaction(DbModel):
    """Posted transaction. Amounts are signed: negative for debits."""

    id: int  # insertion order, breaks ties between equal dates
    txn_date: date
    description: str
    amount: Decimal


class TransactionView(BaseModel):
    """Transaction (API representation)."""

    id: int = Field(..., description="Transaction ID")
    date: str = Field(..., description="Transaction date, ISO 8601")
    description: str = Field(..., description="Transaction description")
    amount: float = Field(..., description="Signed amount, negative for debits")

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionView":
        return cls(
            id=transaction.id,
            date=transaction.txn_date.isoformat(),
            description=transaction.description,
            amount=float(transaction.amount),
        )


class BalanceView(BaseModel):
    """Account balance (API representation)."""

    balance: float = Field(..., description="Current balance")


class TransactionListView(BaseModel):
    """Recent transactions, newest first."""

    transactions: list[TransactionView] = Field(..., description="Transactions, newest first")
