"""Enumerated values shared by accounts and transactions."""

from __future__ import annotations

from enum import Enum


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"
    INVESTMENT = "investment"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"
    REFUND = "refund"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)

    @property
    def is_outflow(self) -> bool:
        """Expenses and outgoing transfers reduce the account balance."""

        return self in (TransactionType.EXPENSE, TransactionType.TRANSFER)
