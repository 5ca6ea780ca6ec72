"""SQLModel table exports."""

from .account import Account
from .enums import AccountType, TransactionType
from .transaction import Transaction
from .user import User

__all__ = [
    "Account",
    "AccountType",
    "Transaction",
    "TransactionType",
    "User",
]
