"""Repository protocol definitions for domain layer."""

from .account import AccountRepository
from .transaction import TransactionRepository

__all__ = [
    "AccountRepository",
    "TransactionRepository",
]
