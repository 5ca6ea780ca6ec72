"""Concrete repository implementations using SQLModel."""

from .account import SQLModelAccountRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelTransactionRepository",
]
