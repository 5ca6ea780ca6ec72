"""Transaction repository protocol (the ledger store boundary)."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol

from ...models.transaction import Transaction
from ..ledger import LedgerFilters


class TransactionRepository(Protocol):
    """Persistence operations required by the ledger services."""

    def query(
        self,
        filters: LedgerFilters,
        *,
        offset: int,
        limit: int,
        user_id: int,
    ) -> tuple[list[Transaction], int]:
        """Return one page of the caller's transactions and the filtered total."""
        ...

    def insert_transaction(
        self,
        *,
        account_id: int,
        date: date,
        description: Optional[str],
        category: str,
        type: str,
        amount: Decimal,
        user_id: Optional[int] = None,
    ) -> Transaction:
        """Insert a transaction and apply its balance delta as one unit."""
        ...

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve one of the caller's transactions by ID."""
        ...
