"""Value objects shared by the ledger store, services and client."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..models.enums import TransactionType

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Amounts and balances live in Numeric(14, 2) columns: 12 integer digits, 2 decimals.
MONEY_LIMIT = Decimal("1e12")
_CENT = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class LedgerFilters:
    """Optional constraints on a ledger query; ``None`` means unconstrained."""

    account_id: Optional[int] = None
    category: Optional[str] = None
    type: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.account_id is None and not self.category and not self.type

    def with_changes(self, **changes: Any) -> LedgerFilters:
        return replace(self, **changes)

    def to_params(self) -> dict[str, str]:
        """Query-string parameters for the non-empty filters."""

        params: dict[str, str] = {}
        if self.account_id is not None:
            params["accountId"] = str(self.account_id)
        if self.category:
            params["category"] = self.category
        if self.type:
            params["type"] = self.type
        return params


@dataclass(frozen=True, slots=True)
class PageRequest:
    offset: int = 0
    limit: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True, slots=True)
class Pagination:
    """Offset/limit window plus the size of the filtered set."""

    offset: int
    limit: int
    total: int

    @property
    def has_next(self) -> bool:
        return self.offset + self.limit < self.total

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "limit": self.limit,
            "total": self.total,
            "hasNext": self.has_next,
        }

    @classmethod
    def from_api_dict(cls, data: Mapping[str, Any]) -> Pagination:
        return cls(
            offset=int(data.get("offset", 0)),
            limit=int(data.get("limit", DEFAULT_PAGE_SIZE)),
            total=int(data.get("total", 0)),
        )


def money_problem(value: Decimal, label: str) -> Optional[str]:
    """Return why ``value`` cannot be stored as money, or None when it can."""

    if not value.is_finite():
        return f"Enter a valid number for the {label}."
    if abs(value) >= MONEY_LIMIT:
        return f"{label.capitalize()} must be less than 1,000,000,000,000."
    if value != value.quantize(_CENT):
        return f"{label.capitalize()} can have at most two decimal places."
    return None


def signed_delta(txn_type: TransactionType | str, amount: Decimal) -> Decimal:
    """Return the balance delta, which is also the amount that gets stored.

    A positive amount on an outflow type is negated. A negative amount is
    already signed and is used unchanged whatever the type.
    """

    kind = TransactionType(txn_type)
    if amount > 0 and kind.is_outflow:
        return -amount
    return amount


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "LedgerFilters",
    "MAX_PAGE_SIZE",
    "MONEY_LIMIT",
    "PageRequest",
    "Pagination",
    "money_problem",
    "signed_delta",
]
