"""Client-side copies of API records."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..domain.ledger import Pagination


@dataclass(frozen=True, slots=True)
class TransactionView:
    id: int
    account_id: int
    date: dt.date
    category: str
    type: str
    amount: Decimal
    description: Optional[str] = None

    @classmethod
    def from_api_dict(cls, data: Mapping[str, Any]) -> TransactionView:
        return cls(
            id=int(data["id"]),
            account_id=int(data["accountId"]),
            date=dt.date.fromisoformat(str(data["date"])),
            category=str(data.get("category") or ""),
            type=str(data.get("type") or ""),
            amount=Decimal(str(data["amount"])),
            description=data.get("description") or None,
        )


@dataclass(frozen=True, slots=True)
class AccountView:
    id: int
    name: str
    type: str
    balance: Decimal
    currency: str = "USD"
    is_active: bool = True

    @classmethod
    def from_api_dict(cls, data: Mapping[str, Any]) -> AccountView:
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            type=str(data.get("type") or ""),
            balance=Decimal(str(data.get("balance", "0"))),
            currency=str(data.get("currency") or "USD"),
            is_active=bool(data.get("isActive", True)),
        )


@dataclass(frozen=True, slots=True)
class TransactionPage:
    transactions: Sequence[TransactionView]
    pagination: Pagination

    @classmethod
    def from_api_dict(cls, data: Mapping[str, Any]) -> TransactionPage:
        return cls(
            transactions=[TransactionView.from_api_dict(row) for row in data.get("transactions", [])],
            pagination=Pagination.from_api_dict(data.get("pagination") or {}),
        )
