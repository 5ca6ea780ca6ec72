"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .account import Account


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Transaction(SQLModel, table=True):
    """A single ledger entry recorded against an account."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    date: dt.date = Field(nullable=False, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    category: str = Field(nullable=False, index=True, max_length=64)
    type: str = Field(nullable=False, index=True, max_length=16)
    amount: Decimal = Field(
        max_digits=14,
        decimal_places=2,
        description="Signed balance delta: negative for outflow, positive for inflow",
    )
    created_at: dt.datetime = Field(default_factory=_utcnow, nullable=False)

    account: "Account" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Account", back_populates="transactions"),
    )

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "accountId": self.account_id,
            "date": self.date.isoformat(),
            "description": self.description,
            "category": self.category,
            "type": self.type,
            "amount": f"{Decimal(self.amount):.2f}",
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
