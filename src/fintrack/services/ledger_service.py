"""Ledger query and creation services."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..domain.ledger import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    LedgerFilters,
    PageRequest,
    Pagination,
    money_problem,
)
from ..domain.repositories import AccountRepository, TransactionRepository
from ..errors import InvalidRequest, NotFound
from ..logging_config import get_logger
from ..models.enums import TransactionType
from ..models.transaction import Transaction

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LedgerPage:
    """One page of transactions plus pagination metadata."""

    transactions: Sequence[Transaction]
    pagination: Pagination

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "transactions": [txn.to_api_dict() for txn in self.transactions],
            "pagination": self.pagination.to_api_dict(),
        }


@dataclass(slots=True)
class NewTransaction:
    """Typed creation payload; amount is as submitted, not yet signed."""

    account_id: Optional[int]
    date: Optional[dt.date]
    category: str
    type: str
    amount: Optional[Decimal]
    description: Optional[str] = None


def normalize_page(
    page: PageRequest | None,
    *,
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> PageRequest:
    """Validate offset/limit and cap the limit at ``max_limit``."""

    if page is None:
        return PageRequest(offset=0, limit=default_limit)

    errors: dict[str, list[str]] = {}
    if page.offset < 0:
        errors["offset"] = ["Offset must be zero or greater."]
    if page.limit <= 0:
        errors["limit"] = ["Limit must be greater than zero."]
    if errors:
        raise InvalidRequest("Invalid pagination parameters.", errors=errors)
    return PageRequest(offset=page.offset, limit=min(page.limit, max_limit))


def query_transactions(
    repo: TransactionRepository,
    *,
    user_id: int,
    filters: LedgerFilters | None = None,
    page: PageRequest | None = None,
    max_limit: int = MAX_PAGE_SIZE,
) -> LedgerPage:
    """Return one page of the caller's ledger matching ``filters``."""

    filters = filters or LedgerFilters()
    if filters.type and filters.type not in TransactionType.values():
        raise InvalidRequest(
            "Invalid transaction type.",
            errors={"type": [_type_choices_message()]},
        )
    window = normalize_page(page, max_limit=max_limit)

    rows, total = repo.query(filters, offset=window.offset, limit=window.limit, user_id=user_id)
    logger.debug(
        "Ledger page served",
        extra={
            "user_id": user_id,
            "offset": window.offset,
            "limit": window.limit,
            "total": total,
            "returned": len(rows),
        },
    )
    return LedgerPage(
        transactions=rows,
        pagination=Pagination(offset=window.offset, limit=window.limit, total=total),
    )


def create_transaction(
    transaction_repo: TransactionRepository,
    account_repo: AccountRepository,
    *,
    user_id: int,
    entry: NewTransaction,
) -> Transaction:
    """Validate ``entry`` and record it, moving the owning account's balance.

    Raises ``InvalidRequest`` for bad input and ``NotFound`` when the account
    is missing or owned by someone else.
    """

    errors: dict[str, list[str]] = {}
    if entry.account_id is None:
        errors["accountId"] = ["Account is required."]
    if entry.date is None:
        errors["date"] = ["Date is required."]
    if not (entry.category or "").strip():
        errors["category"] = ["Category is required."]
    if entry.type not in TransactionType.values():
        errors["type"] = [_type_choices_message()]
    if entry.amount is None:
        errors["amount"] = ["Enter a valid number for the amount."]
    elif problem := money_problem(entry.amount, "amount"):
        errors["amount"] = [problem]
    elif entry.amount == 0:
        errors["amount"] = ["Amount cannot be zero."]
    if errors:
        raise InvalidRequest("Transaction could not be created.", errors=errors)

    if account_repo.get_owned(entry.account_id, user_id=user_id) is None:
        logger.info(
            "Rejected transaction for inaccessible account",
            extra={"user_id": user_id, "account_id": entry.account_id},
        )
        raise NotFound("Account not found")

    description = (entry.description or "").strip() or None
    return transaction_repo.insert_transaction(
        account_id=entry.account_id,
        date=entry.date,
        description=description,
        category=entry.category.strip(),
        type=entry.type,
        amount=entry.amount,
        user_id=user_id,
    )


def get_transaction(repo: TransactionRepository, *, user_id: int, transaction_id: int) -> Transaction:
    """Return one of the caller's transactions; other users' rows look missing."""

    transaction = repo.get_by_id(transaction_id, user_id=user_id)
    if transaction is None:
        raise NotFound("Transaction not found")
    return transaction


def _type_choices_message() -> str:
    return "Type must be one of: " + ", ".join(TransactionType.values()) + "."


__all__ = [
    "LedgerPage",
    "NewTransaction",
    "create_transaction",
    "get_transaction",
    "normalize_page",
    "query_transactions",
]
