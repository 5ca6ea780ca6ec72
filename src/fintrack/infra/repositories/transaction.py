"""SQLModel implementation of the ledger store."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from ...domain.ledger import MONEY_LIMIT, LedgerFilters, money_problem, signed_delta
from ...errors import Conflict, InvalidRequest, NotFound
from ...logging_config import get_logger
from ...models.account import Account
from ...models.enums import TransactionType
from ...models.transaction import Transaction
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .join(Account, Transaction.account_id == Account.id)  # type: ignore[arg-type]
                .where(Transaction.id == transaction_id)
                .where(Account.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def query(
        self,
        filters: LedgerFilters,
        *,
        offset: int,
        limit: int,
        user_id: int,
    ) -> tuple[list[Transaction], int]:
        """Return paginated transactions and total count matching ``filters``.

        Rows are restricted to accounts owned by ``user_id`` and ordered by
        ascending id, which is creation order and stable across pages.
        """

        clauses = [Account.user_id == user_id]
        if filters.account_id is not None:
            clauses.append(Transaction.account_id == filters.account_id)
        if filters.category:
            clauses.append(Transaction.category == filters.category)
        if filters.type:
            clauses.append(Transaction.type == filters.type)

        with self.session_factory() as session:
            count_stmt = (
                select(func.count())
                .select_from(Transaction)
                .join(Account, Transaction.account_id == Account.id)  # type: ignore[arg-type]
                .where(*clauses)
            )
            total = session.exec(count_stmt).one()

            data_stmt = (
                select(Transaction)
                .join(Account, Transaction.account_id == Account.id)  # type: ignore[arg-type]
                .where(*clauses)
                .order_by(Transaction.id)  # type: ignore[arg-type]
                .offset(offset)
                .limit(limit)
            )
            rows = list(session.exec(data_stmt).all())
            session.expunge_all()
            return rows, int(total or 0)

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
        """Insert a transaction and move the account balance in one database transaction.

        The stored amount is the signed delta (see ``signed_delta``). When
        ``user_id`` is given the account must belong to that user; a foreign
        account is reported exactly like a missing one.
        """

        _require_fields(account_id=account_id, date=date, category=category, type=type, amount=amount)
        delta = signed_delta(type, amount)

        try:
            with self.session_factory() as session:
                owner_id = session.exec(
                    select(Account.user_id).where(Account.id == account_id).with_for_update()
                ).first()
                if owner_id is None or (user_id is not None and owner_id != user_id):
                    raise NotFound("Account not found")

                transaction = Transaction(
                    account_id=account_id,
                    date=date,
                    description=description,
                    category=category,
                    type=TransactionType(type).value,
                    amount=delta,
                )
                session.add(transaction)

                # In-SQL increment so concurrent writers cannot lose an update.
                result = session.execute(
                    update(Account)
                    .where(Account.id == account_id)  # type: ignore[arg-type]
                    .values(
                        balance=Account.balance + delta,
                        updated_at=datetime.now(timezone.utc),
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise Conflict()

                new_balance = session.exec(
                    select(Account.balance).where(Account.id == account_id)
                ).one()
                if abs(Decimal(new_balance)) >= MONEY_LIMIT:
                    raise InvalidRequest(
                        "Transaction would take the account balance out of range.",
                        errors={"amount": ["Account balance must stay below 1,000,000,000,000."]},
                    )

                session.flush()
                session.refresh(transaction)
                session.expunge(transaction)
        except SQLAlchemyError as exc:
            logger.exception(
                "Ledger insert rolled back",
                extra={"account_id": account_id, "txn_type": type},
            )
            raise Conflict() from exc

        logger.info(
            "Transaction recorded",
            extra={"transaction_id": transaction.id, "account_id": account_id, "delta": str(delta)},
        )
        return transaction


def _require_fields(**fields: object) -> None:
    errors: dict[str, list[str]] = {}
    for name, value in fields.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.setdefault(name, []).append(f"{name} is required.")
    amount_value = fields.get("amount")
    if isinstance(amount_value, Decimal) and (problem := money_problem(amount_value, "amount")):
        errors.setdefault("amount", []).append(problem)
    type_value = fields.get("type")
    if isinstance(type_value, str) and type_value.strip() and type_value not in TransactionType.values():
        errors.setdefault("type", []).append(
            "Type must be one of: " + ", ".join(TransactionType.values()) + "."
        )
    if errors:
        raise InvalidRequest("Transaction is missing required fields.", errors=errors)
