"""Pytest configuration and shared fixtures for fintrack tests.

Database fixtures use a throwaway SQLite file per test so repositories,
services and routes never touch a real database.
"""

from __future__ import annotations

import datetime as dt
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from fintrack import create_app
from fintrack.config import TestingConfig
from fintrack.extensions import get_session_factory
from fintrack.infra.database import create_session_factory
from fintrack.infra.repositories import SQLModelAccountRepository, SQLModelTransactionRepository
from fintrack.models import Account, Transaction, User

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory, as used by the repositories."""

    return create_session_factory(db_engine)


@pytest.fixture
def transaction_repo(session_factory) -> SQLModelTransactionRepository:
    return SQLModelTransactionRepository(session_factory)


@pytest.fixture
def account_repo(session_factory) -> SQLModelAccountRepository:
    return SQLModelAccountRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(session_factory):
    """Factory for creating users (password hashes are placeholders)."""

    counter = {"n": 0}

    def _create_user(email: str | None = None, name: str = "Tester") -> User:
        counter["n"] += 1
        with session_factory() as session:
            user = User(
                email=email or f"tester{counter['n']}@example.com",
                name=name,
                password_hash="dummy-hash",
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""

    return user_factory(email="tester@example.com")


@pytest.fixture
def account_factory(account_repo, user):
    """Factory for creating accounts with an opening balance."""

    def _create_account(
        name: str = "Checking",
        balance: str | Decimal = "100.00",
        account_type: str = "checking",
        owner: User | None = None,
    ) -> Account:
        owner = owner or user
        return account_repo.create(
            Account(name=name, type=account_type, balance=Decimal(str(balance)), user_id=owner.id),
            user_id=owner.id,
        )

    return _create_account


@pytest.fixture
def transaction_factory(transaction_repo):
    """Factory recording transactions through the ledger store (balances move)."""

    def _create_transaction(
        account: Account,
        amount: str | Decimal = "10.00",
        txn_type: str = "expense",
        category: str = "groceries",
        description: str | None = None,
        date: dt.date | None = None,
    ) -> Transaction:
        return transaction_repo.insert_transaction(
            account_id=account.id,
            date=date or dt.date(2024, 1, 1),
            description=description,
            category=category,
            type=txn_type,
            amount=Decimal(str(amount)),
        )

    return _create_transaction


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    db_path = tmp_path / "fintrack.db"
    monkeypatch.setenv("FINTRACK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("FINTRACK_DATABASE_URL", f"sqlite:///{db_path}")
    return create_app(config=TestingConfig())


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def app_session_factory(app):
    return get_session_factory(app)


@pytest.fixture()
def app_user(app_session_factory) -> User:
    with app_session_factory() as session:
        user = User(email="api@example.com", name="Api User", password_hash="dummy-hash")
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


@pytest.fixture()
def app_account_factory(app_session_factory, app_user):
    repo = SQLModelAccountRepository(app_session_factory)

    def _create(name: str = "Checking", balance: str = "100.00", owner: User | None = None) -> Account:
        owner = owner or app_user
        return repo.create(
            Account(name=name, type="checking", balance=Decimal(balance), user_id=owner.id),
            user_id=owner.id,
        )

    return _create


def auth_headers(user: User) -> dict[str, str]:
    return {"X-User-Id": str(user.id)}


def get_balance(session_factory, account_id: int) -> Decimal:
    with session_factory() as session:
        account = session.get(Account, account_id)
        assert account is not None
        return Decimal(account.balance)


def count_transactions(session_factory) -> int:
    from sqlalchemy import func
    from sqlmodel import select

    with session_factory() as session:
        return int(session.exec(select(func.count()).select_from(Transaction)).one())
