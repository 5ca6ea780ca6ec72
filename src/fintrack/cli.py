"""Flask CLI commands for fintrack."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("fintrack-create-user")
    @click.option("--email", required=True)
    @click.option("--name", required=True)
    @click.password_option()
    def fintrack_create_user(email: str, name: str, password: str) -> None:
        """Create a login for the API."""

        from .errors import InvalidRequest
        from .extensions import get_session_factory
        from .services.auth import create_user

        try:
            user = create_user(
                email=email, name=name, password=password, session_factory=get_session_factory(app)
            )
        except InvalidRequest as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Created user #{user.id} ({user.email})")

    @app.cli.command("fintrack-seed")
    @click.option("--email", default="demo@example.com", show_default=True)
    @click.option("--password", default="demo", show_default=True)
    @click.option("--transactions", "count", default=45, show_default=True, type=int)
    def fintrack_seed(email: str, password: str, count: int) -> None:
        """Seed a demo user with two accounts and a ledger."""

        summary = seed_demo_data(app, email=email, password=password, count=count)
        click.echo(
            f"Seeded user #{summary['user_id']} with {summary['accounts']} accounts "
            f"and {summary['transactions']} transactions"
        )


_DEMO_ROWS = (
    ("income", "salary", "Salary", Decimal("2400.00")),
    ("expense", "groceries", "Fresh Market", Decimal("84.20")),
    ("expense", "utilities", "City Power", Decimal("61.75")),
    ("expense", "dining", "Weekend outing", Decimal("42.00")),
    ("refund", "groceries", "Returned item", Decimal("12.99")),
    ("transfer", "savings", "Monthly savings", Decimal("300.00")),
)


def seed_demo_data(app, *, email: str, password: str, count: int) -> dict[str, int]:
    """Create (or reuse) a demo user and record ``count`` transactions through the ledger."""

    from .extensions import get_session_factory
    from .infra.repositories import SQLModelAccountRepository, SQLModelTransactionRepository
    from .services.accounts import NewAccount, create_account, list_accounts
    from .services.auth import create_user, get_user_by_email
    from .services.ledger_service import NewTransaction, create_transaction

    session_factory = get_session_factory(app)
    user = get_user_by_email(email, session_factory) or create_user(
        email=email, name="Demo User", password=password, session_factory=session_factory
    )
    account_repo = SQLModelAccountRepository(session_factory)
    txn_repo = SQLModelTransactionRepository(session_factory)

    accounts = list_accounts(account_repo, user_id=user.id)
    if not accounts:
        accounts = [
            create_account(
                account_repo,
                session_factory,
                user_id=user.id,
                entry=NewAccount(name="Everyday Checking", type="checking", balance=Decimal("1500.00")),
            ),
            create_account(
                account_repo,
                session_factory,
                user_id=user.id,
                entry=NewAccount(name="Rainy Day Savings", type="savings", balance=Decimal("5000.00")),
            ),
        ]

    start = dt.date.today() - dt.timedelta(days=count)
    for idx in range(count):
        txn_type, category, description, amount = _DEMO_ROWS[idx % len(_DEMO_ROWS)]
        create_transaction(
            txn_repo,
            account_repo,
            user_id=user.id,
            entry=NewTransaction(
                account_id=accounts[idx % len(accounts)].id,
                date=start + dt.timedelta(days=idx),
                description=description,
                category=category,
                type=txn_type,
                amount=amount,
            ),
        )
    return {"user_id": user.id, "accounts": len(accounts), "transactions": count}
