"""Account creation and listing."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..domain.ledger import money_problem
from ..domain.repositories import AccountRepository
from ..errors import InvalidRequest, NotFound
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.account import Account
from ..models.enums import AccountType
from ..models.user import User

logger = get_logger(__name__)

NAME_AND_TYPE_REQUIRED = "Name and type are required"
INVALID_TYPE = "Invalid account type. Must be: checking, savings, credit, or investment"
INVALID_CURRENCY = "Currency must be a three-letter ISO code"
BALANCE_NOT_A_NUMBER = "Balance must be a number"


@dataclass(slots=True)
class NewAccount:
    """Typed creation payload; ``balance`` is the opening balance."""

    name: str
    type: str
    currency: str = "USD"
    balance: Decimal = Decimal("0.00")


def list_accounts(repo: AccountRepository, *, user_id: int) -> list[Account]:
    """Return the caller's accounts, oldest first."""

    return repo.list_for_user(user_id=user_id)


def get_account(repo: AccountRepository, *, user_id: int, account_id: int) -> Account:
    account = repo.get_owned(account_id, user_id=user_id)
    if account is None:
        raise NotFound("Account not found")
    return account


def create_account(
    repo: AccountRepository,
    session_factory: SessionFactory,
    *,
    user_id: int,
    entry: NewAccount,
) -> Account:
    """Create an account for ``user_id`` with ``entry.balance`` as its opening balance.

    The opening balance is the only balance write outside the ledger.
    """

    if not entry.name.strip() or not entry.type:
        raise InvalidRequest(NAME_AND_TYPE_REQUIRED)
    if entry.type not in AccountType.values():
        raise InvalidRequest(INVALID_TYPE)
    if len(entry.currency) != 3 or not entry.currency.isalpha():
        raise InvalidRequest(INVALID_CURRENCY)
    if problem := money_problem(entry.balance, "balance"):
        raise InvalidRequest(problem, errors={"balance": [problem]})

    with session_factory() as session:
        if session.get(User, user_id) is None:
            raise NotFound("User not found")

    account = repo.create(
        Account(
            name=entry.name.strip(),
            type=entry.type,
            balance=entry.balance.quantize(Decimal("0.01")),
            currency=entry.currency.upper(),
            is_active=True,
            user_id=user_id,
        ),
        user_id=user_id,
    )
    logger.info("Account created", extra={"user_id": user_id, "account_id": account.id})
    return account


__all__ = ["NewAccount", "create_account", "get_account", "list_accounts"]
