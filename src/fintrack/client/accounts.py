"""Account list used by the ledger view for names and balances."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from ..errors import LedgerError
from ..logging_config import get_logger
from .types import AccountView

logger = get_logger(__name__)

UNKNOWN_ACCOUNT = "Unknown Account"


class AccountSource(Protocol):
    async def list_accounts(self) -> list[AccountView]:
        ...


class AccountDirectory:
    """Caches the caller's accounts; balances are only ever re-fetched, never derived."""

    def __init__(self, source: AccountSource) -> None:
        self._source = source
        self.accounts: list[AccountView] = []
        self.error: Optional[str] = None

    async def refresh(self) -> bool:
        """Reload accounts from the server; failures are kept in ``error``."""

        try:
            accounts = await self._source.list_accounts()
        except LedgerError as exc:
            logger.warning("Account refresh failed: %s", exc.message)
            self.error = exc.message
            return False
        self.accounts = list(accounts)
        self.error = None
        return True

    def get(self, account_id: int) -> Optional[AccountView]:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def name_for(self, account_id: int) -> str:
        account = self.get(account_id)
        return account.name if account else UNKNOWN_ACCOUNT

    def balance_for(self, account_id: int) -> Optional[Decimal]:
        account = self.get(account_id)
        return account.balance if account else None

    def options(self) -> list[tuple[int, str]]:
        """(id, name) pairs for an account filter, oldest account first."""

        return [(account.id, account.name) for account in self.accounts]
