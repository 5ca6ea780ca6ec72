"""Account repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.account import Account


class AccountRepository(Protocol):
    """Repository for managing account entities."""

    def get_owned(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account only when it belongs to ``user_id``."""
        ...

    def list_for_user(self, *, user_id: int) -> list[Account]:
        """List a user's accounts, oldest first."""
        ...

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account owned by ``user_id``."""
        ...
