"""Account request parsing and validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from ...domain.ledger import money_problem
from ...models.enums import AccountType
from ...services.accounts import (
    BALANCE_NOT_A_NUMBER,
    INVALID_CURRENCY,
    INVALID_TYPE,
    NAME_AND_TYPE_REQUIRED,
    NewAccount,
)


@dataclass(slots=True)
class AccountForm:
    """Represents an account creation body prior to validation."""

    name: str = ""
    type: str = ""
    currency: str = "USD"
    balance: Decimal = Decimal("0.00")
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AccountForm:
        form = cls()
        form.raw_data = {key: data.get(key) for key in ("name", "type", "currency", "balance")}
        form.name = str(form.raw_data.get("name") or "").strip()
        form.type = str(form.raw_data.get("type") or "").strip().lower()
        form.currency = str(form.raw_data.get("currency") or "USD").strip().upper()
        return form

    def validate(self) -> bool:
        self.errors.clear()

        if not self.name or not self.type:
            for key in ("name", "type"):
                if not getattr(self, key):
                    self._add_error(key, NAME_AND_TYPE_REQUIRED)
        elif self.type not in AccountType.values():
            self._add_error("type", INVALID_TYPE)

        if len(self.currency) != 3 or not self.currency.isalpha():
            self._add_error("currency", INVALID_CURRENCY)

        raw_balance = self.raw_data.get("balance")
        if raw_balance in (None, ""):
            self.balance = Decimal("0.00")
        elif isinstance(raw_balance, bool):
            self._add_error("balance", BALANCE_NOT_A_NUMBER)
        else:
            try:
                parsed = Decimal(str(raw_balance).strip())
            except InvalidOperation:
                self._add_error("balance", BALANCE_NOT_A_NUMBER)
            else:
                problem = money_problem(parsed, "balance")
                if problem:
                    self._add_error("balance", problem)
                else:
                    self.balance = parsed

        return not self.errors

    @property
    def message(self) -> str:
        """First error message, used as the response summary."""

        for messages in self.errors.values():
            if messages:
                return messages[0]
        return ""

    def to_entry(self) -> NewAccount:
        return NewAccount(name=self.name, type=self.type, currency=self.currency, balance=self.balance)

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)
