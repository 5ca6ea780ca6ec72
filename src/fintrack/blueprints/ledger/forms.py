"""Ledger request parsing and validation helpers."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ...domain.ledger import LedgerFilters, PageRequest, money_problem
from ...models.enums import TransactionType
from ...services.ledger_service import NewTransaction


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(slots=True)
class LedgerQueryForm:
    """Query-string parameters for a ledger listing."""

    offset: int = 0
    limit: Optional[int] = None
    account_id: Optional[int] = None
    category: Optional[str] = None
    type: Optional[str] = None
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LedgerQueryForm:
        form = cls()
        form.raw_data = {
            key: _as_text(data.get(key)).strip()
            for key in ("offset", "limit", "accountId", "category", "type")
        }
        return form

    def validate(self) -> bool:
        """Parse the bound values; range checks belong to the query service."""

        self.errors.clear()
        self.offset = self._parse_int("offset", "Offset") or 0
        self.limit = self._parse_int("limit", "Limit")
        self.account_id = self._parse_int("accountId", "Account")
        self.category = self.raw_data.get("category") or None

        type_raw = self.raw_data.get("type", "").lower()
        self.type = None
        if type_raw:
            if type_raw in TransactionType.values():
                self.type = type_raw
            else:
                self._add_error(
                    "type", "Type must be one of: " + ", ".join(TransactionType.values()) + "."
                )
        return not self.errors

    @property
    def filters(self) -> LedgerFilters:
        return LedgerFilters(account_id=self.account_id, category=self.category, type=self.type)

    def page_request(self, default_limit: int) -> PageRequest:
        limit = default_limit if self.limit is None else self.limit
        return PageRequest(offset=self.offset, limit=limit)

    def _parse_int(self, key: str, label: str) -> Optional[int]:
        raw = self.raw_data.get(key, "")
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            self._add_error(key, f"{label} must be a whole number.")
            return None

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)


@dataclass(slots=True)
class TransactionForm:
    """Represents a transaction creation body prior to validation."""

    account_id: Optional[int] = None
    date: Optional[dt.date] = None
    description: str = ""
    category: str = ""
    type: str = ""
    amount: Optional[Decimal] = None
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TransactionForm:
        """Create a form populated from request data."""

        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data to the form state."""

        keys = ("accountId", "date", "description", "category", "type", "amount")
        self.raw_data = {key: data.get(key) for key in keys}
        self.description = _as_text(self.raw_data.get("description")).strip()
        self.category = _as_text(self.raw_data.get("category")).strip()
        self.type = _as_text(self.raw_data.get("type")).strip().lower()

    def validate(self) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()

        account_raw = self.raw_data.get("accountId")
        self.account_id = None
        if account_raw in (None, "") or isinstance(account_raw, bool):
            self._add_error("accountId", "Account is required.")
        else:
            try:
                self.account_id = int(_as_text(account_raw))
            except ValueError:
                self._add_error("accountId", "Account must be a whole number.")

        date_raw = _as_text(self.raw_data.get("date")).strip()
        self.date = None
        if not date_raw:
            self._add_error("date", "Date is required.")
        else:
            try:
                if len(date_raw) == 10:
                    self.date = dt.datetime.strptime(date_raw, "%Y-%m-%d").date()
                else:
                    self.date = dt.datetime.fromisoformat(date_raw).date()
            except ValueError:
                self._add_error("date", "Enter a valid date (YYYY-MM-DD).")

        if not self.category:
            self._add_error("category", "Category is required.")
        elif len(self.category) > 64:
            self._add_error("category", "Category must be 64 characters or fewer.")

        if len(self.description) > 255:
            self._add_error("description", "Description must be 255 characters or fewer.")

        if not self.type:
            self._add_error("type", "Type is required.")
        elif self.type not in TransactionType.values():
            self._add_error(
                "type", "Type must be one of: " + ", ".join(TransactionType.values()) + "."
            )

        self.amount = None
        amount_raw = self.raw_data.get("amount")
        if amount_raw in (None, ""):
            self._add_error("amount", "Amount is required.")
        elif isinstance(amount_raw, bool):
            self._add_error("amount", "Enter a valid number for the amount.")
        else:
            try:
                parsed = Decimal(_as_text(amount_raw).strip())
            except InvalidOperation:
                self._add_error("amount", "Enter a valid number for the amount.")
            else:
                problem = money_problem(parsed, "amount")
                if problem:
                    self._add_error("amount", problem)
                elif parsed == 0:
                    self._add_error("amount", "Amount cannot be zero.")
                else:
                    self.amount = parsed

        return not self.errors

    def to_entry(self) -> NewTransaction:
        return NewTransaction(
            account_id=self.account_id,
            date=self.date,
            description=self.description or None,
            category=self.category,
            type=self.type,
            amount=self.amount,
        )

    def _add_error(self, field: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field, []).append(message)
