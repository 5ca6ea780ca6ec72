from __future__ import annotations

from decimal import Decimal

import pytest

from fintrack.client.accounts import AccountDirectory
from fintrack.client.formatting import amount_tone, capitalize, format_amount, pagination_summary
from fintrack.client.types import AccountView
from fintrack.errors import Transient


@pytest.mark.parametrize(
    ("amount", "currency", "expected"),
    [
        (Decimal("-1234.5"), "USD", "-$1,234.50"),
        (Decimal("25"), "USD", "$25.00"),
        (Decimal("-3.10"), "eur", "-€3.10"),
        (Decimal("7.25"), "CAD", "CAD 7.25"),
    ],
)
def test_format_amount(amount, currency, expected):
    assert format_amount(amount, currency) == expected


def test_amount_tone_follows_stored_sign():
    assert amount_tone(Decimal("-0.01")) == "negative"
    assert amount_tone(Decimal("0.01")) == "positive"
    assert amount_tone(Decimal("0")) == "neutral"


def test_capitalize():
    assert capitalize("expense") == "Expense"
    assert capitalize("") == ""


def test_pagination_summary():
    assert pagination_summary(0, 0) == "No transactions found."
    assert pagination_summary(20, 45) == "Showing 1-20 of 45 transactions"


class FakeSource:
    def __init__(self, accounts, error=None):
        self.accounts = accounts
        self.error = error
        self.calls = 0

    async def list_accounts(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.accounts


@pytest.mark.asyncio
async def test_account_directory_lookups():
    source = FakeSource(
        [
            AccountView(id=1, name="Checking", type="checking", balance=Decimal("50.00")),
            AccountView(id=2, name="Savings", type="savings", balance=Decimal("900.00")),
        ]
    )
    directory = AccountDirectory(source)

    assert await directory.refresh()

    assert directory.name_for(2) == "Savings"
    assert directory.name_for(3) == "Unknown Account"
    assert directory.balance_for(1) == Decimal("50.00")
    assert directory.balance_for(3) is None
    assert directory.options() == [(1, "Checking"), (2, "Savings")]


@pytest.mark.asyncio
async def test_account_directory_keeps_previous_list_on_failure():
    source = FakeSource([AccountView(id=1, name="Checking", type="checking", balance=Decimal("1"))])
    directory = AccountDirectory(source)
    await directory.refresh()

    source.error = Transient("Offline")
    assert await directory.refresh() is False

    assert directory.error == "Offline"
    assert directory.name_for(1) == "Checking"
