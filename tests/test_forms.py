from __future__ import annotations

import datetime as dt
from decimal import Decimal

from fintrack.blueprints.accounts.forms import AccountForm
from fintrack.blueprints.ledger.forms import LedgerQueryForm, TransactionForm
from fintrack.domain.ledger import LedgerFilters, PageRequest


def test_query_form_defaults():
    form = LedgerQueryForm.from_mapping({})

    assert form.validate()
    assert form.filters == LedgerFilters()
    assert form.page_request(20) == PageRequest(offset=0, limit=20)


def test_query_form_parses_filters():
    form = LedgerQueryForm.from_mapping(
        {"offset": "40", "limit": "10", "accountId": "3", "category": " dining ", "type": "Expense"}
    )

    assert form.validate()
    assert form.filters == LedgerFilters(account_id=3, category="dining", type="expense")
    assert form.page_request(20) == PageRequest(offset=40, limit=10)


def test_query_form_reports_each_bad_field():
    form = LedgerQueryForm.from_mapping({"offset": "1.5", "accountId": "abc", "type": "gift"})

    assert not form.validate()
    assert set(form.errors) == {"offset", "accountId", "type"}


def test_transaction_form_valid_payload():
    form = TransactionForm.from_mapping(
        {
            "accountId": "7",
            "date": "2024-03-15",
            "description": "  Weekly shop ",
            "category": "groceries",
            "type": "EXPENSE",
            "amount": "84.20",
        }
    )

    assert form.validate(), form.errors
    entry = form.to_entry()
    assert entry.account_id == 7
    assert entry.date == dt.date(2024, 3, 15)
    assert entry.description == "Weekly shop"
    assert entry.type == "expense"
    assert entry.amount == Decimal("84.20")


def test_transaction_form_accepts_negative_amount():
    form = TransactionForm.from_mapping(
        {"accountId": 1, "date": "2024-03-15", "category": "fees", "type": "expense", "amount": "-3.5"}
    )

    assert form.validate()
    assert form.amount == Decimal("-3.5")


def test_transaction_form_blank_description_becomes_none():
    form = TransactionForm.from_mapping(
        {"accountId": 1, "date": "2024-03-15", "category": "fees", "type": "expense", "amount": "1", "description": " "}
    )

    assert form.validate()
    assert form.to_entry().description is None


def test_transaction_form_collects_all_errors():
    form = TransactionForm.from_mapping({"amount": "Infinity", "category": "x" * 65, "type": "gift"})

    assert not form.validate()
    assert set(form.errors) == {"accountId", "date", "category", "type", "amount"}
    assert form.errors["accountId"] == ["Account is required."]
    assert form.errors["date"] == ["Date is required."]


def test_transaction_form_rejects_boolean_amount_and_account():
    form = TransactionForm.from_mapping(
        {"accountId": True, "date": "2024-03-15", "category": "fees", "type": "expense", "amount": False}
    )

    assert not form.validate()
    assert set(form.errors) == {"accountId", "amount"}


def test_transaction_form_rejects_sub_cent_amounts():
    form = TransactionForm.from_mapping(
        {"accountId": 1, "date": "2024-03-15", "category": "fees", "type": "expense", "amount": "0.001"}
    )

    assert not form.validate()
    assert form.errors["amount"] == ["Amount can have at most two decimal places."]


def test_transaction_form_rejects_trailing_text_after_date():
    form = TransactionForm.from_mapping(
        {"accountId": 1, "date": "2024-03-15garbage", "category": "fees", "type": "expense", "amount": "1"}
    )

    assert not form.validate()
    assert form.errors["date"] == ["Enter a valid date (YYYY-MM-DD)."]


def test_transaction_form_accepts_iso_datetime():
    form = TransactionForm.from_mapping(
        {"accountId": 1, "date": "2024-03-15T23:59:00", "category": "fees", "type": "expense", "amount": "1"}
    )

    assert form.validate()
    assert form.date == dt.date(2024, 3, 15)


def test_transaction_form_amount_magnitude_boundary():
    base = {"accountId": 1, "date": "2024-03-15", "category": "fees", "type": "income"}

    assert TransactionForm.from_mapping({**base, "amount": "999999999999.99"}).validate()

    form = TransactionForm.from_mapping({**base, "amount": "1000000000000.00"})
    assert not form.validate()
    assert form.errors["amount"] == ["Amount must be less than 1,000,000,000,000."]


def test_account_form_valid_payload():
    form = AccountForm.from_mapping({"name": " Travel ", "type": "Savings", "currency": "gbp", "balance": 12.5})

    assert form.validate(), form.errors
    entry = form.to_entry()
    assert entry.name == "Travel"
    assert entry.type == "savings"
    assert entry.currency == "GBP"
    assert entry.balance == Decimal("12.5")


def test_account_form_defaults_balance_to_zero():
    form = AccountForm.from_mapping({"name": "Cash", "type": "checking", "balance": ""})

    assert form.validate()
    assert form.balance == Decimal("0.00")


def test_account_form_reports_first_problem_as_message():
    form = AccountForm.from_mapping({"type": "crypto", "currency": "dollars", "balance": "10.005"})

    assert not form.validate()
    assert form.message == "Name and type are required"
    assert set(form.errors) == {"name", "currency", "balance"}
