from __future__ import annotations

import pytest

from tests.conftest import auth_headers


def test_create_and_list_accounts(client, app_user):
    first = client.post(
        "/api/accounts",
        json={"name": "Everyday", "type": "checking", "balance": "250.5"},
        headers=auth_headers(app_user),
    )
    second = client.post(
        "/api/accounts",
        json={"name": "Rainy Day", "type": "Savings", "currency": "eur"},
        headers=auth_headers(app_user),
    )

    assert first.status_code == 201
    assert first.get_json()["balance"] == "250.50"
    assert second.status_code == 201
    assert second.get_json()["type"] == "savings"
    assert second.get_json()["currency"] == "EUR"
    assert second.get_json()["balance"] == "0.00"

    listing = client.get("/api/accounts", headers=auth_headers(app_user)).get_json()
    assert [row["name"] for row in listing["accounts"]] == ["Everyday", "Rainy Day"]
    assert all(row["userId"] == app_user.id for row in listing["accounts"])


def test_missing_name_or_type(client, app_user):
    response = client.post("/api/accounts", json={"name": "Only name"}, headers=auth_headers(app_user))

    assert response.status_code == 400
    assert response.get_json()["message"] == "Name and type are required"


def test_invalid_account_type(client, app_user):
    response = client.post(
        "/api/accounts", json={"name": "Brokerage", "type": "crypto"}, headers=auth_headers(app_user)
    )

    assert response.status_code == 400
    assert response.get_json()["message"] == (
        "Invalid account type. Must be: checking, savings, credit, or investment"
    )


def test_invalid_balance(client, app_user):
    response = client.post(
        "/api/accounts",
        json={"name": "Card", "type": "credit", "balance": "a lot"},
        headers=auth_headers(app_user),
    )
    assert response.status_code == 400


def test_unknown_user(client):
    response = client.post(
        "/api/accounts", json={"name": "Ghost", "type": "checking"}, headers={"X-User-Id": "4242"}
    )

    assert response.status_code == 404
    assert response.get_json()["message"] == "User not found"


def test_accounts_are_scoped_to_caller(client, app_user, app_account_factory):
    app_account_factory(name="Mine")

    response = client.get("/api/accounts", headers={"X-User-Id": str(app_user.id + 1)})

    assert response.status_code == 200
    assert response.get_json() == {"accounts": []}


def test_accounts_require_identity(client):
    assert client.get("/api/accounts").status_code == 403


@pytest.mark.parametrize(
    ("balance", "message"),
    [
        ("1e30", "Balance must be less than 1,000,000,000,000."),
        ("1000000000000.00", "Balance must be less than 1,000,000,000,000."),
        ("10.005", "Balance can have at most two decimal places."),
        ("NaN", "Enter a valid number for the balance."),
        (True, "Balance must be a number"),
    ],
)
def test_opening_balance_must_fit_the_ledger(client, app_user, balance, message):
    response = client.post(
        "/api/accounts",
        json={"name": "Card", "type": "credit", "balance": balance},
        headers=auth_headers(app_user),
    )

    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == message
    assert body["errors"]["balance"] == [message]
    assert client.get("/api/accounts", headers=auth_headers(app_user)).get_json() == {"accounts": []}


def test_largest_opening_balance_is_accepted(client, app_user):
    response = client.post(
        "/api/accounts",
        json={"name": "Vault", "type": "savings", "balance": "-999999999999.99"},
        headers=auth_headers(app_user),
    )

    assert response.status_code == 201
    assert response.get_json()["balance"] == "-999999999999.99"


def test_account_detail(client, app_user, app_account_factory):
    account = app_account_factory(name="Daily", balance="42.00")

    response = client.get(f"/api/accounts/{account.id}", headers=auth_headers(app_user))

    assert response.status_code == 200
    assert response.get_json()["name"] == "Daily"
    assert response.get_json()["balance"] == "42.00"


def test_account_detail_hides_other_users_accounts(client, app_user, app_account_factory):
    account = app_account_factory()

    response = client.get(f"/api/accounts/{account.id}", headers={"X-User-Id": str(app_user.id + 1)})

    assert response.status_code == 404
    assert response.get_json()["message"] == "Account not found"
