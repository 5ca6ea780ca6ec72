"""Account JSON routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import InvalidRequest
from ...extensions import get_session_factory
from ...identity import current_user_id
from ...infra.repositories import SQLModelAccountRepository
from ...services.accounts import create_account, get_account, list_accounts
from . import bp
from .forms import AccountForm


@bp.get("")
def index():
    """List the caller's accounts, oldest first."""

    user_id = current_user_id()
    accounts = list_accounts(SQLModelAccountRepository(get_session_factory()), user_id=user_id)
    return jsonify({"accounts": [account.to_api_dict() for account in accounts]})


@bp.get("/<int:account_id>")
def detail(account_id: int):
    user_id = current_user_id()
    account = get_account(
        SQLModelAccountRepository(get_session_factory()), user_id=user_id, account_id=account_id
    )
    return jsonify(account.to_api_dict())


@bp.post("")
def create():
    user_id = current_user_id()
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidRequest("Request body must be a JSON object.")

    form = AccountForm.from_mapping(payload)
    if not form.validate():
        raise InvalidRequest(form.message, errors=form.errors)

    session_factory = get_session_factory()
    account = create_account(
        SQLModelAccountRepository(session_factory),
        session_factory,
        user_id=user_id,
        entry=form.to_entry(),
    )
    return jsonify(account.to_api_dict()), 201
