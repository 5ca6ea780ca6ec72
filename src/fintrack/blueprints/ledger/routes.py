"""Ledger JSON routes."""

from __future__ import annotations

from flask import current_app, jsonify, request

from ...config import BaseConfig
from ...errors import InvalidRequest
from ...extensions import get_session_factory
from ...identity import current_user_id
from ...infra.repositories import SQLModelAccountRepository, SQLModelTransactionRepository
from ...logging_config import get_logger
from ...services.ledger_service import create_transaction, get_transaction, query_transactions
from . import bp
from .forms import LedgerQueryForm, TransactionForm

logger = get_logger(__name__)


def _config() -> BaseConfig:
    return current_app.config["FINTRACK_CONFIG"]


@bp.get("")
def list_transactions():
    """Return a filtered page of the caller's transactions."""

    user_id = current_user_id()
    form = LedgerQueryForm.from_mapping(request.args)
    if not form.validate():
        raise InvalidRequest("Invalid query parameters.", errors=form.errors)

    config = _config()
    page = query_transactions(
        SQLModelTransactionRepository(get_session_factory()),
        user_id=user_id,
        filters=form.filters,
        page=form.page_request(config.LEDGER_PAGE_SIZE),
        max_limit=config.LEDGER_MAX_PAGE_SIZE,
    )
    return jsonify(page.to_api_dict())


@bp.get("/<int:transaction_id>")
def detail(transaction_id: int):
    user_id = current_user_id()
    transaction = get_transaction(
        SQLModelTransactionRepository(get_session_factory()),
        user_id=user_id,
        transaction_id=transaction_id,
    )
    return jsonify(transaction.to_api_dict())


@bp.post("")
def create():
    """Record a transaction and adjust the owning account's balance."""

    user_id = current_user_id()
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidRequest("Request body must be a JSON object.")

    form = TransactionForm.from_mapping(payload)
    if not form.validate():
        raise InvalidRequest("Transaction could not be created.", errors=form.errors)

    session_factory = get_session_factory()
    transaction = create_transaction(
        SQLModelTransactionRepository(session_factory),
        SQLModelAccountRepository(session_factory),
        user_id=user_id,
        entry=form.to_entry(),
    )
    logger.info(
        "Transaction created via API",
        extra={"user_id": user_id, "transaction_id": transaction.id},
    )
    return jsonify(transaction.to_api_dict()), 201
