"""Database wiring for the Flask application."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database

_EXTENSION_KEY = "fintrack.db"


def init_db(app: Flask) -> None:
    """Create the engine, ensure the schema and store a session factory on the app."""

    config: BaseConfig = app.config["FINTRACK_CONFIG"]
    engine = create_db_engine(config)
    init_database(engine)
    app.extensions[_EXTENSION_KEY] = {
        "engine": engine,
        "session_factory": create_session_factory(engine),
    }


def get_session_factory(app: Flask | None = None) -> SessionFactory:
    """Return the transactional session factory bound to the app's engine."""

    return _state(app)["session_factory"]


def _state(app: Flask | None) -> dict:
    target = app or current_app
    state = target.extensions.get(_EXTENSION_KEY)
    if state is None:  # pragma: no cover - misconfiguration
        raise RuntimeError("Database engine not initialized")
    return state
