"""fintrack application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestingConfig
from .errors import LedgerError
from .logging_config import get_logger, setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestingConfig,
    "default": BaseConfig,
}

logger = get_logger(__name__)


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths."""

    yield "fintrack.blueprints.auth"
    yield "fintrack.blueprints.accounts"
    yield "fintrack.blueprints.ledger"


def create_app(config_name: str | None = None, *, config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["FINTRACK_CONFIG"] = config_obj

    setup_logging(config_obj)
    _register_blueprints(app)
    _register_error_handlers(app)

    # Imported lazily so model modules are only mapped once an app exists.
    from .extensions import init_db
    from .identity import init_identity

    init_db(app)
    init_identity(app)
    _cli.init_app(app)

    logger.info("Application created", extra={"database_url": config_obj.DATABASE_URL})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_error_handlers(app: Flask) -> None:
    """Render every failure as a JSON error body."""

    @app.errorhandler(LedgerError)
    def _ledger_error(exc: LedgerError):
        if exc.status_code >= 500:
            logger.error("Ledger failure: %s", exc.message, extra={"error_code": exc.code})
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        body = {"error": (exc.name or "error").lower().replace(" ", "_"), "message": exc.description}
        return jsonify(body), exc.code or 500

    @app.errorhandler(Exception)
    def _unexpected_error(exc: Exception):
        logger.exception("Unhandled error while serving request")
        return jsonify({"error": "internal_error", "message": "Internal server error"}), 500


__all__ = ["BaseConfig", "DevConfig", "TestingConfig", "create_app"]
