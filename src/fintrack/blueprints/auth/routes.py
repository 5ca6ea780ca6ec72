"""Login route."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import InvalidRequest, Unauthorized
from ...extensions import get_session_factory
from ...logging_config import get_logger
from ...services.auth import authenticate
from . import bp

logger = get_logger(__name__)


@bp.post("/login")
def login():
    """Verify credentials and return the public user record."""

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    email = str(payload.get("email") or "").strip()
    password = str(payload.get("password") or "")
    if not email or not password:
        raise InvalidRequest("Email and password are required")

    user = authenticate(email=email, password=password, session_factory=get_session_factory())
    if user is None:
        logger.info("Failed login attempt")
        raise Unauthorized()

    logger.info("User logged in", extra={"user_id": user.id})
    return jsonify({"message": "Login successful", "user": user.to_api_dict()})
