"""Caller identity for API requests.

The authentication mechanism is outside the ledger; routes only need a
trusted user id. The resolver is stored on the app so deployments (and
tests) can swap it without touching the routes.
"""

from __future__ import annotations

from typing import Callable, Optional

from flask import Flask, Request, current_app, request

from .errors import Forbidden

USER_ID_HEADER = "X-User-Id"
_EXTENSION_KEY = "fintrack.identity"

IdentityResolver = Callable[[Request], Optional[int]]


def header_identity(req: Request) -> Optional[int]:
    """Read the caller's user id from the ``X-User-Id`` header."""

    raw = (req.headers.get(USER_ID_HEADER) or "").strip()
    if not raw:
        return None
    try:
        user_id = int(raw)
    except ValueError:
        return None
    return user_id if user_id > 0 else None


def init_identity(app: Flask, resolver: IdentityResolver | None = None) -> None:
    app.extensions[_EXTENSION_KEY] = resolver or header_identity


def current_user_id() -> int:
    """Return the caller's user id or raise ``Forbidden``."""

    resolver: IdentityResolver = current_app.extensions.get(_EXTENSION_KEY, header_identity)
    user_id = resolver(request)
    if user_id is None:
        raise Forbidden()
    return user_id
