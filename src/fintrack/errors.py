"""Error taxonomy shared by the ledger services, HTTP layer and client."""

from __future__ import annotations

from typing import Any, Mapping


class LedgerError(Exception):
    """Base class for errors that can be surfaced to a user."""

    status_code = 500
    code = "ledger_error"
    default_message = "Something went wrong."
    retryable = False

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: Mapping[str, list[str]] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors: dict[str, list[str]] = {k: list(v) for k, v in (errors or {}).items()}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error into the JSON body returned by the API."""

        body: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        if self.retryable:
            body["retryable"] = True
        return body


class InvalidRequest(LedgerError):
    """Malformed, missing or out-of-range input; the user can correct it."""

    status_code = 400
    code = "invalid_request"
    default_message = "The request is invalid."


ValidationFailed = InvalidRequest


class Unauthorized(LedgerError):
    status_code = 401
    code = "unauthorized"
    default_message = "Invalid email or password"


class Forbidden(LedgerError):
    """The request carries no usable caller identity."""

    status_code = 403
    code = "forbidden"
    default_message = "User identity is required"


class NotFound(LedgerError):
    """A referenced record does not exist or is not visible to the caller."""

    status_code = 404
    code = "not_found"
    default_message = "Not found"


class Conflict(LedgerError):
    """The insert and its balance update could not be applied together."""

    status_code = 500
    code = "conflict"
    default_message = "The transaction could not be recorded. Please try again."
    retryable = True


class Transient(LedgerError):
    """Network or server fault; the user may try again."""

    status_code = 503
    code = "transient"
    default_message = "The service is temporarily unavailable. Please try again."
    retryable = True


_BY_CODE: dict[str, type[LedgerError]] = {
    cls.code: cls for cls in (InvalidRequest, Unauthorized, Forbidden, NotFound, Conflict, Transient)
}
_BY_STATUS: dict[int, type[LedgerError]] = {
    400: InvalidRequest,
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
}


def error_from_response(status_code: int, body: Mapping[str, Any] | None) -> LedgerError:
    """Rebuild a ``LedgerError`` from an API error response."""

    body = body or {}
    code = body.get("error")
    cls = _BY_CODE.get(code) if isinstance(code, str) else None
    if cls is None:
        cls = _BY_STATUS.get(status_code, Transient)
    message = body.get("message")
    errors = body.get("errors") if isinstance(body.get("errors"), Mapping) else None
    return cls(message if isinstance(message, str) and message else None, errors=errors)


__all__ = [
    "Conflict",
    "Forbidden",
    "InvalidRequest",
    "LedgerError",
    "NotFound",
    "Transient",
    "Unauthorized",
    "ValidationFailed",
    "error_from_response",
]
