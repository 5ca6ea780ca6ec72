"""Async HTTP client for the fintrack JSON API."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Mapping, Optional

import httpx

from ..domain.ledger import LedgerFilters
from ..errors import Forbidden, Transient, error_from_response
from ..identity import USER_ID_HEADER
from ..logging_config import get_logger
from .session import IdentityProvider, SessionStore
from .types import AccountView, TransactionPage, TransactionView

logger = get_logger(__name__)


class LedgerApiClient:
    """Talks to the accounts, auth and transactions endpoints.

    Every failure is raised as a ``LedgerError`` subclass: error responses are
    rebuilt from their JSON body and transport problems become ``Transient``.
    Nothing is retried automatically.
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str,
        *,
        identity: IdentityProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.identity = identity or SessionStore()
        self._http_client = http_client
        self._owns_client = False
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazy-init HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._http_client

    async def close(self) -> None:
        """Close owned HTTP client."""
        if self._owns_client and self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> LedgerApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Verify credentials and cache the session when the store supports it."""

        body = await self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}, authenticated=False
        )
        user = body.get("user") or {}
        if isinstance(self.identity, SessionStore):
            self.identity.login(user)
        return user

    async def list_accounts(self) -> list[AccountView]:
        body = await self._request("GET", "/api/accounts")
        return [AccountView.from_api_dict(row) for row in body.get("accounts", [])]

    async def create_account(self, payload: Mapping[str, Any]) -> AccountView:
        body = await self._request("POST", "/api/accounts", json=_jsonable(payload))
        return AccountView.from_api_dict(body)

    async def query_transactions(
        self, filters: LedgerFilters, *, offset: int, limit: int
    ) -> TransactionPage:
        params = {"offset": str(offset), "limit": str(limit), **filters.to_params()}
        body = await self._request("GET", "/api/transactions", params=params)
        return TransactionPage.from_api_dict(body)

    async def create_transaction(self, payload: Mapping[str, Any]) -> TransactionView:
        body = await self._request("POST", "/api/transactions", json=_jsonable(payload))
        return TransactionView.from_api_dict(body)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        json: Any = None,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        headers: dict[str, str] = {}
        if authenticated:
            user_id = self.identity.get_user_id()
            if user_id is None:
                raise Forbidden("You are not signed in")
            headers[USER_ID_HEADER] = str(user_id)

        client = await self._get_client()
        try:
            response = await client.request(
                method, f"{self.base_url}{path}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.warning("Request to %s %s failed: %s", method, path, exc)
            raise Transient() from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            return body if isinstance(body, dict) else {}
        logger.info(
            "API error response",
            extra={"method": method, "path": path, "status": response.status_code},
        )
        raise error_from_response(response.status_code, body if isinstance(body, dict) else None)


def _jsonable(payload: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in payload.items():
        if isinstance(value, Decimal):
            out[key] = str(value)
        elif isinstance(value, dt.datetime):
            out[key] = value.date().isoformat()
        elif isinstance(value, dt.date):
            out[key] = value.isoformat()
        else:
            out[key] = value
    return out
