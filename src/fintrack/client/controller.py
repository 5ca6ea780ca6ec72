"""State machine behind the transaction list: filters, load-more and creation.

Every query gets a generation token from a per-controller counter. When a
response arrives it is applied only if its token is still the latest one,
so a slow response for superseded filters can never overwrite newer rows.
Nothing is cancelled; stale results are simply dropped.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, Union

from ..domain.ledger import DEFAULT_PAGE_SIZE, LedgerFilters, Pagination
from ..errors import LedgerError
from ..logging_config import get_logger
from .formatting import pagination_summary
from .types import TransactionPage, TransactionView

logger = get_logger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"

BalanceChangeSink = Callable[[], Union[None, Awaitable[Any]]]


class LedgerBackend(Protocol):
    """What the controller needs from the server; ``LedgerApiClient`` provides it."""

    async def query_transactions(
        self, filters: LedgerFilters, *, offset: int, limit: int
    ) -> TransactionPage:
        ...

    async def create_transaction(self, payload: Mapping[str, Any]) -> TransactionView:
        ...


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class _Mode(str, Enum):
    REPLACE = "replace"
    APPEND = "append"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class _Query:
    filters: LedgerFilters
    offset: int
    mode: _Mode


_UNSET: Any = object()


class LedgerViewController:
    """Owns the visible transaction list for one ledger view."""

    def __init__(
        self,
        backend: LedgerBackend,
        *,
        on_balance_change: BalanceChangeSink | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._backend = backend
        self._on_balance_change = on_balance_change
        self.page_size = page_size

        self.state = ViewState.IDLE
        self.filters = LedgerFilters()
        self.transactions: list[TransactionView] = []
        self.pagination = Pagination(offset=0, limit=page_size, total=0)
        self.error: Optional[str] = None
        self.creation_error: Optional[str] = None

        self._generation = 0
        self._last_query: Optional[_Query] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_loading(self) -> bool:
        return self.state is ViewState.LOADING

    @property
    def has_next(self) -> bool:
        return self.pagination.has_next

    @property
    def has_filters(self) -> bool:
        return not self.filters.is_empty

    @property
    def summary(self) -> str:
        return pagination_summary(len(self.transactions), self.pagination.total)

    async def load(self) -> bool:
        """Fetch the first page for the current filters, discarding what is shown."""

        return await self._run(_Query(self.filters, 0, _Mode.REPLACE))

    async def set_filters(
        self,
        *,
        account_id: Optional[int] = _UNSET,
        category: Optional[str] = _UNSET,
        txn_type: Optional[str] = _UNSET,
    ) -> bool:
        """Change any subset of the filters; a real change restarts from offset 0.

        Returns False when nothing changed (no query is issued) or when the
        query failed or was superseded.
        """

        changes: dict[str, Any] = {}
        if account_id is not _UNSET:
            changes["account_id"] = account_id
        if category is not _UNSET:
            changes["category"] = (category or "").strip() or None
        if txn_type is not _UNSET:
            changes["type"] = txn_type or None

        updated = self.filters.with_changes(**changes)
        if updated == self.filters:
            return False
        self.filters = updated
        return await self._run(_Query(updated, 0, _Mode.REPLACE))

    async def clear_filters(self) -> bool:
        return await self.set_filters(account_id=None, category=None, txn_type=None)

    async def load_more(self) -> bool:
        """Append the next page; ignored while loading or when nothing is left."""

        if self.is_loading or not self.pagination.has_next:
            return False
        next_offset = self.pagination.offset + self.pagination.limit
        return await self._run(_Query(self.filters, next_offset, _Mode.APPEND))

    async def retry(self) -> bool:
        """Re-issue the last query with the same parameters ("Try again")."""

        if self._last_query is None:
            return await self.load()
        return await self._run(self._last_query)

    async def create_transaction(self, payload: Mapping[str, Any]) -> TransactionView:
        """Create a transaction, then refresh the current page and signal balance change.

        A failed creation sets ``creation_error`` and re-raises; the loaded
        list and the view state are left as they were.
        """

        self.creation_error = None
        try:
            created = await self._backend.create_transaction(payload)
        except Exception as exc:
            self.creation_error = exc.message if isinstance(exc, LedgerError) else UNEXPECTED_ERROR
            if not isinstance(exc, LedgerError):
                logger.exception("Transaction creation failed unexpectedly")
            raise

        await self._run(_Query(self.filters, self.pagination.offset, _Mode.REFRESH))
        await self._notify_balance_change()
        return created

    async def _run(self, query: _Query) -> bool:
        self._generation += 1
        token = self._generation
        self._last_query = query
        self.state = ViewState.LOADING
        self.error = None
        if query.mode is _Mode.REPLACE:
            self.transactions = []
            self.pagination = Pagination(offset=0, limit=self.page_size, total=0)

        try:
            page = await self._backend.query_transactions(
                query.filters, offset=query.offset, limit=self.page_size
            )
        except Exception as exc:
            if token != self._generation:
                logger.debug("Ignoring failure of superseded query", extra={"generation": token})
                return False
            if isinstance(exc, LedgerError):
                self.error = exc.message
            else:
                logger.exception("Ledger query failed unexpectedly")
                self.error = UNEXPECTED_ERROR
            self.state = ViewState.ERROR
            return False

        if token != self._generation:
            logger.debug(
                "Discarding stale ledger response",
                extra={"generation": token, "current": self._generation},
            )
            return False

        self._apply(query, page)
        self.state = ViewState.LOADED
        return True

    def _apply(self, query: _Query, page: TransactionPage) -> None:
        rows = list(page.transactions)
        if query.mode is _Mode.REPLACE:
            self.transactions = rows
        elif query.mode is _Mode.APPEND:
            known = {txn.id for txn in self.transactions}
            self.transactions = self.transactions + [txn for txn in rows if txn.id not in known]
        else:
            # Keep the rows before the refreshed window, replace the window itself.
            self.transactions = self.transactions[: query.offset] + rows
        self.pagination = page.pagination

    async def _notify_balance_change(self) -> None:
        if self._on_balance_change is None:
            return
        try:
            result = self._on_balance_change()
            if inspect.isawaitable(result):
                await result
        except Exception:
            # Creation already succeeded; listener errors are logged, not raised.
            logger.exception("Balance change listener failed")
