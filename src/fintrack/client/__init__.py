"""Client-side ledger components: HTTP transport, session cache and view controller."""

from .accounts import AccountDirectory
from .api import LedgerApiClient
from .controller import LedgerBackend, LedgerViewController, ViewState
from .session import SessionStore, UserSession
from .types import AccountView, TransactionPage, TransactionView

__all__ = [
    "AccountDirectory",
    "AccountView",
    "LedgerApiClient",
    "LedgerBackend",
    "LedgerViewController",
    "SessionStore",
    "TransactionPage",
    "TransactionView",
    "UserSession",
    "ViewState",
]
