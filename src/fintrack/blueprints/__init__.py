"""Blueprint exports."""

from . import accounts, auth, ledger

__all__ = [
    "accounts",
    "auth",
    "ledger",
]
