"""Service module exports."""

from . import accounts, auth, ledger_service

__all__ = [
    "accounts",
    "auth",
    "ledger_service",
]
