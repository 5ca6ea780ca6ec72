"""Display helpers for ledger rows.

Signs come from the stored amount only; the transaction type is never used
to re-derive them.
"""

from __future__ import annotations

from decimal import Decimal

_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def format_amount(amount: Decimal, currency: str = "USD") -> str:
    """``-$1,234.50`` for outflows, ``$25.00`` for inflows."""

    symbol = _SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def amount_tone(amount: Decimal) -> str:
    if amount < 0:
        return "negative"
    if amount > 0:
        return "positive"
    return "neutral"


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


def pagination_summary(shown: int, total: int) -> str:
    if total == 0 or shown == 0:
        return "No transactions found."
    return f"Showing 1-{shown} of {total} transactions"
