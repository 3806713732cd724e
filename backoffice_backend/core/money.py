# core/money.py

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# Tolerance below which an outstanding balance counts as settled.
EPSILON = Decimal("0.01")

DEFAULT_CURRENCY = "CNY"
KNOWN_CURRENCIES = ("CNY", "LAK", "THB")


def money(v) -> Decimal:
    try:
        return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid monetary value: {v!r}") from exc


def quantity(v) -> Decimal:
    """Quantities keep four decimal places (unit conversions can be fractional)."""
    try:
        return Decimal(str(v or "0")).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid quantity: {v!r}") from exc


def normalize_currency(code, *, fallback: str = DEFAULT_CURRENCY) -> str:
    c = (code or "").strip().upper()
    return c or fallback
