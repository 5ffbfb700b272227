"""
models/currency.py — Supported display currencies.

Static reference data only. The ledger is currency-agnostic: every amount is
in the user's single implicit currency, and this table is used purely for
symbol lookup when formatting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str


CURRENCIES: tuple[Currency, ...] = (
    Currency("USD", "$",   "US Dollar"),
    Currency("EUR", "€",   "Euro"),
    Currency("GBP", "£",   "British Pound"),
    Currency("INR", "₹",   "Indian Rupee"),
    Currency("JPY", "¥",   "Japanese Yen"),
    Currency("CNY", "¥",   "Chinese Yuan"),
    Currency("AUD", "A$",  "Australian Dollar"),
    Currency("CAD", "C$",  "Canadian Dollar"),
    Currency("CHF", "CHF", "Swiss Franc"),
    Currency("SEK", "kr",  "Swedish Krona"),
    Currency("NZD", "NZ$", "New Zealand Dollar"),
    Currency("SGD", "S$",  "Singapore Dollar"),
)

CURRENCY_CODES: tuple[str, ...] = tuple(c.code for c in CURRENCIES)
