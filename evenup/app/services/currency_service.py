"""
services/currency_service.py — Currency display.

The ledger itself is currency-agnostic. This module only answers "which
symbol do I print?" for the current user's preferred currency.

CurrencyCache memoises that preference. It is an explicit object owned by
the app (app.extensions["evenup.currency"]), not module state, and it is
invalidated by account_service.update_currency() in the same request that
changes the preference, so the next read sees the new value.

Layer rules:
  - No Flask imports. The loader callable hides where the code comes from.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from evenup.app.models.currency import CURRENCIES, CURRENCY_CODES, Currency

logger = logging.getLogger(__name__)

DEFAULT_SYMBOL = "$"

_SYMBOLS: dict[str, str] = {c.code: c.symbol for c in CURRENCIES}
_CENT = Decimal("0.01")


def list_currencies() -> tuple[Currency, ...]:
    return CURRENCIES


def is_supported(code: str | None) -> bool:
    return code in CURRENCY_CODES


def symbol_for(code: str | None) -> str:
    """Symbol for a currency code. Unknown or missing codes fall back to "$"."""
    return _SYMBOLS.get(code or "", DEFAULT_SYMBOL)


def format_amount(amount: Decimal, symbol: str) -> str:
    """Decimal(-3) , "$" → "-$3.00". Always two places, sign before symbol."""
    rounded = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):.2f}"


class CurrencyCache:
    """
    Lazily loaded, explicitly invalidated preferred-currency code.

    Args:
        loader:       Zero-arg callable returning the stored code, or None
                      when the user has not chosen one.
        default_code: Used when the loader returns None or an unsupported code.
    """

    def __init__(self, loader: Callable[[], str | None], default_code: str = "USD") -> None:
        self._loader = loader
        self._default_code = default_code
        self._code: str | None = None

    def code(self) -> str:
        if self._code is None:
            loaded = self._loader()
            self._code = loaded if is_supported(loaded) else self._default_code
            logger.debug("currency cache loaded code=%s", self._code)
        return self._code

    def symbol(self) -> str:
        return symbol_for(self.code())

    def format(self, amount: Decimal) -> str:
        return format_amount(amount, self.symbol())

    def invalidate(self) -> None:
        self._code = None
        logger.info("currency cache invalidated")
