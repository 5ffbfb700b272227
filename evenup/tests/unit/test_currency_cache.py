"""
tests/unit/test_currency_cache.py — Unit tests for currency_service.

What this file proves:
  - The loader runs lazily, once, until invalidate() is called
  - invalidate() makes the next read see the new stored value
  - Unknown or missing codes fall back to the default
  - Amount formatting puts the sign before the symbol, two places
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from evenup.app.services.currency_service import CurrencyCache, format_amount, symbol_for


def test_loader_is_not_called_until_first_read():
    loader = MagicMock(return_value="EUR")

    CurrencyCache(loader)

    loader.assert_not_called()


def test_loader_called_once_and_memoised():
    loader = MagicMock(return_value="EUR")
    cache = CurrencyCache(loader)

    assert cache.code() == "EUR"
    assert cache.symbol() == "€"
    assert cache.code() == "EUR"
    loader.assert_called_once()


def test_invalidate_reloads_on_next_read():
    loader = MagicMock(side_effect=["EUR", "GBP"])
    cache = CurrencyCache(loader)

    assert cache.code() == "EUR"
    cache.invalidate()

    assert cache.code() == "GBP"
    assert loader.call_count == 2


@pytest.mark.parametrize("stored", [None, "", "XYZ"])
def test_missing_or_unsupported_code_uses_default(stored):
    cache = CurrencyCache(lambda: stored, default_code="INR")

    assert cache.code() == "INR"
    assert cache.symbol() == "₹"


def test_separate_caches_do_not_share_state():
    first = CurrencyCache(lambda: "EUR")
    second = CurrencyCache(lambda: "JPY")

    assert first.code() == "EUR"
    assert second.code() == "JPY"


def test_symbol_for_unknown_code_falls_back_to_dollar():
    assert symbol_for("XYZ") == "$"
    assert symbol_for(None) == "$"
    assert symbol_for("GBP") == "£"


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("12.5"), "$12.50"),
        (Decimal("-3"), "-$3.00"),
        (Decimal("0"), "$0.00"),
        (Decimal("1.005"), "$1.01"),
    ],
)
def test_format_amount(amount, expected):
    assert format_amount(amount, "$") == expected


def test_cache_format_uses_current_symbol():
    cache = CurrencyCache(lambda: "GBP")

    assert cache.format(Decimal("-7.25")) == "-£7.25"
