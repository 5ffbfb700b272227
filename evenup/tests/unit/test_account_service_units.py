"""
tests/unit/test_account_service_units.py — Unit tests for account_service.

What this file proves:
  - The current-user record is bootstrapped from configuration on first read
  - A stored record for a different id is replaced by the configured one
  - update_currency persists the code and invalidates the cache in the
    same call, so the next read sees the new currency
  - Unsupported codes raise INVALID_CURRENCY and leave the cache alone
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from evenup.app.errors import AppError, ErrorCode
from evenup.app.models import Person
from evenup.app.services import account_service
from evenup.app.services.currency_service import CurrencyCache
from evenup.tests.unit.conftest import ME


def test_get_current_user_bootstraps_once(store):
    user = account_service.get_current_user(store, ME, "You", "you@evenup.app")

    assert user == Person(id=ME, name="You", email="you@evenup.app")
    assert store.writes == ["user"]

    again = account_service.get_current_user(store, ME, "Ignored", "ignored@x.io")
    assert again == user
    assert store.writes == ["user"]


def test_get_current_user_replaces_record_for_other_id(store):
    store.set_current_user(Person(id="someone-else", name="Old", email=""))

    user = account_service.get_current_user(store, ME, "You", "")

    assert user.id == ME
    assert store.get_current_user().id == ME


def test_update_currency_invalidates_cache(store):
    cache = CurrencyCache(
        lambda: (store.get_current_user() or Person(ME, "", "")).currency,
        default_code="USD",
    )
    assert cache.code() == "USD"

    updated = account_service.update_currency(store, ME, "EUR", cache=cache)

    assert updated.currency == "EUR"
    assert store.get_current_user().currency == "EUR"
    assert cache.code() == "EUR"
    assert cache.symbol() == "€"


def test_update_currency_rejects_unknown_code(store):
    cache = MagicMock()

    with pytest.raises(AppError) as exc_info:
        account_service.update_currency(store, ME, "XYZ", cache=cache)

    assert exc_info.value.code == ErrorCode.INVALID_CURRENCY
    cache.invalidate.assert_not_called()
    assert store.writes == []
