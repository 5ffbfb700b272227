"""
services/account_service.py — The current user's own record.

There is no sign-up: the current user is configured, not registered. The
first read bootstraps the stored record from the configured id, name and
email so every later read and write goes through the same ledger key.

Layer rules:
  - No Flask imports. Configuration values arrive as arguments.
  - Only flush here. Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from evenup.app.errors import AppError, ErrorCode
from evenup.app.models.person import Person
from evenup.app.services.currency_service import CurrencyCache, is_supported
from evenup.app.services.storage_service import LedgerStore

logger = logging.getLogger(__name__)


def get_current_user(
        store: LedgerStore,
        current_user_id: str,
        default_name: str = "You",
        default_email: str = "",
) -> Person:
    """
    Returns the stored current-user record, creating it on first access.

    A stored record under a different id (the configured id changed) is
    replaced; the id in configuration always wins.
    """
    user = store.get_current_user()
    if user is not None and user.id == current_user_id:
        return user

    user = Person(id=current_user_id, name=default_name, email=default_email)
    store.set_current_user(user)
    logger.info("bootstrapped current user id=%s", current_user_id)
    return user


def update_currency(
        store: LedgerStore,
        current_user_id: str,
        currency: str,
        cache: CurrencyCache | None = None,
        default_name: str = "You",
        default_email: str = "",
) -> Person:
    """
    Persists a new preferred currency and drops the cached one.

    Raises:
        AppError(INVALID_CURRENCY, 400) — code not in the supported table.
    """
    if not is_supported(currency):
        raise AppError(
            ErrorCode.INVALID_CURRENCY,
            f"Currency {currency!r} is not supported.",
            400,
            field="currency",
        )

    user = get_current_user(store, current_user_id, default_name, default_email)
    updated = replace(user, currency=currency)
    store.set_current_user(updated)

    if cache is not None:
        cache.invalidate()
    return updated
