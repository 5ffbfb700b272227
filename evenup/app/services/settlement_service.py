"""
services/settlement_service.py — Settle-up payments.

Rules enforced here:
  SELF_SETTLEMENT            (422) — friend_id is the current user
  PERSON_NOT_FOUND           (404) — friend_id is not in the roster
  SETTLEMENT_EXCEEDS_BALANCE (422) — amount is more than what is outstanding,
                                     rounded half-up to the cent

Direction is not chosen by the caller. It follows the sign of the current
balance with that person (see balance_service.py for the convention):
  balance < 0  →  the current user owes them: current user pays friend
  balance >= 0 →  they owe the current user:  friend pays current user

A settlement is an ordinary record; the balance it offsets is recomputed
from scratch on the next read, never patched in place.

Layer rules:
  - No Flask imports. Receives the LedgerStore and the current user id.
  - Only flush here. Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from evenup.app.errors import AppError, ErrorCode
from evenup.app.models.settlement import Settlement
from evenup.app.services.balance_service import get_balance_with
from evenup.app.services.storage_service import LedgerStore

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def create_settlement(
        store: LedgerStore,
        current_user_id: str,
        data: dict,
) -> Settlement:
    """
    Records a payment between the current user and one person.

    Args:
        data: Validated output of CreateSettlementSchema.
    """
    friend_id = data["friend_id"]
    amount = data["amount"]

    if friend_id == current_user_id:
        raise AppError(
            ErrorCode.SELF_SETTLEMENT,
            "You cannot settle up with yourself.",
            422,
            field="friend_id",
        )

    # Raises PERSON_NOT_FOUND for anyone outside the roster.
    outstanding = get_balance_with(store, current_user_id, friend_id).balance

    # Compared at cent precision, the same figure the balances endpoint shows.
    limit = abs(outstanding).quantize(_CENT, rounding=ROUND_HALF_UP)
    if amount > limit:
        raise AppError(
            ErrorCode.SETTLEMENT_EXCEEDS_BALANCE,
            f"Amount cannot exceed the outstanding balance of {limit}.",
            422,
            field="amount",
        )

    if outstanding < 0:
        from_id, to_id = current_user_id, friend_id
    else:
        from_id, to_id = friend_id, current_user_id

    settlement = Settlement(
        id=uuid.uuid4().hex,
        from_id=from_id,
        to_id=to_id,
        amount=amount,
        date=datetime.now(timezone.utc),
        group_id=data.get("group_id"),
    )
    store.set_settlements([*store.get_settlements(), settlement])
    logger.info(
        "recorded settlement id=%s from=%s to=%s amount=%s",
        settlement.id,
        from_id,
        to_id,
        amount,
    )
    return settlement


def list_settlements(store: LedgerStore, group_id: str | None = None) -> list[Settlement]:
    """All settlements, newest first, optionally limited to one group."""
    settlements = store.get_settlements()
    if group_id is not None:
        settlements = [s for s in settlements if s.group_id == group_id]
    return sorted(settlements, key=lambda s: s.date, reverse=True)
