"""
services/expense_service.py — Recording expenses.

Rules enforced here:
  GROUP_NOT_FOUND     (404) — group_id, when given, must name a group
  UNKNOWN_PARTICIPANT (422) — payer and every participant must be the
                              current user or someone in the roster
  Split rejections (400/422) come from services/split_service.py unchanged.

Shares are resolved once, here, and stored on the expense. Nothing in the
codebase recomputes them later; editing the roster or the split rules
never rewrites history.

Writes are append-only: the whole expense list is read, the new record is
appended and the list is written back.

Layer rules:
  - No Flask imports. Receives the LedgerStore and the current user id.
  - Only flush here. Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from evenup.app.errors import AppError, ErrorCode
from evenup.app.models.expense import Expense, ParticipantShare, SplitStrategy
from evenup.app.services.roster_service import unify_roster
from evenup.app.services.split_service import compute_shares
from evenup.app.services.storage_service import LedgerStore

logger = logging.getLogger(__name__)


# ── Private helpers ────────────────────────────────────────────────────────

def _resolve_participants(data: dict, current_user_id: str) -> list[str]:
    """Request participant ids, with the current user prepended when asked."""
    participant_ids = list(data["participant_ids"])
    if data.get("include_current_user", True) and current_user_id not in participant_ids:
        participant_ids.insert(0, current_user_id)
    return participant_ids


def _require_known(person_ids: list[str], known_ids: set[str], field: str) -> None:
    for person_id in person_ids:
        if person_id not in known_ids:
            raise AppError(
                ErrorCode.UNKNOWN_PARTICIPANT,
                f"Person {person_id} is not one of your friends or group members.",
                422,
                field=field,
            )


def _resolve_split(
        store: LedgerStore,
        current_user_id: str,
        data: dict,
) -> tuple[str, list[ParticipantShare]]:
    payer_id = data.get("paid_by") or current_user_id
    participant_ids = _resolve_participants(data, current_user_id)

    roster = unify_roster(store.get_friends(), store.get_groups(), current_user_id)
    known_ids = set(roster) | {current_user_id}
    _require_known([payer_id], known_ids, "paid_by")
    _require_known(participant_ids, known_ids, "participant_ids")

    shares = compute_shares(
        amount=data["amount"],
        participant_ids=participant_ids,
        strategy=data.get("split_type", SplitStrategy.EQUAL),
        raw_inputs=data.get("inputs"),
        payer_id=payer_id,
    )
    return payer_id, shares


# ── Public service functions ───────────────────────────────────────────────

def preview_shares(
        store: LedgerStore,
        current_user_id: str,
        data: dict,
) -> list[ParticipantShare]:
    """
    Runs the same checks and split as create_expense() without saving.

    Args:
        data: Validated output of SplitRequestSchema.
    """
    _, shares = _resolve_split(store, current_user_id, data)
    return shares


def create_expense(
        store: LedgerStore,
        current_user_id: str,
        data: dict,
) -> Expense:
    """
    Validates, splits and appends a new expense.

    Args:
        data: Validated output of CreateExpenseSchema.

    Returns:
        The stored Expense, with absolute shares.
    """
    group_id = data.get("group_id")
    if group_id is not None and all(g.id != group_id for g in store.get_groups()):
        raise AppError(
            ErrorCode.GROUP_NOT_FOUND,
            f"Group {group_id} does not exist.",
            404,
            field="group_id",
        )

    payer_id, shares = _resolve_split(store, current_user_id, data)

    expense = Expense(
        id=uuid.uuid4().hex,
        description=data["description"].strip(),
        amount=data["amount"],
        paid_by=payer_id,
        date=data.get("date") or datetime.now(timezone.utc),
        participants=tuple(shares),
        group_id=group_id,
        category=data.get("category"),
    )
    store.set_expenses([*store.get_expenses(), expense])
    logger.info(
        "created expense id=%s amount=%s participants=%d",
        expense.id,
        expense.amount,
        len(shares),
    )
    return expense


def list_expenses(store: LedgerStore, group_id: str | None = None) -> list[Expense]:
    """All expenses, newest first, optionally limited to one group."""
    expenses = store.get_expenses()
    if group_id is not None:
        expenses = [e for e in expenses if e.group_id == group_id]
    return sorted(expenses, key=lambda e: e.date, reverse=True)
