"""
services/activity_service.py — The activity feed.

Merges expenses and settlements into one newest-first list of Activity
entries. Each entry is tagged with its kind; nothing downstream guesses a
record's type from which fields it happens to have.
"""

from __future__ import annotations

from typing import Iterable

from evenup.app.models.activity import Activity
from evenup.app.models.expense import Expense
from evenup.app.models.settlement import Settlement
from evenup.app.services.storage_service import LedgerStore


def build_activity_feed(
        expenses: Iterable[Expense],
        settlements: Iterable[Settlement],
        group_id: str | None = None,
) -> list[Activity]:
    entries = [Activity.of(e) for e in expenses] + [Activity.of(s) for s in settlements]
    if group_id is not None:
        entries = [a for a in entries if a.group_id == group_id]
    # Stable sort: records with equal dates keep expenses-then-settlements order.
    return sorted(entries, key=lambda a: a.date, reverse=True)


def get_activity(store: LedgerStore, group_id: str | None = None) -> list[Activity]:
    return build_activity_feed(store.get_expenses(), store.get_settlements(), group_id)
