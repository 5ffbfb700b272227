"""
tests/unit/conftest.py — Shared fixtures and factories for unit tests.

Unit test constraints:
  - No database. No Flask application context.
  - Services run against InMemoryLedgerStore, which keeps the real
    LedgerStore's marshmallow (de)serialisation and replaces only the
    key/value table with a dict. Every write therefore round-trips through
    the same JSON shape the database would hold.
"""

from __future__ import annotations

import copy
import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from evenup.app.models import Expense, Group, ParticipantShare, Person, Settlement
from evenup.app.services.storage_service import LedgerStore

ME = "current-user"

BASE_DATE = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryLedgerStore(LedgerStore):

    def __init__(self) -> None:
        super().__init__(session=None)
        self.entries: dict[str, object] = {}
        self.writes: list[str] = []

    def _read(self, key):
        # Deep copy so callers can never mutate stored state in place.
        return copy.deepcopy(self.entries.get(key))

    def _write(self, key, value):
        # Must be JSON-serialisable, exactly like the JSON column.
        self.entries[key] = json.loads(json.dumps(value))
        self.writes.append(key)


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


# ── Factory helpers ────────────────────────────────────────────────────────

def person(person_id: str, name: str | None = None, email: str | None = None) -> Person:
    name = name or person_id.capitalize()
    return Person(id=person_id, name=name, email=email if email is not None else f"{person_id}@mail.test")


def group(group_id: str, *members: Person, name: str = "Trip") -> Group:
    return Group(id=group_id, name=name, created_at=BASE_DATE, members=tuple(members))


def expense(
        paid_by: str,
        amount: str,
        shares: dict[str, str],
        expense_id: str = "e1",
        group_id: str | None = None,
        days: int = 0,
) -> Expense:
    return Expense(
        id=expense_id,
        description="Dinner",
        amount=Decimal(amount),
        paid_by=paid_by,
        date=BASE_DATE + timedelta(days=days),
        participants=tuple(ParticipantShare(uid, Decimal(s)) for uid, s in shares.items()),
        group_id=group_id,
    )


def settlement(
        from_id: str,
        to_id: str,
        amount: str,
        settlement_id: str = "s1",
        group_id: str | None = None,
        days: int = 0,
) -> Settlement:
    return Settlement(
        id=settlement_id,
        from_id=from_id,
        to_id=to_id,
        amount=Decimal(amount),
        date=BASE_DATE + timedelta(days=days),
        group_id=group_id,
    )
