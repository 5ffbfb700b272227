"""
services/storage_service.py — The ledger store (persistence collaborator).

A small key/value layer over one table (models/ledger_entry.py). Each key
holds a whole collection; every write replaces that collection. There is no
partial-update API, and serialising concurrent read-modify-write sequences
is the caller's job (one request = one session = one commit).

Layer rules:
  - No Flask imports. Receives a SQLAlchemy Session.
  - Only flush here. Commits are the route's responsibility.
  - Records cross this boundary as value objects; marshmallow record
    schemas do the (de)serialisation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from marshmallow import Schema
from sqlalchemy.orm import Session

from evenup.app.models.expense import Expense
from evenup.app.models.group import Group
from evenup.app.models.ledger_entry import LedgerEntry
from evenup.app.models.person import Person
from evenup.app.models.settlement import Settlement
from evenup.app.schemas.expense_schema import ExpenseSchema
from evenup.app.schemas.group_schema import GroupSchema
from evenup.app.schemas.person_schema import PersonSchema
from evenup.app.schemas.settlement_schema import SettlementSchema

logger = logging.getLogger(__name__)


class StoreKey:
    USER        = "user"
    FRIENDS     = "friends"
    GROUPS      = "groups"
    EXPENSES    = "expenses"
    SETTLEMENTS = "settlements"


class LedgerStore:
    """
    Whole-collection reads and writes for one unit of work.

    Reads of a missing key return an empty list (or None for the user).
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # ── Raw key/value access ───────────────────────────────────────────────

    def _read(self, key: str) -> Any:
        entry = self.session.get(LedgerEntry, key)
        return None if entry is None else entry.value

    def _write(self, key: str, value: Any) -> None:
        entry = self.session.get(LedgerEntry, key)
        if entry is None:
            entry = LedgerEntry(key=key, value=value)
            self.session.add(entry)
        else:
            entry.value = value
        entry.updated_at = datetime.now(timezone.utc)
        self.session.flush()
        logger.debug("ledger store wrote key=%s", key)

    def _read_many(self, key: str, schema: Schema) -> list:
        payload = self._read(key)
        if not payload:
            return []
        return schema.load(payload, many=True)

    def _write_many(self, key: str, schema: Schema, records: Iterable) -> None:
        self._write(key, schema.dump(list(records), many=True))

    # ── Current user ───────────────────────────────────────────────────────

    def get_current_user(self) -> Person | None:
        payload = self._read(StoreKey.USER)
        if payload is None:
            return None
        return PersonSchema().load(payload)

    def set_current_user(self, user: Person) -> None:
        self._write(StoreKey.USER, PersonSchema().dump(user))

    # ── Collections ────────────────────────────────────────────────────────

    def get_friends(self) -> list[Person]:
        return self._read_many(StoreKey.FRIENDS, PersonSchema())

    def set_friends(self, friends: Iterable[Person]) -> None:
        self._write_many(StoreKey.FRIENDS, PersonSchema(), friends)

    def get_groups(self) -> list[Group]:
        return self._read_many(StoreKey.GROUPS, GroupSchema())

    def set_groups(self, groups: Iterable[Group]) -> None:
        self._write_many(StoreKey.GROUPS, GroupSchema(), groups)

    def get_expenses(self) -> list[Expense]:
        return self._read_many(StoreKey.EXPENSES, ExpenseSchema())

    def set_expenses(self, expenses: Iterable[Expense]) -> None:
        self._write_many(StoreKey.EXPENSES, ExpenseSchema(), expenses)

    def get_settlements(self) -> list[Settlement]:
        return self._read_many(StoreKey.SETTLEMENTS, SettlementSchema())

    def set_settlements(self, settlements: Iterable[Settlement]) -> None:
        self._write_many(StoreKey.SETTLEMENTS, SettlementSchema(), settlements)
