"""
models/ledger_entry.py — LedgerEntry table definition.

The persistence collaborator is a key/value store of whole collections:
one row per collection ("user", "friends", "groups", "expenses",
"settlements"), each holding the full serialised list as JSON. Writes
replace the whole value; there is no partial-update path.

No business logic. No imports from services or routes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from evenup.app.extensions import db


class LedgerEntry(db.Model):
    __tablename__ = "ledger_entries"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Whole-collection payload. Reassigned on every write, never mutated in
    # place, so no MutableList/MutableDict tracking is needed.
    value: Mapped[Any] = mapped_column(JSON, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<LedgerEntry key={self.key!r}>"
