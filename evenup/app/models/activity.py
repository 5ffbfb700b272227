"""
models/activity.py — Activity feed entry.

Expenses and settlements share an id/date/amount shape, but the feed never
relies on that overlap: every entry carries an explicit `kind` discriminant
and consumers branch on it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Union

from evenup.app.models.expense import Expense
from evenup.app.models.settlement import Settlement


class ActivityKind(str, enum.Enum):
    EXPENSE    = "expense"
    SETTLEMENT = "settlement"


@dataclass(frozen=True)
class Activity:
    kind: ActivityKind
    record: Union[Expense, Settlement]

    @classmethod
    def of(cls, record: Union[Expense, Settlement]) -> "Activity":
        if isinstance(record, Expense):
            return cls(kind=ActivityKind.EXPENSE, record=record)
        if isinstance(record, Settlement):
            return cls(kind=ActivityKind.SETTLEMENT, record=record)
        raise TypeError(f"Unsupported activity record: {type(record).__name__}")

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def date(self) -> datetime:
        return self.record.date

    @property
    def amount(self) -> Decimal:
        return self.record.amount

    @property
    def group_id(self) -> str | None:
        return self.record.group_id
