"""
models/expense.py — Expense value object and its enums.

Key design points:
  - `amount` and every `share` are Decimal — never float.
  - `participants` carries shares already resolved to absolute currency
    amounts by the split calculator at creation time. The split is never
    recomputed later; historical expenses are immutable.
  - `paid_by` need not appear in `participants`.
  - SplitStrategy and Category are Python enums so schemas and services
    can use them without repeating string literals.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

# Largest amount accepted anywhere money enters the system (12 digits, 2 dp).
MAX_AMOUNT = Decimal("9999999999.99")


class SplitStrategy(str, enum.Enum):
    """How an expense total is divided at creation time."""
    EQUAL      = "equal"
    PERCENTAGE = "percentage"
    EXACT      = "exact"
    SHARES     = "shares"


class Category(str, enum.Enum):
    FOOD          = "food"
    TRANSPORT     = "transport"
    ACCOMMODATION = "accommodation"
    ENTERTAINMENT = "entertainment"
    UTILITIES     = "utilities"
    SHOPPING      = "shopping"
    OTHER         = "other"


@dataclass(frozen=True)
class ParticipantShare:
    user_id: str
    share: Decimal


@dataclass(frozen=True)
class Expense:
    id: str
    description: str
    amount: Decimal
    paid_by: str
    date: datetime
    participants: tuple[ParticipantShare, ...] = field(default_factory=tuple)
    group_id: str | None = None
    category: Category | None = None

    @property
    def participant_ids(self) -> list[str]:
        return [p.user_id for p in self.participants]

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Expense id={self.id!r} "
            f"amount={self.amount} "
            f"paid_by={self.paid_by!r} "
            f"group_id={self.group_id!r}>"
        )
