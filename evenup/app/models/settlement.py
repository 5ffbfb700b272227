"""
models/settlement.py — Settlement value object.

A direct payment from `from_id` to `to_id`. It reduces what `from_id` owes
`to_id`; nothing clamps it, so an overshoot simply flips the sign of the
pairwise balance.

`from` is a Python keyword, hence `from_id` / `to_id`. The stored and wire
field names stay `from` / `to` (see schemas/settlement_schema.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Settlement:
    id: str
    from_id: str
    to_id: str
    amount: Decimal
    date: datetime
    group_id: str | None = None

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Settlement id={self.id!r} "
            f"from={self.from_id!r} "
            f"to={self.to_id!r} "
            f"amount={self.amount}>"
        )
