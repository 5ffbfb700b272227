"""
schemas/settlement_schema.py — Marshmallow schemas for settlements.

Validation responsibility:
  - This file: field types, decimal precision, positive amount up to MAX_AMOUNT.
  - services/settlement_service.py:
      - SELF_SETTLEMENT (422)            — friend_id is the current user
      - PERSON_NOT_FOUND (404)           — friend must be in the roster
      - SETTLEMENT_EXCEEDS_BALANCE (422) — requires the current balance

Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from datetime import timezone
from decimal import Decimal

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from evenup.app.errors import ErrorCode
from evenup.app.models.expense import MAX_AMOUNT
from evenup.app.models.settlement import Settlement


# Same rule as expense_schema._validate_monetary_amount. Kept local so each
# schema module stays self-contained.
def _validate_monetary_amount(value: Decimal) -> None:
    if not value.is_finite() or value <= Decimal("0") or value > MAX_AMOUNT:
        raise ValidationError(ErrorCode.INVALID_AMOUNT)
    if value.as_tuple().exponent < -2:
        raise ValidationError(ErrorCode.INVALID_AMOUNT_PRECISION)


# ── Record schema ──────────────────────────────────────────────────────────

class SettlementSchema(Schema):
    """Stored shape of a Settlement. `from`/`to` are the external names."""

    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    from_id = fields.Str(required=True, data_key="from")
    to_id = fields.Str(required=True, data_key="to")
    amount = fields.Decimal(required=True, as_string=True)
    date = fields.AwareDateTime(required=True, default_timezone=timezone.utc)
    group_id = fields.Str(load_default=None, allow_none=True)

    @post_load
    def make_settlement(self, data: dict, **kwargs) -> Settlement:
        return Settlement(**data)


# ── Request schema ─────────────────────────────────────────────────────────

class CreateSettlementSchema(Schema):
    """
    POST /settlements

    Records a payment between the current user and one friend. The
    direction is not sent: it follows from the sign of the current balance
    with that friend (settlement_service.py).

    friend_id : required, non-empty.
    amount    : required, positive Decimal, max 2 decimal places.
                Must not exceed the outstanding balance (service check).
    """

    friend_id = fields.Str(
        required=True,
        validate=validate.Length(min=1, error="friend_id must not be empty."),
    )

    amount = fields.Decimal(
        required=True,
        validate=_validate_monetary_amount,
    )

    group_id = fields.Str(load_default=None, allow_none=True)
