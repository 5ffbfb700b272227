"""
schemas/expense_schema.py — Marshmallow schemas for expenses.

Validation responsibility:
  - This file:
      - Field types, lengths, enum values, decimal precision
      - DUPLICATE_SPLIT_USER (400) — request shape rule
      - Non-empty-after-trim enforcement for description
  - services/split_service.py:
      - SPLIT_PERCENT_MISMATCH, SPLIT_SUM_MISMATCH, INVALID_SHARE_WEIGHTS
        (422) — require parsing the raw per-person inputs
  - services/expense_service.py:
      - UNKNOWN_PARTICIPANT (422) — requires the stored roster
      - GROUP_NOT_FOUND     (404) — requires the stored groups

Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from datetime import timezone
from decimal import Decimal

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    post_load,
    validate,
    validates_schema,
)

from evenup.app.errors import ErrorCode
from evenup.app.models.expense import (
    MAX_AMOUNT,
    Category,
    Expense,
    ParticipantShare,
    SplitStrategy,
)


# ── Shared monetary amount validator ──────────────────────────────────────
#
# Amounts are strictly positive, at most MAX_AMOUNT, with at most 2 decimal
# places. Input with more places is REJECTED with INVALID_AMOUNT_PRECISION,
# never rounded.
# ──────────────────────────────────────────────────────────────────────────

def _validate_monetary_amount(value: Decimal) -> None:
    if not value.is_finite() or value <= Decimal("0") or value > MAX_AMOUNT:
        raise ValidationError(ErrorCode.INVALID_AMOUNT)

    # Decimal("10.123").as_tuple().exponent == -3 → 3 dp → REJECT
    if value.as_tuple().exponent < -2:
        raise ValidationError(ErrorCode.INVALID_AMOUNT_PRECISION)


def _validate_non_empty_after_trim(value: str) -> None:
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


# ── Record schemas ─────────────────────────────────────────────────────────

class ParticipantShareSchema(Schema):
    user_id = fields.Str(required=True)
    share = fields.Decimal(required=True, as_string=True)

    @post_load
    def make_share(self, data: dict, **kwargs) -> ParticipantShare:
        return ParticipantShare(**data)


class ExpenseSchema(Schema):
    """
    Stored shape of an Expense. Amounts are strings on the wire and in the
    store so no float ever touches them.
    """

    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    description = fields.Str(required=True)
    amount = fields.Decimal(required=True, as_string=True)
    paid_by = fields.Str(required=True)
    participants = fields.List(fields.Nested(ParticipantShareSchema), required=True)
    date = fields.AwareDateTime(required=True, default_timezone=timezone.utc)
    group_id = fields.Str(load_default=None, allow_none=True)
    category = fields.Enum(Category, by_value=True, load_default=None, allow_none=True)

    @post_load
    def make_expense(self, data: dict, **kwargs) -> Expense:
        data["participants"] = tuple(data["participants"])
        return Expense(**data)


# ── Request schemas ────────────────────────────────────────────────────────

class SplitRequestSchema(Schema):
    """
    POST /expenses/preview — the split part of an expense form.

    inputs maps participant id → the raw text typed for that person
    (percent, exact amount or share weight, depending on split_type). Values
    are kept raw: unparseable entries count as 0 in the split calculator.
    """

    amount = fields.Decimal(
        required=True,
        validate=_validate_monetary_amount,
    )

    # Defaults to the current user (resolved by the service).
    paid_by = fields.Str(load_default=None, allow_none=True)

    participant_ids = fields.List(
        fields.Str(validate=validate.Length(min=1)),
        required=True,
        validate=validate.Length(min=1, error=ErrorCode.EMPTY_PARTICIPANTS),
    )

    # When true the current user is added to participant_ids if missing,
    # matching the add-expense form where "you" always take part.
    include_current_user = fields.Bool(load_default=True)

    split_type = fields.Enum(
        SplitStrategy,
        load_default=SplitStrategy.EQUAL,
        by_value=True,
        error_messages={"unknown": ErrorCode.INVALID_SPLIT_TYPE},
    )

    inputs = fields.Dict(
        keys=fields.Str(),
        values=fields.Raw(allow_none=True),
        load_default=dict,
    )

    @validates_schema
    def validate_participants_unique(self, data: dict, **kwargs) -> None:
        """DUPLICATE_SPLIT_USER (400): the same id listed twice."""
        participant_ids = data.get("participant_ids") or []
        if len(participant_ids) != len(set(participant_ids)):
            raise ValidationError(
                {
                    "participant_ids": [ErrorCode.DUPLICATE_SPLIT_USER],
                }
            )


class CreateExpenseSchema(SplitRequestSchema):
    """
    POST /expenses

    Everything in SplitRequestSchema plus the descriptive fields.
    group_id, when present, must name an existing group (checked in service).
    """

    description = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=255,
                error="Description must be between 1 and 255 characters.",
            ),
            _validate_non_empty_after_trim,
        ],
    )

    group_id = fields.Str(load_default=None, allow_none=True)

    category = fields.Enum(
        Category,
        load_default=Category.OTHER,
        by_value=True,
        error_messages={"unknown": ErrorCode.INVALID_CATEGORY},
    )

    # Defaults to "now" in the service.
    date = fields.AwareDateTime(load_default=None, allow_none=True, default_timezone=timezone.utc)
