"""
schemas/person_schema.py — Marshmallow schemas for people and the account.

Two kinds of schema live here:
  - PersonSchema: the stored/wire shape of a Person record. Used by the
    ledger store to (de)serialise collections and by routes to dump output.
  - CreateFriendSchema / UpdateCurrencySchema: request validation.

Validation responsibility:
  - This file: field types, lengths, non-empty checks, currency code.
  - services/friend_service.py: DUPLICATE_FRIEND and PERSON_NOT_FOUND,
    which need the stored friend list.

Inherits from marshmallow.Schema directly — never ma.Schema.
See extensions.py for the full explanation.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from evenup.app.errors import ErrorCode
from evenup.app.models.currency import CURRENCY_CODES
from evenup.app.models.person import Person


def _validate_non_empty_after_trim(value: str) -> None:
    """Raises ValidationError if the string is blank or contains only whitespace."""
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


# ── Record schema ──────────────────────────────────────────────────────────

class PersonSchema(Schema):
    """
    Stored shape of a Person.

    `email` may be empty for ad-hoc group members; the roster fills in a
    display email for those. Unknown keys (e.g. a legacy cached `balance`)
    are dropped on load — balances are always derived, never stored.
    """

    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    name = fields.Str(required=True)
    email = fields.Str(load_default="")
    currency = fields.Str(load_default=None, allow_none=True)

    @post_load
    def make_person(self, data: dict, **kwargs) -> Person:
        return Person(**data)


# ── Request schemas ────────────────────────────────────────────────────────

class CreateFriendSchema(Schema):
    """
    POST /friends

    name  : required, non-empty after trim, max 100 chars.
    email : optional. When absent, friend_service derives a placeholder.
    """

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=100,
                error="Name must be between 1 and 100 characters.",
            ),
            _validate_non_empty_after_trim,
        ],
    )

    email = fields.Email(load_default=None, allow_none=True)


class UpdateCurrencySchema(Schema):
    """PATCH /account/currency"""

    currency = fields.Str(
        required=True,
        validate=validate.OneOf(CURRENCY_CODES, error=ErrorCode.INVALID_CURRENCY),
    )
