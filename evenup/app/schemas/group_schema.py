"""
schemas/group_schema.py — Marshmallow schemas for groups.

Validation responsibility:
  - This file: field types, string lengths, non-empty checks (including trim).
  - services/group_service.py:
      - NO_GROUP_MEMBERS  (at least one friend or new member is required)
      - PERSON_NOT_FOUND  (selected friend ids must exist)
      - GROUP_NOT_FOUND

Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from datetime import timezone

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from evenup.app.models.group import Group
from evenup.app.schemas.person_schema import PersonSchema


def _validate_non_empty_after_trim(value: str) -> None:
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


# ── Record schema ──────────────────────────────────────────────────────────

class GroupSchema(Schema):
    """Stored shape of a Group. Members are embedded Person records."""

    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    name = fields.Str(required=True)
    icon = fields.Str(load_default=None, allow_none=True)
    members = fields.List(fields.Nested(PersonSchema), load_default=list)
    created_at = fields.AwareDateTime(required=True, default_timezone=timezone.utc)

    @post_load
    def make_group(self, data: dict, **kwargs) -> Group:
        data["members"] = tuple(data.get("members") or ())
        return Group(**data)


# ── Request schemas ────────────────────────────────────────────────────────

class NewMemberSchema(Schema):
    """An ad-hoc member typed into the group form (not an existing friend)."""

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(min=1, max=100, error="Name must be between 1 and 100 characters."),
            _validate_non_empty_after_trim,
        ],
    )
    email = fields.Email(load_default=None, allow_none=True)


class CreateGroupSchema(Schema):
    """
    POST /groups

    name        : required, non-empty after trim, max 100 chars.
    icon        : optional icon name.
    member_ids  : ids of existing friends to include.
    new_members : ad-hoc members that are not (yet) friends.

    The current user is always added by the service; it is never sent.
    """

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=100,
                error="Group name must be between 1 and 100 characters.",
            ),
            _validate_non_empty_after_trim,
        ],
    )

    icon = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=50))

    member_ids = fields.List(fields.Str(), load_default=list)

    new_members = fields.List(fields.Nested(NewMemberSchema), load_default=list)
