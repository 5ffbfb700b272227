"""
services/group_service.py — Groups and their derived spend.

Rules enforced here:
  NO_GROUP_MEMBERS (422) — a group needs at least one member besides the
                           current user (a selected friend or a new member)
  PERSON_NOT_FOUND (404) — every selected member id must be a friend
  GROUP_NOT_FOUND  (404)

The current user is always the first member of a group they create. A
group stores no totals; get_group_details() derives them from expenses.

Layer rules:
  - No Flask imports. Receives the LedgerStore.
  - Only flush here. Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from evenup.app.errors import AppError, ErrorCode
from evenup.app.models.expense import Expense
from evenup.app.models.group import Group
from evenup.app.models.person import Person
from evenup.app.services.roster_service import placeholder_email
from evenup.app.services.storage_service import LedgerStore

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class GroupDetails:
    group: Group
    expenses: list[Expense]
    total_spent: Decimal
    average_per_member: Decimal


def _get_group_or_404(groups: list[Group], group_id: str) -> Group:
    for group in groups:
        if group.id == group_id:
            return group
    raise AppError(
        ErrorCode.GROUP_NOT_FOUND,
        f"Group {group_id} does not exist.",
        404,
    )


def list_groups(store: LedgerStore) -> list[Group]:
    return store.get_groups()


def create_group(store: LedgerStore, current_user: Person, data: dict) -> Group:
    """
    Creates a group from existing friends and/or ad-hoc members.

    Args:
        current_user: Always inserted first.
        data:         Validated output of CreateGroupSchema.
    """
    member_ids: list[str] = data.get("member_ids") or []
    new_members: list[dict] = data.get("new_members") or []

    members: list[Person] = [
        Person(id=current_user.id, name=current_user.name, email=current_user.email)
    ]
    seen = {current_user.id}

    friends_by_id = {f.id: f for f in store.get_friends()}
    for member_id in member_ids:
        if member_id in seen:
            continue
        friend = friends_by_id.get(member_id)
        if friend is None:
            raise AppError(
                ErrorCode.PERSON_NOT_FOUND,
                f"Friend {member_id} does not exist.",
                404,
                field="member_ids",
            )
        members.append(Person(id=friend.id, name=friend.name, email=friend.email))
        seen.add(member_id)

    for new_member in new_members:
        name = new_member["name"].strip()
        members.append(
            Person(
                id=uuid.uuid4().hex,
                name=name,
                email=(new_member.get("email") or "").strip() or placeholder_email(name),
            )
        )

    if len(members) < 2:
        raise AppError(
            ErrorCode.NO_GROUP_MEMBERS,
            "Add at least one member to the group.",
            422,
            field="member_ids",
        )

    group = Group(
        id=uuid.uuid4().hex,
        name=data["name"].strip(),
        created_at=datetime.now(timezone.utc),
        members=tuple(members),
        icon=data.get("icon"),
    )
    store.set_groups([*store.get_groups(), group])
    logger.info("created group id=%s members=%d", group.id, len(members))
    return group


def get_group(store: LedgerStore, group_id: str) -> Group:
    return _get_group_or_404(store.get_groups(), group_id)


def get_group_details(store: LedgerStore, group_id: str) -> GroupDetails:
    """
    The group plus its expenses (newest first) and derived totals.

    average_per_member is total_spent / member count rounded half-up to
    the cent, or 0 for a group with no members.
    """
    group = get_group(store, group_id)
    expenses = sorted(
        (e for e in store.get_expenses() if e.group_id == group_id),
        key=lambda e: e.date,
        reverse=True,
    )
    total_spent = sum((e.amount for e in expenses), _ZERO)
    member_count = len(group.members)
    average = (
        (total_spent / member_count).quantize(_CENT, rounding=ROUND_HALF_UP)
        if member_count
        else _ZERO
    )
    return GroupDetails(
        group=group,
        expenses=expenses,
        total_spent=total_spent,
        average_per_member=average,
    )
