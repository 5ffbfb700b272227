"""
services/friend_service.py — The explicit friends list.

Rules enforced here:
  DUPLICATE_FRIEND (409) — same name or email as an existing friend,
                           compared case-insensitively
  PERSON_NOT_FOUND (404) — removing an id that is not a friend

Removing a friend also removes them from every group's member list, so the
roster never shows a person only because a stale group still lists them.
Past expenses and settlements are left untouched.

Layer rules:
  - No Flask imports. Receives the LedgerStore.
  - Only flush here. Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
import re
import uuid

from evenup.app.errors import AppError, ErrorCode
from evenup.app.models.person import Person
from evenup.app.services.storage_service import LedgerStore

logger = logging.getLogger(__name__)


def default_friend_email(name: str) -> str:
    """Placeholder email: "Jane Doe" → "janedoe@example.com"."""
    return re.sub(r"\s+", "", name.lower()) + "@example.com"


def list_friends(store: LedgerStore) -> list[Person]:
    return store.get_friends()


def add_friend(store: LedgerStore, data: dict) -> Person:
    """
    Appends a new friend.

    Args:
        data: Validated output of CreateFriendSchema (name, optional email).
    """
    name = data["name"].strip()
    email = (data.get("email") or "").strip() or default_friend_email(name)

    friends = store.get_friends()
    for friend in friends:
        if friend.name.casefold() == name.casefold() or (
            friend.email and friend.email.casefold() == email.casefold()
        ):
            raise AppError(
                ErrorCode.DUPLICATE_FRIEND,
                f"{friend.name} is already in your friends list.",
                409,
            )

    friend = Person(id=uuid.uuid4().hex, name=name, email=email)
    store.set_friends([*friends, friend])
    logger.info("added friend id=%s", friend.id)
    return friend


def remove_friend(store: LedgerStore, friend_id: str) -> None:
    friends = store.get_friends()
    remaining = [f for f in friends if f.id != friend_id]
    if len(remaining) == len(friends):
        raise AppError(
            ErrorCode.PERSON_NOT_FOUND,
            f"Friend {friend_id} does not exist.",
            404,
        )
    store.set_friends(remaining)

    groups = store.get_groups()
    if any(friend_id in g.member_ids for g in groups):
        store.set_groups([g.without_member(friend_id) for g in groups])
    logger.info("removed friend id=%s", friend_id)
