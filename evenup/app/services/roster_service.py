"""
services/roster_service.py — Builds the universe of known people.

The roster is the baseline-zero set for balance computation: everyone in it
appears in the balance map, with 0 if they have no activity with the
current user.

Layer rules:
  - No Flask imports. No storage access. Plain values in, plain values out.
"""

from __future__ import annotations

from typing import Iterable

from evenup.app.models.group import Group
from evenup.app.models.person import Person


def placeholder_email(name: str) -> str:
    """Display-only email for members entered without one. Never used for identity."""
    return f"{name.lower()}@example.com"


def unify_roster(
        friends: Iterable[Person],
        groups: Iterable[Group],
        current_user_id: str,
) -> dict[str, Person]:
    """
    Merges the explicit friends list with people met only through groups.

    Order: friends first (as-is), then group members in first-seen order.
    The current user is never added from a group. Later duplicates are
    dropped; the first record for an id wins.

    Returns {person_id: Person}, insertion-ordered.
    """
    roster: dict[str, Person] = {}

    for friend in friends:
        roster.setdefault(friend.id, friend)

    for group in groups:
        for member in group.members:
            if member.id == current_user_id or member.id in roster:
                continue
            roster[member.id] = Person(
                id=member.id,
                name=member.name,
                email=member.email or placeholder_email(member.name),
            )

    return roster
