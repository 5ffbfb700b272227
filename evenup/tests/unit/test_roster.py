"""
tests/unit/test_roster.py — Unit tests for roster_service.unify_roster.

What this file proves:
  - Friends come first, then group members in first-seen order
  - The current user is never added from a group
  - The first record for an id wins; later duplicates are dropped
  - Members without an email get a display-only placeholder
  - Someone known only through a group still gets a zero balance
"""

from __future__ import annotations

from decimal import Decimal

from evenup.app.services.balance_service import compute_balances
from evenup.app.services.roster_service import placeholder_email, unify_roster
from evenup.tests.unit.conftest import ME, group, person


def test_friends_first_then_group_members_in_order():
    friends = [person("alice"), person("bob")]
    groups = [
        group("g1", person(ME), person("carol"), person("alice")),
        group("g2", person("dave"), person("carol")),
    ]

    roster = unify_roster(friends, groups, ME)

    assert list(roster) == ["alice", "bob", "carol", "dave"]


def test_current_user_is_never_added_from_groups():
    roster = unify_roster([], [group("g1", person(ME), person("carol"))], ME)

    assert ME not in roster


def test_first_record_wins():
    friends = [person("alice", name="Alice Friend")]
    groups = [group("g1", person("alice", name="Alice In Group"))]

    roster = unify_roster(friends, groups, ME)

    assert roster["alice"].name == "Alice Friend"


def test_duplicate_friends_keep_the_first():
    roster = unify_roster([person("a", name="First"), person("a", name="Second")], [], ME)

    assert roster["a"].name == "First"


def test_member_without_email_gets_placeholder():
    groups = [group("g1", person("x1", name="Zed", email=""))]

    roster = unify_roster([], groups, ME)

    assert roster["x1"].email == "zed@example.com"
    assert placeholder_email("Zed") == "zed@example.com"


def test_group_only_member_has_zero_balance():
    groups = [group("g1", person(ME), person("carol"))]

    roster = unify_roster([person("alice")], groups, ME)
    balances = compute_balances([], [], ME, roster.values())

    assert balances["carol"] == Decimal("0")
