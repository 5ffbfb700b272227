"""
tests/integration/conftest.py — Fixtures and helpers for all integration tests.

Design:
  - Tests run against in-memory SQLite via create_app("testing").
  - The app is created once per session; the factory creates the
    ledger_entries table (CREATE_TABLES_ON_STARTUP).
  - Between tests every ledger row is deleted and the app's currency cache
    is invalidated, so no state leaks from one test into the next.

Helper functions (not fixtures) are provided for common operations:
  - add_friend(client, ...)    → friend dict
  - make_group(client, ...)    → group dict
  - make_expense(client, ...)  → HTTP response
  - settle(client, ...)        → HTTP response
  - balance_of(client, id)     → Decimal

These are plain functions so they can be called with arbitrary arguments
in any test.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import text

from evenup.app import create_app
from evenup.app.extensions import db as _db

ME = "current-user"


# ═══════════════════════════════════════════════════════════════════════════
# Session-scoped app fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def app():
    flask_app = create_app("testing")

    yield flask_app

    with flask_app.app_context():
        _db.drop_all()


# ═══════════════════════════════════════════════════════════════════════════
# Function-scoped test isolation
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def clean_tables(app):
    """Deletes every ledger row after each test and drops cached currency."""
    yield

    with app.app_context():
        _db.session.rollback()  # discard any uncommitted state from a failed test
        with _db.engine.connect() as conn:
            conn.execute(text("DELETE FROM ledger_entries"))
            conn.commit()
    app.extensions["evenup.currency"].invalidate()


# ═══════════════════════════════════════════════════════════════════════════
# Client fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client(app):
    """Flask test client. Each test gets a fresh client (function-scoped)."""
    return app.test_client()


# ═══════════════════════════════════════════════════════════════════════════
# Shared helper functions (not fixtures)
# ═══════════════════════════════════════════════════════════════════════════

def add_friend(client, name: str = "Alice", email: str | None = None) -> dict:
    payload: dict = {"name": name}
    if email is not None:
        payload["email"] = email
    resp = client.post("/api/v1/friends", json=payload)
    assert resp.status_code == 201, f"add_friend failed: {resp.get_json()}"
    return resp.get_json()["data"]


def make_group(
        client,
        name: str = "Trip",
        member_ids: list[str] | None = None,
        new_members: list[dict] | None = None,
) -> dict:
    resp = client.post(
        "/api/v1/groups",
        json={
            "name": name,
            "member_ids": member_ids or [],
            "new_members": new_members or [],
        },
    )
    assert resp.status_code == 201, f"make_group failed: {resp.get_json()}"
    return resp.get_json()["data"]


def make_expense(
        client,
        amount: str,
        participant_ids: list[str],
        paid_by: str | None = None,
        split_type: str = "equal",
        inputs: dict | None = None,
        description: str = "Test Expense",
        group_id: str | None = None,
        include_current_user: bool = True,
        category: str = "other",
):
    """
    Creates an expense and returns the HTTP response.

    With include_current_user (the default) the current user is added to
    participant_ids by the server.
    """
    payload: dict = {
        "description": description,
        "amount": amount,
        "participant_ids": participant_ids,
        "split_type": split_type,
        "include_current_user": include_current_user,
        "category": category,
    }
    if paid_by is not None:
        payload["paid_by"] = paid_by
    if inputs is not None:
        payload["inputs"] = inputs
    if group_id is not None:
        payload["group_id"] = group_id
    return client.post("/api/v1/expenses", json=payload)


def settle(client, friend_id: str, amount: str, group_id: str | None = None):
    payload: dict = {"friend_id": friend_id, "amount": amount}
    if group_id is not None:
        payload["group_id"] = group_id
    return client.post("/api/v1/settlements", json=payload)


def balance_of(client, person_id: str) -> Decimal:
    resp = client.get(f"/api/v1/balances/{person_id}")
    assert resp.status_code == 200, f"balance_of failed: {resp.get_json()}"
    return Decimal(resp.get_json()["data"]["balance"])
