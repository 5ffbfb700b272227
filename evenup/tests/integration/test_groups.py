"""
tests/integration/test_groups.py — Integration tests for group endpoints.

Endpoints covered:
  GET  /groups      → 200
  POST /groups      → 201 / 404 / 422
  GET  /groups/:id  → 200 / 404
"""

from __future__ import annotations

from .conftest import ME, add_friend, make_expense, make_group


def test_create_group_adds_current_user_first(client):
    alice = add_friend(client, "Alice")

    group = make_group(
        client,
        name="Ski Trip",
        member_ids=[alice["id"]],
        new_members=[{"name": "Zed"}],
    )

    assert group["name"] == "Ski Trip"
    assert [m["name"] for m in group["members"]] == ["You", "Alice", "Zed"]
    assert group["members"][0]["id"] == ME
    assert group["members"][2]["email"] == "zed@example.com"

    listed = client.get("/api/v1/groups").get_json()["data"]
    assert [g["id"] for g in listed] == [group["id"]]


def test_group_without_members_returns_422(client):
    resp = client.post("/api/v1/groups", json={"name": "Solo"})

    assert resp.status_code == 422
    assert resp.get_json()["error"]["code"] == "NO_GROUP_MEMBERS"


def test_group_with_unknown_friend_returns_404(client):
    resp = client.post("/api/v1/groups", json={"name": "Trip", "member_ids": ["ghost"]})

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "PERSON_NOT_FOUND"


def test_blank_group_name_returns_400(client):
    resp = client.post("/api/v1/groups", json={"name": "  ", "new_members": [{"name": "Zed"}]})

    assert resp.status_code == 400
    assert resp.get_json()["error"]["field"] == "name"


def test_group_details_include_expenses_and_totals(client):
    alice = add_friend(client, "Alice")
    group = make_group(client, member_ids=[alice["id"]])
    make_expense(client, "30.00", [alice["id"]], group_id=group["id"])
    make_expense(client, "20.00", [alice["id"]], group_id=group["id"])
    make_expense(client, "99.00", [alice["id"]])

    resp = client.get(f"/api/v1/groups/{group['id']}")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert len(data["expenses"]) == 2
    assert data["total_spent"] == "50.00"
    assert data["average_per_member"] == "25.00"


def test_unknown_group_returns_404(client):
    resp = client.get("/api/v1/groups/missing")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "GROUP_NOT_FOUND"
