"""
tests/integration/test_expenses.py — Integration tests for expense endpoints.

Endpoints covered:
  GET  /expenses           → 200
  POST /expenses           → 201 / 400 / 404 / 422
  POST /expenses/preview   → 200 / 422

Verified here:
  - Shares are resolved once at creation and returned as strings
  - Every split strategy is accepted through the API
  - Rejected splits return a readable reason and store nothing
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from .conftest import ME, add_friend, make_expense, make_group


def _shares(expense: dict) -> dict[str, str]:
    return {p["user_id"]: p["share"] for p in expense["participants"]}


def test_equal_expense_with_current_user(client):
    alice = add_friend(client, "Alice")
    bob = add_friend(client, "Bob")

    resp = make_expense(client, "100.00", [alice["id"], bob["id"]])

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["paid_by"] == ME
    assert data["amount"] == "100.00"
    assert _shares(data) == {ME: "33.34", alice["id"]: "33.33", bob["id"]: "33.33"}


def test_percentage_expense(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(
        client,
        "200.00",
        [alice["id"]],
        split_type="percentage",
        inputs={ME: "60", alice["id"]: "40"},
    )

    assert resp.status_code == 201
    assert _shares(resp.get_json()["data"]) == {ME: "120.00", alice["id"]: "80.00"}


def test_percentage_mismatch_is_rejected(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(
        client,
        "200.00",
        [alice["id"]],
        split_type="percentage",
        inputs={ME: "60", alice["id"]: "39"},
    )

    assert resp.status_code == 422
    error = resp.get_json()["error"]
    assert error["code"] == "SPLIT_PERCENT_MISMATCH"
    assert "100%" in error["message"]
    assert client.get("/api/v1/expenses").get_json()["data"] == []


def test_huge_share_weights_are_rejected(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(
        client,
        "10.00",
        [alice["id"]],
        split_type="shares",
        inputs={ME: "9E+999999", alice["id"]: "0"},
    )

    assert resp.status_code == 422
    assert resp.get_json()["error"]["code"] == "INVALID_SHARE_WEIGHTS"


def test_negative_percentage_is_read_as_zero(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(
        client,
        "10.00",
        [alice["id"]],
        split_type="percentage",
        inputs={ME: "150", alice["id"]: "-50"},
    )

    assert resp.status_code == 422
    assert resp.get_json()["error"]["code"] == "SPLIT_PERCENT_MISMATCH"


def test_exact_expense_mismatch_is_rejected(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(
        client,
        "50.00",
        [alice["id"]],
        split_type="exact",
        inputs={ME: "20", alice["id"]: "20"},
    )

    assert resp.status_code == 422
    assert resp.get_json()["error"]["code"] == "SPLIT_SUM_MISMATCH"


def test_shares_expense_paid_by_friend(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(
        client,
        "90.00",
        [alice["id"]],
        paid_by=alice["id"],
        split_type="shares",
        inputs={ME: "2"},
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["paid_by"] == alice["id"]
    assert _shares(data) == {ME: "60.00", alice["id"]: "30.00"}


def test_unknown_participant_returns_422(client):
    resp = make_expense(client, "10.00", ["stranger"])

    assert resp.status_code == 422
    error = resp.get_json()["error"]
    assert error["code"] == "UNKNOWN_PARTICIPANT"
    assert error["field"] == "participant_ids"


def test_unknown_group_returns_404(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(client, "10.00", [alice["id"]], group_id="missing")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "GROUP_NOT_FOUND"


@pytest.mark.parametrize(
    "amount, code",
    [
        ("10.123", "INVALID_AMOUNT_PRECISION"),
        ("0", "INVALID_AMOUNT"),
        ("-5", "INVALID_AMOUNT"),
        ("1E+30", "INVALID_AMOUNT"),
    ],
)
def test_invalid_amount_returns_400(client, amount, code):
    alice = add_friend(client, "Alice")

    resp = make_expense(client, amount, [alice["id"]])

    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == code
    assert error["field"] == "amount"


def test_invalid_split_type_returns_400(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(client, "10.00", [alice["id"]], split_type="thirds")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "INVALID_SPLIT_TYPE"


def test_duplicate_participants_return_400(client):
    alice = add_friend(client, "Alice")

    resp = make_expense(client, "10.00", [alice["id"], alice["id"]])

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "DUPLICATE_SPLIT_USER"


def test_group_member_can_take_part(client):
    group = make_group(client, new_members=[{"name": "Zed"}])
    zed_id = group["members"][1]["id"]

    resp = make_expense(client, "40.00", [zed_id], group_id=group["id"])

    assert resp.status_code == 201
    assert resp.get_json()["data"]["group_id"] == group["id"]


def test_list_expenses_filters_by_group(client):
    alice = add_friend(client, "Alice")
    group = make_group(client, member_ids=[alice["id"]])
    make_expense(client, "10.00", [alice["id"]], group_id=group["id"], description="In group")
    make_expense(client, "10.00", [alice["id"]], description="Outside")

    all_resp = client.get("/api/v1/expenses")
    group_resp = client.get(f"/api/v1/expenses?group_id={group['id']}")

    assert len(all_resp.get_json()["data"]) == 2
    assert [e["description"] for e in group_resp.get_json()["data"]] == ["In group"]


def test_preview_returns_shares_without_saving(client):
    alice = add_friend(client, "Alice")

    resp = client.post(
        "/api/v1/expenses/preview",
        json={
            "amount": "10.00",
            "participant_ids": [alice["id"]],
            "split_type": "exact",
            "inputs": {ME: "7.5", alice["id"]: "2.5"},
        },
    )

    assert resp.status_code == 200
    shares = resp.get_json()["data"]["participants"]
    assert [(s["user_id"], Decimal(s["share"])) for s in shares] == [
        (ME, Decimal("7.5")),
        (alice["id"], Decimal("2.5")),
    ]
    assert client.get("/api/v1/expenses").get_json()["data"] == []
