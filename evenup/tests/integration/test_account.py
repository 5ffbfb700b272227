"""
tests/integration/test_account.py — Integration tests for account endpoints.

Endpoints covered:
  GET   /account              → 200
  GET   /account/currencies   → 200
  PATCH /account/currency     → 200 / 400

Verified here:
  - The current user is bootstrapped from configuration
  - A currency change is visible on the very next read (cache invalidated)
  - Unknown routes keep their HTTP status instead of becoming 500s
"""

from __future__ import annotations

from .conftest import ME


def test_get_account_bootstraps_current_user(client):
    resp = client.get("/api/v1/account")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["id"] == ME
    assert data["name"] == "You"
    assert data["currency"] == "USD"
    assert data["currency_symbol"] == "$"


def test_list_currencies(client):
    data = client.get("/api/v1/account/currencies").get_json()["data"]

    codes = [c["code"] for c in data]
    assert codes[:4] == ["USD", "EUR", "GBP", "INR"]
    assert {"code": "JPY", "symbol": "¥", "name": "Japanese Yen"} in data


def test_currency_change_is_visible_immediately(client):
    assert client.get("/api/v1/account").get_json()["data"]["currency"] == "USD"

    resp = client.patch("/api/v1/account/currency", json={"currency": "GBP"})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["currency_symbol"] == "£"
    data = client.get("/api/v1/account").get_json()["data"]
    assert (data["currency"], data["currency_symbol"]) == ("GBP", "£")


def test_unsupported_currency_returns_400(client):
    resp = client.patch("/api/v1/account/currency", json={"currency": "XYZ"})

    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "INVALID_CURRENCY"
    assert error["field"] == "currency"


def test_unknown_route_returns_404(client):
    resp = client.get("/api/v1/nothing-here")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "NOT_FOUND"
