"""
routes/account.py — The current user's account.

Endpoints (base url_prefix=/api/v1):
  GET   /account              → 200  current user record
  GET   /account/currencies   → 200  supported display currencies
  PATCH /account/currency     → 200  change the preferred currency
"""

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from evenup.app.extensions import db
from evenup.app.middleware.identity import require_current_user
from evenup.app.models.person import Person
from evenup.app.schemas.person_schema import PersonSchema, UpdateCurrencySchema
from evenup.app.services import account_service, currency_service
from evenup.app.services.storage_service import LedgerStore

account_bp = Blueprint("account", __name__)


def _serialize_account(user: Person) -> dict:
    cache = current_app.extensions["evenup.currency"]
    payload = PersonSchema().dump(user)
    payload["currency"] = cache.code()
    payload["currency_symbol"] = cache.symbol()
    return payload


@account_bp.route("/account", methods=["GET"])
@require_current_user
def get_account():
    user = account_service.get_current_user(
        LedgerStore(db.session),
        g.user_id,
        default_name=current_app.config["CURRENT_USER_NAME"],
        default_email=current_app.config["CURRENT_USER_EMAIL"],
    )
    # The first read may have bootstrapped the record.
    db.session.commit()
    return jsonify({"data": _serialize_account(user), "warnings": []}), 200


@account_bp.route("/account/currencies", methods=["GET"])
def list_currencies():
    return jsonify({
        "data": [
            {"code": c.code, "symbol": c.symbol, "name": c.name}
            for c in currency_service.list_currencies()
        ],
        "warnings": [],
    }), 200


@account_bp.route("/account/currency", methods=["PATCH"])
@require_current_user
def update_currency():
    data = UpdateCurrencySchema().load(request.get_json(force=True) or {})
    user = account_service.update_currency(
        LedgerStore(db.session),
        g.user_id,
        data["currency"],
        cache=current_app.extensions["evenup.currency"],
        default_name=current_app.config["CURRENT_USER_NAME"],
        default_email=current_app.config["CURRENT_USER_EMAIL"],
    )
    db.session.commit()
    return jsonify({"data": _serialize_account(user), "warnings": []}), 200
