"""
routes/balances.py — Balance route handlers.

Layer rules:
  - Parse query params, call ONE service, return envelope.
  - No business logic. Balances are never computed here; they come from
    balance_service.compute_balances() via the service entry points.

Sign convention in every payload: balance > 0 means the person owes the
current user, balance < 0 means the current user owes them.

Endpoints (base url_prefix=/api/v1):
  GET /balances?filter=all|owed|owe|settled&sort=amount|name  → 200
  GET /balances/:person_id                                    → 200
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from flask import Blueprint, current_app, g, jsonify, request

from evenup.app.errors import AppError, ErrorCode
from evenup.app.extensions import db
from evenup.app.middleware.identity import require_current_user
from evenup.app.schemas.person_schema import PersonSchema
from evenup.app.services import balance_service
from evenup.app.services.balance_service import BalanceFilter, BalanceSort, PersonBalance
from evenup.app.services.storage_service import LedgerStore

balances_bp = Blueprint("balances", __name__)

_CENT = Decimal("0.01")


def _money(value: Decimal) -> str:
    """Balances are exact internally; the wire carries them to the cent."""
    rounded = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    # A residue below half a cent reads "0.00", never "-0.00".
    return str(rounded.copy_abs() if rounded == 0 else rounded)


def _parse_choice(param: str, enum_cls: type[Enum], default: Enum) -> Enum:
    raw = request.args.get(param)
    if raw is None or raw == "":
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        raise AppError(
            ErrorCode.INVALID_FILTER,
            f"'{raw}' is not a valid {param}. "
            f"Valid values: {', '.join(c.value for c in enum_cls)}.",
            400,
            field=param,
        )


def _serialize_person_balance(item: PersonBalance) -> dict:
    cache = current_app.extensions["evenup.currency"]
    return {
        "person": PersonSchema().dump(item.person),
        "balance": _money(item.balance),
        "formatted": cache.format(item.balance),
    }


@balances_bp.route("/balances", methods=["GET"])
@require_current_user
def list_balances():
    """
    GET /balances

    The summary always covers everyone; ?filter= only narrows `people`.
    """
    balance_filter = _parse_choice("filter", BalanceFilter, BalanceFilter.ALL)
    sort_by = _parse_choice("sort", BalanceSort, BalanceSort.AMOUNT)

    people, summary = balance_service.get_balance_overview(
        LedgerStore(db.session),
        g.user_id,
        balance_filter=balance_filter,
        sort_by=sort_by,
    )
    return jsonify({
        "data": {
            "people": [_serialize_person_balance(p) for p in people],
            "summary": {
                "total_owed": _money(summary.total_owed),
                "total_owe": _money(summary.total_owe),
                "net": _money(summary.net),
                "open_count": summary.open_count,
            },
            "currency": current_app.extensions["evenup.currency"].code(),
        },
        "warnings": [],
    }), 200


@balances_bp.route("/balances/<person_id>", methods=["GET"])
@require_current_user
def get_balance(person_id: str):
    item = balance_service.get_balance_with(LedgerStore(db.session), g.user_id, person_id)
    return jsonify({"data": _serialize_person_balance(item), "warnings": []}), 200
