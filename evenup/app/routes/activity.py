"""
routes/activity.py — Activity feed route handler.

Endpoints (base url_prefix=/api/v1):
  GET /activity?group_id=   → 200  expenses and settlements, newest first
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from evenup.app.extensions import db
from evenup.app.middleware.identity import require_current_user
from evenup.app.models.activity import Activity, ActivityKind
from evenup.app.schemas.expense_schema import ExpenseSchema
from evenup.app.schemas.settlement_schema import SettlementSchema
from evenup.app.services import activity_service
from evenup.app.services.storage_service import LedgerStore

activity_bp = Blueprint("activity", __name__)


def _serialize_activity(entry: Activity) -> dict:
    if entry.kind == ActivityKind.EXPENSE:
        record = ExpenseSchema().dump(entry.record)
    else:
        record = SettlementSchema().dump(entry.record)
    return {"kind": entry.kind.value, "record": record}


@activity_bp.route("/activity", methods=["GET"])
@require_current_user
def list_activity():
    entries = activity_service.get_activity(
        LedgerStore(db.session),
        group_id=request.args.get("group_id") or None,
    )
    return jsonify({
        "data": [_serialize_activity(a) for a in entries],
        "warnings": [],
    }), 200
