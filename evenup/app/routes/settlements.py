"""
routes/settlements.py — Settle-up route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No direct ledger access.

The request names only the other person and the amount. Who pays whom is
derived from the current balance by settlement_service.

Endpoints (base url_prefix=/api/v1):
  GET  /settlements    → 200  list settlements (?group_id= to filter)
  POST /settlements    → 201  record a payment
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from evenup.app.extensions import db
from evenup.app.middleware.identity import require_current_user
from evenup.app.schemas.settlement_schema import CreateSettlementSchema, SettlementSchema
from evenup.app.services import settlement_service
from evenup.app.services.storage_service import LedgerStore

settlements_bp = Blueprint("settlements", __name__)


@settlements_bp.route("/settlements", methods=["GET"])
@require_current_user
def list_settlements():
    settlements = settlement_service.list_settlements(
        LedgerStore(db.session),
        group_id=request.args.get("group_id") or None,
    )
    return jsonify({
        "data": SettlementSchema(many=True).dump(settlements),
        "warnings": [],
    }), 200


@settlements_bp.route("/settlements", methods=["POST"])
@require_current_user
def create_settlement():
    data = CreateSettlementSchema().load(request.get_json(force=True) or {})
    settlement = settlement_service.create_settlement(LedgerStore(db.session), g.user_id, data)
    db.session.commit()
    return jsonify({"data": SettlementSchema().dump(settlement), "warnings": []}), 201
