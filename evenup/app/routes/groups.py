"""
routes/groups.py — Group route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No direct ledger access.

Endpoints (base url_prefix=/api/v1):
  GET  /groups       → 200  list groups
  POST /groups       → 201  create a group (current user is added first)
  GET  /groups/:id   → 200  group, its expenses and derived totals
"""

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from evenup.app.extensions import db
from evenup.app.middleware.identity import require_current_user
from evenup.app.schemas.expense_schema import ExpenseSchema
from evenup.app.schemas.group_schema import CreateGroupSchema, GroupSchema
from evenup.app.services import account_service, group_service
from evenup.app.services.storage_service import LedgerStore

groups_bp = Blueprint("groups", __name__)


@groups_bp.route("/groups", methods=["GET"])
@require_current_user
def list_groups():
    groups = group_service.list_groups(LedgerStore(db.session))
    return jsonify({"data": GroupSchema(many=True).dump(groups), "warnings": []}), 200


@groups_bp.route("/groups", methods=["POST"])
@require_current_user
def create_group():
    """POST /groups — needs at least one selected friend or new member."""
    data = CreateGroupSchema().load(request.get_json(force=True) or {})
    store = LedgerStore(db.session)
    current_user = account_service.get_current_user(
        store,
        g.user_id,
        default_name=current_app.config["CURRENT_USER_NAME"],
        default_email=current_app.config["CURRENT_USER_EMAIL"],
    )
    group = group_service.create_group(store, current_user, data)
    db.session.commit()
    return jsonify({"data": GroupSchema().dump(group), "warnings": []}), 201


@groups_bp.route("/groups/<group_id>", methods=["GET"])
@require_current_user
def get_group(group_id: str):
    details = group_service.get_group_details(LedgerStore(db.session), group_id)
    payload = GroupSchema().dump(details.group)
    payload["expenses"] = ExpenseSchema(many=True).dump(details.expenses)
    payload["total_spent"] = str(details.total_spent)
    payload["average_per_member"] = str(details.average_per_member)
    return jsonify({"data": payload, "warnings": []}), 200
