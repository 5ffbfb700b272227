"""
routes/expenses.py — Expense route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No direct ledger access.
  - Split rejections arrive as AppError and are rendered by the global
    handler; this module never catches them.

Endpoints (base url_prefix=/api/v1):
  GET  /expenses            → 200  list expenses (?group_id= to filter)
  POST /expenses            → 201  record an expense
  POST /expenses/preview    → 200  resolved shares without saving
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from evenup.app.extensions import db
from evenup.app.middleware.identity import require_current_user
from evenup.app.schemas.expense_schema import (
    CreateExpenseSchema,
    ExpenseSchema,
    ParticipantShareSchema,
    SplitRequestSchema,
)
from evenup.app.services import expense_service
from evenup.app.services.storage_service import LedgerStore

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.route("/expenses", methods=["GET"])
@require_current_user
def list_expenses():
    expenses = expense_service.list_expenses(
        LedgerStore(db.session),
        group_id=request.args.get("group_id") or None,
    )
    return jsonify({"data": ExpenseSchema(many=True).dump(expenses), "warnings": []}), 200


@expenses_bp.route("/expenses", methods=["POST"])
@require_current_user
def create_expense():
    """
    POST /expenses

    paid_by defaults to the current user. With include_current_user (the
    default) the current user is added to the participants if missing.
    """
    data = CreateExpenseSchema().load(request.get_json(force=True) or {})
    expense = expense_service.create_expense(LedgerStore(db.session), g.user_id, data)
    db.session.commit()
    return jsonify({"data": ExpenseSchema().dump(expense), "warnings": []}), 201


@expenses_bp.route("/expenses/preview", methods=["POST"])
@require_current_user
def preview_expense():
    """POST /expenses/preview — same validation as create; nothing is stored."""
    data = SplitRequestSchema().load(request.get_json(force=True) or {})
    shares = expense_service.preview_shares(LedgerStore(db.session), g.user_id, data)
    return jsonify({
        "data": {"participants": ParticipantShareSchema(many=True).dump(shares)},
        "warnings": [],
    }), 200
