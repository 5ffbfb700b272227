"""
routes/friends.py — Friend list route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No direct ledger access.

Endpoints (base url_prefix=/api/v1):
  GET    /friends       → 200  list friends
  POST   /friends       → 201  add a friend
  DELETE /friends/:id   → 200  remove a friend (and from every group)
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from evenup.app.extensions import db
from evenup.app.middleware.identity import require_current_user
from evenup.app.schemas.person_schema import CreateFriendSchema, PersonSchema
from evenup.app.services import friend_service
from evenup.app.services.storage_service import LedgerStore

friends_bp = Blueprint("friends", __name__)


@friends_bp.route("/friends", methods=["GET"])
@require_current_user
def list_friends():
    friends = friend_service.list_friends(LedgerStore(db.session))
    return jsonify({"data": PersonSchema(many=True).dump(friends), "warnings": []}), 200


@friends_bp.route("/friends", methods=["POST"])
@require_current_user
def add_friend():
    """POST /friends — name required; email defaults to a placeholder."""
    data = CreateFriendSchema().load(request.get_json(force=True) or {})
    friend = friend_service.add_friend(LedgerStore(db.session), data)
    db.session.commit()
    return jsonify({"data": PersonSchema().dump(friend), "warnings": []}), 201


@friends_bp.route("/friends/<friend_id>", methods=["DELETE"])
@require_current_user
def remove_friend(friend_id: str):
    friend_service.remove_friend(LedgerStore(db.session), friend_id)
    db.session.commit()
    return jsonify({"data": {"id": friend_id}, "warnings": []}), 200
