"""
middleware/identity.py — Attaches the acting user to the request.

There is no login. The acting user is the one configured as
CURRENT_USER_ID, and every balance is expressed relative to that id.

The @require_current_user decorator only sets flask.g.user_id. Services
never read flask.g; routes pass g.user_id down as a plain string.
"""

from __future__ import annotations

import functools
from typing import Callable

from flask import current_app, g

from evenup.app.errors import AppError, ErrorCode


def require_current_user(f: Callable) -> Callable:
    """
    Route decorator that sets flask.g.user_id before the view runs.

    Usage:
        @friends_bp.route("", methods=["GET"])
        @require_current_user
        def list_friends():
            user_id = g.user_id
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        _attach_current_user()
        return f(*args, **kwargs)

    return decorated


def _attach_current_user() -> None:
    user_id = str(current_app.config.get("CURRENT_USER_ID") or "").strip()
    if not user_id:
        raise AppError(
            ErrorCode.INTERNAL_ERROR,
            "No current user is configured.",
            500,
        )
    g.user_id = user_id
