"""
app/__init__.py — Flask application factory.

Pattern: create_app(config_name) creates and returns a configured Flask app.
         Nothing is initialised at import time, so tests can build isolated
         app instances.

Responsibilities:
  1. Load configuration from config_by_name[config_name]
  2. Initialise extensions (SQLAlchemy, Marshmallow) via init_app()
  3. Create the ledger table when CREATE_TABLES_ON_STARTUP is set
  4. Attach the per-app CurrencyCache at app.extensions["evenup.currency"]
  5. Register all route blueprints under /api/v1
  6. Register global error handlers (AppError → JSON, Exception → 500)
  7. Register a custom JSON provider to serialise Decimal as string
"""

from __future__ import annotations

import traceback
from decimal import Decimal

from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from evenup.config import config_by_name, validate_production_config


# ── Custom JSON provider ───────────────────────────────────────────────────
# Monetary amounts leave the API as strings, never as JSON numbers.

class DecimalJSONProvider(DefaultJSONProvider):
    """Decimal("10.50") → "10.50" (not 10.5)."""

    def default(self, o):
        if isinstance(o, Decimal):
            return str(o)
        return super().default(o)


# ── Application factory ────────────────────────────────────────────────────

def create_app(config_name: str = "development") -> Flask:
    """
    Creates and returns a configured Flask application instance.

    Args:
        config_name: One of "development", "testing", "production".
                     Defaults to "development".
    """
    app = Flask(__name__)
    app.json_provider_class = DecimalJSONProvider
    app.json = DecimalJSONProvider(app)

    # ── Configuration ──────────────────────────────────────────────────────
    config_class = config_by_name.get(config_name, config_by_name["development"])
    app.config.from_object(config_class)

    if config_name == "production":
        validate_production_config(app)  # raises ValueError if misconfigured

    # ── Extensions ─────────────────────────────────────────────────────────
    from evenup.app.extensions import db, ma
    db.init_app(app)
    ma.init_app(app)

    # Registers the ledger_entries table on db.metadata.
    from evenup.app.models import ledger_entry  # noqa: F401

    if app.config.get("CREATE_TABLES_ON_STARTUP"):
        with app.app_context():
            db.create_all()

    _register_currency_cache(app)

    # ── Blueprints ─────────────────────────────────────────────────────────
    _register_blueprints(app)

    # ── Error handlers ─────────────────────────────────────────────────────
    _register_error_handlers(app)
    _register_cors(app)

    app.logger.info(
        "evenup app created config=%s current_user=%s",
        config_name,
        app.config["CURRENT_USER_ID"],
    )
    return app


def _register_currency_cache(app: Flask) -> None:
    """
    One CurrencyCache per app. The loader reads the stored preference
    through the request's session, so it must run inside an app context.
    """
    from evenup.app.extensions import db
    from evenup.app.services.currency_service import CurrencyCache
    from evenup.app.services.storage_service import LedgerStore

    def load_stored_currency() -> str | None:
        user = LedgerStore(db.session).get_current_user()
        if user is None or user.id != app.config["CURRENT_USER_ID"]:
            return None
        return user.currency

    app.extensions["evenup.currency"] = CurrencyCache(
        load_stored_currency,
        default_code=app.config["DEFAULT_CURRENCY"],
    )


def _register_blueprints(app: Flask) -> None:
    """Registers all route blueprints under the /api/v1 prefix."""
    from evenup.app.routes.account import account_bp
    from evenup.app.routes.activity import activity_bp
    from evenup.app.routes.balances import balances_bp
    from evenup.app.routes.expenses import expenses_bp
    from evenup.app.routes.friends import friends_bp
    from evenup.app.routes.groups import groups_bp
    from evenup.app.routes.settlements import settlements_bp

    for blueprint in (
            account_bp,
            activity_bp,
            balances_bp,
            expenses_bp,
            friends_bp,
            groups_bp,
            settlements_bp,
    ):
        app.register_blueprint(blueprint, url_prefix="/api/v1")


def _register_error_handlers(app: Flask) -> None:
    """
    Handlers:
      AppError        → structured JSON error envelope with its HTTP status
      ValidationError → first marshmallow field error as MISSING_FIELD /
                        INVALID_FIELD / a registered code (400)
      Exception       → generic INTERNAL_ERROR (500); traceback logged only

    Stack traces never leave the server.
    """
    from evenup.app.errors import AppError, ErrorCode

    known_codes = set(
        value for name, value in vars(ErrorCode).items() if not name.startswith("_")
    )

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        # Routes never catch AppError; they let it propagate here.
        if error.http_status >= 500:
            app.logger.error("AppError %r", error)
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        field, raw_message = _first_validation_error(error.messages)

        if raw_message in known_codes:
            code = raw_message
            message = _code_to_message(code)
        elif raw_message.startswith("Missing data for required field"):
            code = ErrorCode.MISSING_FIELD
            message = raw_message
        else:
            code = ErrorCode.INVALID_FIELD
            message = raw_message

        response_body = {"error": {"code": code, "message": message}}
        if field is not None:
            response_body["error"]["field"] = field
        return jsonify(response_body), 400

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        # Unknown routes and wrong methods keep their own status.
        if isinstance(error, HTTPException):
            return jsonify({
                "error": {
                    "code": (error.name or "HTTP_ERROR").upper().replace(" ", "_"),
                    "message": error.description,
                },
            }), error.code
        app.logger.error(
            "Unhandled exception: %s\n%s",
            str(error),
            traceback.format_exc(),
        )
        return jsonify({
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "message": "An unexpected error occurred. Please try again later.",
            }
        }), 500


def _first_validation_error(messages) -> tuple[str | None, str]:
    """
    Walks marshmallow's nested messages down to the first leaf string.

    {"participant_ids": ["DUPLICATE_SPLIT_USER"]} → ("participant_ids", "DUPLICATE_SPLIT_USER")
    {"new_members": {0: {"name": [...]}}}         → ("new_members", ...)
    """
    field = None
    node = messages
    while True:
        if isinstance(node, dict):
            if not node:
                return field, "Invalid input."
            key, node = next(iter(node.items()))
            if field is None and key != "_schema":
                field = str(key)
        elif isinstance(node, list):
            if not node:
                return field, "Invalid input."
            node = node[0]
        else:
            return field, str(node)


def _register_cors(app: Flask) -> None:
    """Adds permissive CORS headers when DEBUG or TESTING is on."""

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if app.config.get("DEBUG") or app.config.get("TESTING"):
            response.headers["Access-Control-Allow-Origin"] = origin if origin else "*"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PATCH, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response


def _code_to_message(code: str) -> str:
    """
    Default message for a ValidationError whose message IS an error code
    (e.g. INVALID_AMOUNT_PRECISION raised from a schema validator).
    """
    _messages = {
        "INVALID_AMOUNT": "Amount must be greater than zero and at most 9999999999.99.",
        "INVALID_AMOUNT_PRECISION": "Amount must have at most 2 decimal places.",
        "INVALID_CATEGORY": "The category value is not valid.",
        "INVALID_SPLIT_TYPE": "split_type must be one of equal, percentage, exact or shares.",
        "INVALID_CURRENCY": "The currency code is not supported.",
        "EMPTY_PARTICIPANTS": "Select at least one person to split with.",
        "DUPLICATE_SPLIT_USER": "The same person appears more than once in the split.",
    }
    return _messages.get(code, "Invalid input.")
