"""
extensions.py — Flask extension singletons.

Initialises SQLAlchemy and marshmallow as module-level objects so they can be
imported anywhere without creating circular dependencies.

Pattern:
    1. Create the extension object here (no app attached yet).
    2. Call init_app(app) inside the app factory in app/__init__.py.
    3. Import `db` or `ma` from here wherever needed.

    from evenup.app.extensions import db, ma

The currency cache is deliberately NOT created here: it is per-app state and
lives in app.extensions["evenup.currency"], built by the factory.
"""

from flask_marshmallow import Marshmallow
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Marshmallow instance, initialised for the app's sake.
#
# Schema inheritance rule:
#   All Schema classes in app/schemas/ inherit from marshmallow.Schema
#   directly, NOT from ma.Schema. ma.Schema requires an active Flask
#   application context, and the storage layer and unit tests load records
#   without one.
ma = Marshmallow()
