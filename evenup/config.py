import os
from pathlib import Path

from dotenv import load_dotenv


_PACKAGE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _PACKAGE_DIR.parent

# Root .env is canonical; evenup/.env remains a fallback for local overrides.
load_dotenv(_PROJECT_ROOT / ".env")
load_dotenv(_PACKAGE_DIR / ".env")


def _first_non_empty_env(*names: str, default: str) -> str:
    """Returns the first non-empty env var value from `names`, else `default`."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value != "":
            return value
    return default


def _parse_bool_env(name: str, default: bool) -> bool:
    """Parses a boolean env var ("1", "true", "yes", "on"), else returns `default`."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:

    SECRET_KEY: str = _first_non_empty_env(
        "SECRET_KEY",
        default="change-me-in-production",
    )

    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    JSON_SORT_KEYS: bool = False

    # The identity every balance is expressed against. Resolved once at app
    # creation and passed explicitly into the balance and roster services.
    CURRENT_USER_ID: str = _first_non_empty_env(
        "CURRENT_USER_ID",
        default="current-user",
    )
    CURRENT_USER_NAME: str = _first_non_empty_env(
        "CURRENT_USER_NAME",
        default="You",
    )
    CURRENT_USER_EMAIL: str = _first_non_empty_env(
        "CURRENT_USER_EMAIL",
        default="you@evenup.app",
    )

    DEFAULT_CURRENCY: str = _first_non_empty_env(
        "DEFAULT_CURRENCY",
        default="USD",
    )

    # Alembic is not used; tables are created from the model metadata.
    CREATE_TABLES_ON_STARTUP: bool = _parse_bool_env(
        "CREATE_TABLES_ON_STARTUP",
        default=True,
    )


class DevelopmentConfig(BaseConfig):
    DEBUG:   bool = True
    TESTING: bool = False

    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{_PROJECT_ROOT / 'evenup.db'}",
    )
    SQLALCHEMY_ECHO: bool = False


class TestingConfig(BaseConfig):

    DEBUG:   bool = True
    TESTING: bool = True

    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "TEST_DATABASE_URL",
        "sqlite://",
    )
    SQLALCHEMY_ECHO: bool = False

    CURRENT_USER_ID: str = "current-user"
    DEFAULT_CURRENCY: str = "USD"
    CREATE_TABLES_ON_STARTUP: bool = True


class ProductionConfig(BaseConfig):

    DEBUG:   bool = False
    TESTING: bool = False
    SQLALCHEMY_ECHO: bool = False

    # Heroku / Render hand out 'postgres://' which SQLAlchemy 1.4+ rejects;
    # normalise to 'postgresql://'.
    _raw_db_url: str = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI: str = (
        _raw_db_url.replace("postgres://", "postgresql://", 1)
        if _raw_db_url.startswith("postgres://")
        else _raw_db_url
    )
    CREATE_TABLES_ON_STARTUP: bool = _parse_bool_env(
        "CREATE_TABLES_ON_STARTUP",
        default=False,
    )


def validate_production_config(app) -> None:
    """
    Fail-fast guard for production configuration.

    Called in the app factory immediately after
    app.config.from_object(ProductionConfig).

    Raises ValueError if any required production value is missing or insecure.
    """
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise ValueError(
            "DATABASE_URL environment variable is required in production. "
            "Set it to a valid database connection string."
        )
    if app.config.get("SECRET_KEY") == "change-me-in-production":
        raise ValueError(
            "SECRET_KEY must be set to a strong random value in production. "
            "Do not use the default placeholder."
        )
    if not str(app.config.get("CURRENT_USER_ID", "")).strip():
        raise ValueError("CURRENT_USER_ID must not be blank.")


# ── Config selector ────────────────────────────────────────────────────────
#
# Used by the app factory:
#   from evenup.config import config_by_name
#   app.config.from_object(config_by_name[flask_env])
# ──────────────────────────────────────────────────────────────────────────

config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing":     TestingConfig,
    "production":  ProductionConfig,
}
