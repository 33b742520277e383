"""
Community Governance Platform
Flask Application Factory.

Usage:
    from app import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import json
import logging
import os

import click
from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from app.config import config
from app.models import db
from app.middleware.logging_config import configure_logging
from app.middleware.timing import init_request_timing
from app.middleware.schema_bootstrap import init_schema_bootstrap
from app.middleware.session_auth import init_session_auth
from app.middleware.rate_limiter import init_rate_limits
from app.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit — apply per-blueprint
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())
    os.makedirs(app.instance_path, exist_ok=True)

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Complete the model metadata before the schema guard reads it ─────
    from app.models import registry as _registry  # noqa: F401

    register_error_handlers(app)

    # ── Request pipeline (order matters) ─────────────────────────────────
    # timing → schema guard → bearer session
    init_request_timing(app)
    init_schema_bootstrap(app)
    init_session_auth(app)

    # ── Blueprints ───────────────────────────────────────────────────────
    from app.blueprints.votes_bp import votes_bp
    from app.blueprints.proposals_bp import proposals_bp
    from app.blueprints.architecture_bp import architecture_bp
    from app.blueprints.activity_bp import activity_bp
    from app.blueprints.health_bp import health_bp

    app.register_blueprint(votes_bp)
    app.register_blueprint(proposals_bp)
    app.register_blueprint(architecture_bp)
    app.register_blueprint(activity_bp)
    app.register_blueprint(health_bp)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("converge-schema")
    def converge_schema_cmd():
        """Create missing tables/indexes/columns and reseed if the seed version is stale."""
        guard = app.extensions["schema_guard"]
        guard.reset()
        guard.ensure(db.engine)
        click.echo(json.dumps(guard.status(), indent=2, default=str))

    @app.cli.command("seed-status")
    def seed_status_cmd():
        """Print stored vs expected seed version and seeded row counts."""
        from app.services.seed_service import seed_status

        with db.engine.connect() as conn:
            click.echo(json.dumps(seed_status(conn), indent=2))

    return app
