"""
Health check blueprint.

Endpoints:
    GET /api/health/ready  — simple 200 for load balancers (skips schema guard)
    GET /api/health/live   — database, schema guard and seed status
"""

import logging
import time

from flask import Blueprint, current_app, jsonify

from app.models import db
from app.services import seed_service
from app.services.schema_convergence import GuardState, schema_guard

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/health")


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Simple readiness probe — always 200 if app is running."""
    return jsonify({"status": "ok"}), 200


@health_bp.route("/live", methods=["GET"])
def live():
    """Detailed liveness check with dependency status."""
    checks = {}
    overall = True

    # ── Database ─────────────────────────────────────────────────────
    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        db_ms = (time.perf_counter() - t0) * 1000
        checks["database"] = {"status": "ok", "latency_ms": round(db_ms, 1), "dialect": db.engine.dialect.name}
    except Exception as exc:
        checks["database"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check — database failed: %s", exc)

    # ── Schema guard ─────────────────────────────────────────────────
    guard = current_app.extensions.get("schema_guard", schema_guard)
    checks["schema"] = guard.status()
    if guard.state == GuardState.FAILED:
        overall = False

    # ── Seed data ────────────────────────────────────────────────────
    if guard.state == GuardState.READY:
        try:
            with db.engine.connect() as conn:
                checks["seed"] = seed_service.seed_status(conn)
        except Exception as exc:
            checks["seed"] = {"status": "error", "detail": str(exc)}
            logger.error("Health check — seed status failed: %s", exc)
    else:
        checks["seed"] = {"status": "skipped", "detail": f"schema {guard.state.value}"}

    status_code = 200 if overall else 503
    return jsonify({
        "status": "healthy" if overall else "degraded",
        "checks": checks,
    }), status_code
