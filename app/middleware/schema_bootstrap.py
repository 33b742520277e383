"""
Schema bootstrap middleware.

Runs the process-wide ``SchemaGuard`` before the first API query. After the
guard reaches READY (or FAILED) the hook is a dictionary lookup.

Disabled with ``SCHEMA_AUTO_CONVERGE=false``; convergence then happens
through ``flask converge-schema`` at deploy time.
"""

from flask import current_app, request

from app.models import db
from app.services.schema_convergence import schema_guard

# Readiness must answer even while the schema is being built.
_SKIP_PATHS = frozenset({"/api/health/ready"})


def init_schema_bootstrap(app, guard=None):
    app.extensions["schema_guard"] = guard or schema_guard

    @app.before_request
    def _ensure_schema():
        if not current_app.config.get("SCHEMA_AUTO_CONVERGE", True):
            return
        if not request.path.startswith("/api/") or request.path in _SKIP_PATHS:
            return
        # Raises SchemaConvergenceError (500) on the call that fails.
        current_app.extensions["schema_guard"].ensure(db.engine)
