"""
Session Auth Middleware — resolves ``Authorization: Bearer <token>`` to
``g.current_user``.

A missing, unknown or expired token leaves the request anonymous
(``g.current_user = None``); endpoints that need a caller use
``require_user()``, which raises ``AuthRequiredError`` (401).
"""

from flask import g, request

from app.core.exceptions import AuthRequiredError
from app.services.session_service import get_current_user

# Paths that never need the caller resolved
SESSION_SKIP_PREFIXES = (
    "/api/health",
    "/static/",
)


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:].strip() or None


def init_session_auth(app):
    """Register the session lookup as a before_request hook."""

    @app.before_request
    def _session_auth():
        g.current_user = None

        path = request.path
        if not path.startswith("/api/"):
            return
        for prefix in SESSION_SKIP_PREFIXES:
            if path.startswith(prefix):
                return

        token = _bearer_token()
        if token:
            g.current_user = get_current_user(token)


def current_user() -> dict | None:
    return getattr(g, "current_user", None)


def require_user() -> dict:
    """The authenticated caller, or AuthRequiredError."""
    user = current_user()
    if user is None:
        raise AuthRequiredError()
    return user
