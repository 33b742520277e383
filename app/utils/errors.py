"""Standardised API error responses.

Every error body is ``{"error": <message>, "code": <code>[, "details": {...}]}``.
Domain exceptions carry their own ``code``; ``E`` only names the codes used
for faults that do not come from ``app.core.exceptions``.

``register_error_handlers(app)`` wires the handlers into Flask once, at app
creation.
"""

from __future__ import annotations

import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from app.core.exceptions import AppError, InternalError

logger = logging.getLogger(__name__)


class E:
    """Codes for errors raised outside the domain exception hierarchy."""

    METHOD_NOT_ALLOWED = "ERR_METHOD_NOT_ALLOWED"
    INTERNAL = "ERR_INTERNAL"


def api_error(code: str, message: str, *, status: int, details: dict | None = None):
    """Return ``(jsonify(body), status)`` in the standard error shape."""
    body: dict = {"error": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), status


def register_error_handlers(app):
    """Map domain exceptions and stray faults to JSON responses."""

    @app.errorhandler(InternalError)
    def _handle_internal(error: InternalError):
        logger.error(
            "Internal error on %s %s: %s", request.method, request.path, error,
            exc_info=error,
        )
        return api_error(error.code, "Internal server error", status=500)

    @app.errorhandler(AppError)
    def _handle_app_error(error: AppError):
        return api_error(error.code, str(error), status=error.http_status, details=error.details)

    @app.errorhandler(HTTPException)
    def _handle_http(error: HTTPException):
        if error.code == 405:
            response, status = api_error(E.METHOD_NOT_ALLOWED, "Method not allowed", status=405)
            allow = error.get_response().headers.get("Allow")
            if allow:
                response.headers["Allow"] = allow
            return response, status
        return jsonify({"error": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        logger.exception("Unexpected error endpoint=%s", request.endpoint)
        return api_error(E.INTERNAL, "Internal server error", status=500)
