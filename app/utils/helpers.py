"""Shared utility functions.

dialect_insert:  INSERT construct with ON CONFLICT support for the bound dialect
bounded_int:     query-string integer with default and clamp
json_object:     request body as a dict, 400 for any other JSON value
"""

from flask import request
from sqlalchemy.dialects import postgresql, sqlite

from app.core.exceptions import ValidationError


def dialect_insert(table, dialect_name: str):
    """Return an ``insert(table)`` that supports ``on_conflict_do_*``.

    PostgreSQL and SQLite both implement ``INSERT ... ON CONFLICT``; any
    other backend is rejected rather than silently losing the upsert.
    """
    if dialect_name == "postgresql":
        return postgresql.insert(table)
    if dialect_name == "sqlite":
        return sqlite.insert(table)
    raise NotImplementedError(f"ON CONFLICT inserts are not supported on {dialect_name!r}")


def bounded_int(value, default: int, *, minimum: int = 0, maximum: int | None = None) -> int:
    """Coerce a query-string value to int, falling back to ``default``."""
    try:
        n = int(value)
    except (TypeError, ValueError):
        n = default
    n = max(minimum, n)
    if maximum is not None:
        n = min(maximum, n)
    return n


def json_object() -> dict:
    """Return the request's JSON body as a dict.

    A missing or unparsable body reads as ``{}``; any other JSON value
    (array, string, number) is a ``ValidationError``.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
