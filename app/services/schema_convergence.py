"""
Schema convergence — bring tables, indexes and seed data to the current target.

One ``SchemaGuard`` lives per process. The first request (or ``flask
converge-schema``) runs the check; afterwards the guard short-circuits.

State machine:
    UNCHECKED ──all tables present──▶ SCHEMA_PRESENT ─┐
        │                                             ├─ reseed check ─▶ READY
        └────────tables missing─────▶ MIGRATING ──────┘
    any exception ─▶ FAILED   (no retry in this process; a new process retries)

Every DDL statement is "create if not exists", so concurrent cold starts in
different processes only perform redundant no-ops.
"""

from __future__ import annotations

import enum
import logging
import threading

import sqlalchemy as sa

from app.core.exceptions import SchemaConvergenceError
from app.models import db
from app.seed_data import SEED_VERSION
from app.services import seed_service

logger = logging.getLogger(__name__)


class GuardState(str, enum.Enum):
    UNCHECKED = "unchecked"
    SCHEMA_PRESENT = "schema_present"
    MIGRATING = "migrating"
    READY = "ready"
    FAILED = "failed"


_TERMINAL = frozenset({GuardState.READY, GuardState.FAILED})


class SchemaGuard:
    """Process-scoped, thread-safe, run-once schema check."""

    def __init__(self, metadata: sa.MetaData | None = None, seed_version: int = SEED_VERSION):
        self._metadata = metadata if metadata is not None else db.metadata
        self._seed_version = seed_version
        self._lock = threading.Lock()
        self._state = GuardState.UNCHECKED
        self._error: str | None = None
        self._report: dict = {}

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def required_tables(self) -> list[str]:
        return [t.name for t in self._metadata.sorted_tables]

    def ensure(self, engine: sa.engine.Engine) -> GuardState:
        """Converge once. Raises SchemaConvergenceError only on the failing call."""
        if self._state in _TERMINAL:
            return self._state
        with self._lock:
            if self._state in _TERMINAL:
                return self._state
            try:
                self._converge(engine)
            except Exception as exc:
                self._state = GuardState.FAILED
                self._error = f"{type(exc).__name__}: {exc}"
                logger.error("Schema convergence failed in state %s", self._report.get("path"), exc_info=True)
                raise SchemaConvergenceError(
                    "Schema convergence failed", details={"state": GuardState.FAILED.value},
                ) from exc
            self._state = GuardState.READY
            logger.info("Schema convergence complete: %s", self._report)
        return self._state

    def reset(self) -> None:
        with self._lock:
            self._state = GuardState.UNCHECKED
            self._error = None
            self._report = {}

    def status(self) -> dict:
        return {
            "state": self._state.value,
            "error": self._error,
            **self._report,
        }

    # ── Internals ────────────────────────────────────────────────────────

    def _converge(self, engine) -> None:
        required = self.required_tables
        with engine.connect() as conn:
            present = set(sa.inspect(conn).get_table_names())
        missing = [name for name in required if name not in present]

        self._report = {
            "required_tables": len(required),
            "present_tables": len(required) - len(missing),
        }

        if missing:
            self._state = GuardState.MIGRATING
            self._report["path"] = GuardState.MIGRATING.value
            logger.info("Creating %d missing tables: %s", len(missing), ", ".join(missing))
            self._create_schema(engine)
        else:
            self._state = GuardState.SCHEMA_PRESENT
            self._report["path"] = GuardState.SCHEMA_PRESENT.value

        self._report["added_columns"] = add_missing_columns(engine, self._metadata)

        with engine.begin() as conn:
            self._report["reseeded"] = seed_service.ensure_seeded(conn, self._seed_version)

    def _create_schema(self, engine) -> None:
        with engine.begin() as conn:
            self._metadata.create_all(conn, checkfirst=True)
            # create_all skips indexes of tables that already existed.
            for table in self._metadata.sorted_tables:
                for index in table.indexes:
                    index.create(conn, checkfirst=True)


def add_missing_columns(engine, metadata: sa.MetaData) -> list[str]:
    """
    ADD COLUMN IF NOT EXISTS for model columns missing from existing tables.

    PostgreSQL only; on other backends tables are created whole and nothing
    is altered. Returns the ``table.column`` names that were added.
    """
    if engine.dialect.name != "postgresql":
        return []

    added = []
    with engine.begin() as conn:
        conn.execute(sa.text("SET LOCAL lock_timeout = '5s'"))
        rows = conn.execute(sa.text(
            "SELECT table_name, column_name "
            "FROM information_schema.columns "
            "WHERE table_schema = current_schema()"
        )).fetchall()

        db_columns = {}
        for table_name, column_name in rows:
            db_columns.setdefault(table_name, set()).add(column_name)

        for table in metadata.sorted_tables:
            existing = db_columns.get(table.name)
            if existing is None:
                continue

            for col in table.columns:
                if col.name in existing:
                    continue
                col_type = col.type.compile(dialect=engine.dialect)
                default = ""
                if col.server_default is not None:
                    default = f" DEFAULT {col.server_default.arg}"
                elif col.default is not None and col.default.is_scalar:
                    default = f" DEFAULT {_literal(col.default.arg)}"
                # NOT NULL is left to the model layer: existing rows have no value.
                conn.execute(sa.text(
                    f'ALTER TABLE "{table.name}" '
                    f'ADD COLUMN IF NOT EXISTS "{col.name}" {col_type}{default}'
                ))
                added.append(f"{table.name}.{col.name}")

    if added:
        logger.info("Auto-added %d missing columns: %s", len(added), ", ".join(added))
    return added


def _literal(value) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return str(value)
    return "'" + str(value).replace("'", "''") + "'"


schema_guard = SchemaGuard()
