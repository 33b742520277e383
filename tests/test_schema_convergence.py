"""
Tests — schema convergence guard.

Covers:
    - Present schema → SCHEMA_PRESENT path, reseed check, READY
    - Empty / partial schema → MIGRATING path, tables and indexes recreated
    - Second cold start is a no-op (no duplicate seed rows)
    - Failure → FAILED, error propagated once, no retry in the same process
    - Lock: concurrent first calls converge exactly once
    - Request middleware and health endpoint wiring
"""

import threading
import time

import pytest
import sqlalchemy as sa

from app.core.exceptions import SchemaConvergenceError
from app.models import db as _db
from app.models.activity import ActivityLog
from app.models.governance import ArchitectureElement, Vote
from app.models.project import Project
from app.seed_data import SEED_VERSION
from app.services import seed_service
from app.services.schema_convergence import GuardState, SchemaGuard


def _count(model):
    return _db.session.execute(sa.select(sa.func.count()).select_from(model)).scalar_one()


def _table_names():
    return set(sa.inspect(_db.engine).get_table_names())


@pytest.fixture()
def guard():
    _db.session.commit()
    return SchemaGuard()


# ═════════════════════════════════════════════════════════════════════════════
# STATE MACHINE
# ═════════════════════════════════════════════════════════════════════════════

class TestGuardPaths:
    def test_starts_unchecked(self, guard):
        assert guard.state == GuardState.UNCHECKED
        assert guard.status()["state"] == "unchecked"

    def test_present_schema_still_seeds(self, guard):
        assert guard.ensure(_db.engine) == GuardState.READY
        status = guard.status()
        assert status["path"] == "schema_present"
        assert status["reseeded"] is True
        assert status["present_tables"] == status["required_tables"]
        assert _count(ArchitectureElement) == 33

    def test_empty_database_migrates(self, guard):
        _db.drop_all()
        assert _table_names().isdisjoint(guard.required_tables)

        assert guard.ensure(_db.engine) == GuardState.READY

        assert set(guard.required_tables) <= _table_names()
        status = guard.status()
        assert status["path"] == "migrating"
        assert status["present_tables"] == 0
        assert _count(Project) == 3

    def test_partial_schema_converges(self, guard):
        Vote.__table__.drop(_db.engine)
        ActivityLog.__table__.drop(_db.engine)

        guard.ensure(_db.engine)

        assert {"votes", "activity_log"} <= _table_names()
        assert guard.status()["path"] == "migrating"
        index_names = {ix["name"] for ix in sa.inspect(_db.engine).get_indexes("votes")}
        assert "idx_votes_proposal" in index_names

    def test_ready_is_terminal(self, guard, monkeypatch):
        guard.ensure(_db.engine)
        calls = []
        monkeypatch.setattr(seed_service, "ensure_seeded", lambda *a, **kw: calls.append(a))
        assert guard.ensure(_db.engine) == GuardState.READY
        assert calls == []

    def test_second_cold_start_is_noop(self):
        _db.session.commit()
        SchemaGuard().ensure(_db.engine)
        before = {m.__tablename__: _count(m) for m in (ArchitectureElement, Project)}

        second = SchemaGuard()
        assert second.ensure(_db.engine) == GuardState.READY
        assert second.status()["reseeded"] is False
        assert {m.__tablename__: _count(m) for m in (ArchitectureElement, Project)} == before

    def test_reset_returns_to_unchecked(self, guard):
        guard.ensure(_db.engine)
        guard.reset()
        assert guard.state == GuardState.UNCHECKED
        assert guard.status() == {"state": "unchecked", "error": None}


# ═════════════════════════════════════════════════════════════════════════════
# FAILURE
# ═════════════════════════════════════════════════════════════════════════════

def _exploding_seed(calls):
    def _ensure_seeded(conn, expected=SEED_VERSION):
        calls.append(expected)
        raise RuntimeError("disk full")
    return _ensure_seeded


class TestGuardFailure:
    def test_failure_is_raised_once(self, guard, monkeypatch):
        calls = []
        monkeypatch.setattr(seed_service, "ensure_seeded", _exploding_seed(calls))

        with pytest.raises(SchemaConvergenceError):
            guard.ensure(_db.engine)
        assert guard.state == GuardState.FAILED
        assert "disk full" in guard.status()["error"]

        # Fail-fast-once: no retry, no second exception.
        assert guard.ensure(_db.engine) == GuardState.FAILED
        assert calls == [SEED_VERSION]

    def test_fresh_guard_retries(self, guard, monkeypatch):
        calls = []
        monkeypatch.setattr(seed_service, "ensure_seeded", _exploding_seed(calls))
        with pytest.raises(SchemaConvergenceError):
            guard.ensure(_db.engine)
        monkeypatch.undo()

        assert SchemaGuard().ensure(_db.engine) == GuardState.READY

    def test_failed_reseed_leaves_marker_unset(self, guard, monkeypatch):
        def _broken_content(conn, project_ids, tag_ids):
            raise RuntimeError("constraint violated")

        monkeypatch.setattr(seed_service, "_insert_content", _broken_content)
        with pytest.raises(SchemaConvergenceError):
            guard.ensure(_db.engine)

        with _db.engine.connect() as conn:
            assert seed_service.read_seed_version(conn) is None
        assert _count(Project) == 0


# ═════════════════════════════════════════════════════════════════════════════
# CONCURRENCY
# ═════════════════════════════════════════════════════════════════════════════

class TestGuardLock:
    def test_concurrent_first_calls_converge_once(self, guard, monkeypatch):
        calls = []

        def _slow_seed(conn, expected=SEED_VERSION):
            calls.append(threading.get_ident())
            time.sleep(0.05)
            return False

        monkeypatch.setattr(seed_service, "ensure_seeded", _slow_seed)
        engine = _db.engine
        results = []

        def _worker():
            results.append(guard.ensure(engine))

        threads = [threading.Thread(target=_worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert results == [GuardState.READY] * 5


# ═════════════════════════════════════════════════════════════════════════════
# WIRING
# ═════════════════════════════════════════════════════════════════════════════

class TestRequestWiring:
    def test_first_request_converges(self, app, client, guard, monkeypatch):
        monkeypatch.setitem(app.config, "SCHEMA_AUTO_CONVERGE", True)
        monkeypatch.setitem(app.extensions, "schema_guard", guard)

        res = client.get("/api/architecture")

        assert res.status_code == 200
        body = res.get_json()
        assert body["total"] == 33
        assert {k: len(v) for k, v in body["grouped"].items()} == {
            "goals": 9, "strategies": 6, "capabilities": 8, "principles": 10,
        }
        assert guard.state == GuardState.READY

    def test_failed_convergence_returns_generic_500_once(self, app, client, guard, monkeypatch):
        monkeypatch.setitem(app.config, "SCHEMA_AUTO_CONVERGE", True)
        monkeypatch.setitem(app.extensions, "schema_guard", guard)
        monkeypatch.setattr(seed_service, "ensure_seeded", _exploding_seed([]))

        res = client.get("/api/activity")
        assert res.status_code == 500
        assert res.get_json() == {"error": "Internal server error", "code": "ERR_SCHEMA"}

        # Later requests in the same process are not retried and not blocked.
        assert client.get("/api/activity").status_code == 200

    def test_ready_probe_skips_guard(self, app, client, guard, monkeypatch):
        monkeypatch.setitem(app.config, "SCHEMA_AUTO_CONVERGE", True)
        monkeypatch.setitem(app.extensions, "schema_guard", guard)
        assert client.get("/api/health/ready").status_code == 200
        assert guard.state == GuardState.UNCHECKED

    def test_live_reports_guard_and_seed(self, app, client, guard, monkeypatch):
        monkeypatch.setitem(app.extensions, "schema_guard", guard)
        guard.ensure(_db.engine)

        res = client.get("/api/health/live")
        assert res.status_code == 200
        checks = res.get_json()["checks"]
        assert checks["database"]["status"] == "ok"
        assert checks["schema"]["state"] == "ready"
        assert checks["seed"]["up_to_date"] is True
        assert checks["seed"]["stored_version"] == SEED_VERSION
