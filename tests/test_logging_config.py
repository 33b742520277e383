"""
Tests — structured logging.

Covers:
    - JSON formatter emits request and domain fields passed via ``extra``
    - Readable formatter renders context fields as key=value tags
    - Request context filter fills request_id / user_id from ``g``
    - Vote and reseed log lines carry proposal_id / seed_version
"""

import json
import logging

from flask import g

from app.middleware.logging_config import JSONFormatter, ReadableFormatter, RequestContextFilter
from app.models import db as _db
from app.services import seed_service, vote_service


def _record(msg="hello", **extra):
    record = logging.LogRecord("app.test", logging.INFO, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_includes_domain_fields(self):
        out = json.loads(JSONFormatter().format(
            _record(proposal_id="p-1", seed_version=3, duration_ms=12.5, user_id=None),
        ))
        assert out["message"] == "hello"
        assert out["level"] == "INFO"
        assert out["proposal_id"] == "p-1"
        assert out["seed_version"] == 3
        assert out["duration_ms"] == 12.5
        assert "user_id" not in out

    def test_readable_renders_tags(self):
        line = ReadableFormatter(color=False).format(_record(duration_ms=42, request_id="abc", proposal_id="p-9"))
        assert "app.test: hello [42ms]" in line
        assert "request_id=abc" in line
        assert "proposal_id=p-9" in line
        assert "\033[" not in line


class TestRequestContextFilter:
    def test_fills_from_request(self, app):
        record = _record()
        with app.test_request_context("/api/votes"):
            g.request_id = "req-7"
            g.current_user = {"id": "u-7"}
            assert RequestContextFilter().filter(record) is True
        assert record.request_id == "req-7"
        assert record.user_id == "u-7"

    def test_explicit_extra_wins(self, app):
        record = _record(user_id="u-explicit")
        with app.test_request_context("/api/votes"):
            g.current_user = {"id": "u-other"}
            RequestContextFilter().filter(record)
        assert record.user_id == "u-explicit"

    def test_outside_request_is_untouched(self):
        record = _record()
        RequestContextFilter().filter(record)
        assert not hasattr(record, "request_id")


class TestDomainLogCalls:
    def test_vote_cast_logs_proposal_and_user(self, caplog, make_proposal, member):
        proposal = make_proposal()
        with caplog.at_level(logging.INFO, logger="app.services.vote_service"):
            vote_service.cast_vote(
                {"proposalId": proposal.id, "voteType": "approve"}, {"id": member.id, "role": "member"},
            )
        record = next(r for r in caplog.records if r.getMessage() == "Vote cast type=approve")
        assert record.proposal_id == proposal.id
        assert record.user_id == member.id

    def test_reseed_logs_seed_version(self, caplog):
        _db.session.commit()
        with caplog.at_level(logging.INFO, logger="app.services.seed_service"):
            with _db.engine.begin() as conn:
                seed_service.reseed(conn, 7)
        versions = {getattr(r, "seed_version", None) for r in caplog.records if r.name == "app.services.seed_service"}
        assert versions == {7}
