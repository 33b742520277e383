"""
Tests — vote ledger service.

Covers:
    - Empty tallies for a fresh proposal
    - Cast → read-after-write of the caller's own vote
    - Last vote wins, one row per (proposal, user)
    - Concurrent casts for one (proposal, user) leave a single row
    - Status gating (draft / closed rejected, voting window ignored)
    - Validation of vote type and required fields
    - Idempotent removal
    - Recent comments: non-empty only, newest first, capped at 10
"""

from datetime import datetime, timedelta, timezone
import threading

import pytest

from app import create_app
from app.config import TestingConfig
from app.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from app.models import db as _db
from app.models.activity import ActivityLog
from app.models.auth import User
from app.models.governance import Proposal, Vote
from app.services import vote_service


def _u(user):
    return {"id": user.id, "role": user.role}


def _vote_rows(proposal_id):
    return _db.session.execute(
        _db.select(Vote).where(Vote.proposal_id == proposal_id)
    ).scalars().all()


# ═════════════════════════════════════════════════════════════════════════════
# READ
# ═════════════════════════════════════════════════════════════════════════════

class TestGetVotes:
    def test_fresh_proposal_has_zero_counts(self, make_proposal, member):
        proposal = make_proposal()
        result = vote_service.get_votes(proposal.id, _u(member))
        assert result == {
            "counts": {"approve": 0, "reject": 0, "abstain": 0},
            "userVote": None,
            "recentVotes": [],
        }

    def test_missing_proposal_id(self):
        with pytest.raises(ValidationError):
            vote_service.get_votes(None)

    def test_anonymous_caller_has_no_user_vote(self, make_proposal, member):
        proposal = make_proposal()
        vote_service.cast_vote({"proposalId": proposal.id, "voteType": "approve"}, _u(member))
        result = vote_service.get_votes(proposal.id, None)
        assert result["userVote"] is None
        assert result["counts"]["approve"] == 1


# ═════════════════════════════════════════════════════════════════════════════
# CAST
# ═════════════════════════════════════════════════════════════════════════════

class TestCastVote:
    def test_cast_then_get_returns_own_vote(self, make_proposal, member):
        proposal = make_proposal(status="voting")
        vote_service.cast_vote(
            {"proposalId": proposal.id, "voteType": "reject", "comment": "Too costly"}, _u(member),
        )
        result = vote_service.get_votes(proposal.id, _u(member))
        assert result["userVote"] == {"type": "reject", "comment": "Too costly"}
        assert result["counts"] == {"approve": 0, "reject": 1, "abstain": 0}

    def test_cast_returns_fresh_tallies(self, make_proposal, member):
        proposal = make_proposal()
        result = vote_service.cast_vote({"proposalId": proposal.id, "voteType": "abstain"}, _u(member))
        assert result["counts"]["abstain"] == 1
        assert result["userVote"] == {"type": "abstain", "comment": None}

    def test_second_cast_overwrites_first(self, make_proposal, member):
        proposal = make_proposal()
        vote_service.cast_vote({"proposalId": proposal.id, "voteType": "approve"}, _u(member))
        result = vote_service.cast_vote(
            {"proposalId": proposal.id, "voteType": "reject", "comment": "Changed my mind"}, _u(member),
        )
        assert result["counts"] == {"approve": 0, "reject": 1, "abstain": 0}
        rows = _vote_rows(proposal.id)
        assert len(rows) == 1
        assert rows[0].vote_type == "reject"
        assert rows[0].comment == "Changed my mind"

    def test_back_to_back_casts_last_write_wins(self, make_proposal, member):
        proposal = make_proposal()
        for vote_type in ("approve", "abstain", "reject", "approve"):
            vote_service.cast_vote({"proposalId": proposal.id, "voteType": vote_type}, _u(member))
        rows = _vote_rows(proposal.id)
        assert len(rows) == 1
        assert rows[0].vote_type == "approve"

    def test_counts_are_per_user(self, make_proposal, make_user):
        proposal = make_proposal()
        for vote_type in ("approve", "approve", "reject"):
            vote_service.cast_vote({"proposalId": proposal.id, "voteType": vote_type}, _u(make_user()))
        result = vote_service.get_votes(proposal.id)
        assert result["counts"] == {"approve": 2, "reject": 1, "abstain": 0}

    def test_invalid_vote_type(self, make_proposal, member):
        proposal = make_proposal()
        with pytest.raises(ValidationError) as exc:
            vote_service.cast_vote({"proposalId": proposal.id, "voteType": "maybe"}, _u(member))
        assert str(exc.value) == "Invalid vote type"
        assert _vote_rows(proposal.id) == []

    @pytest.mark.parametrize("data", [{}, {"proposalId": "x"}, {"voteType": "approve"}])
    def test_required_fields(self, member, data):
        with pytest.raises(ValidationError):
            vote_service.cast_vote(data, _u(member))

    def test_unknown_proposal(self, member):
        with pytest.raises(NotFoundError):
            vote_service.cast_vote({"proposalId": "no-such-id", "voteType": "approve"}, _u(member))

    @pytest.mark.parametrize("status", ["draft", "closed", "withdrawn", "accepted"])
    def test_non_votable_status(self, make_proposal, member, status):
        proposal = make_proposal(status=status)
        with pytest.raises(InvalidStateError):
            vote_service.cast_vote({"proposalId": proposal.id, "voteType": "approve"}, _u(member))
        assert _vote_rows(proposal.id) == []

    def test_voting_window_is_not_enforced(self, make_proposal, member):
        past = datetime.now(timezone.utc) - timedelta(days=30)
        proposal = make_proposal(
            status="voting", voting_starts=past, voting_ends=past + timedelta(days=1),
        )
        result = vote_service.cast_vote({"proposalId": proposal.id, "voteType": "approve"}, _u(member))
        assert result["counts"]["approve"] == 1

    def test_cast_logs_activity(self, make_proposal, member):
        proposal = make_proposal()
        vote_service.cast_vote({"proposalId": proposal.id, "voteType": "approve"}, _u(member))
        entry = _db.session.execute(
            _db.select(ActivityLog).where(ActivityLog.action == "vote_cast")
        ).scalar_one()
        assert entry.user_id == member.id
        assert entry.entity_type == "proposal"
        assert entry.entity_id == proposal.id
        assert entry.details == {"voteType": "approve"}

    def test_activity_failure_does_not_abort_vote(self, make_proposal, member):
        proposal = make_proposal()
        _db.session.commit()
        ActivityLog.__table__.drop(_db.engine)

        result = vote_service.cast_vote({"proposalId": proposal.id, "voteType": "approve"}, _u(member))

        assert result["counts"]["approve"] == 1
        assert len(_vote_rows(proposal.id)) == 1


# ═════════════════════════════════════════════════════════════════════════════
# REMOVE
# ═════════════════════════════════════════════════════════════════════════════

class TestRemoveVote:
    def test_remove_without_vote_succeeds(self, make_proposal, member):
        proposal = make_proposal()
        assert vote_service.remove_vote(proposal.id, _u(member)) == {"success": True}

    def test_remove_deletes_only_own_vote(self, make_proposal, member, make_user):
        proposal = make_proposal()
        other = make_user()
        vote_service.cast_vote({"proposalId": proposal.id, "voteType": "approve"}, _u(member))
        vote_service.cast_vote({"proposalId": proposal.id, "voteType": "reject"}, _u(other))

        vote_service.remove_vote(proposal.id, _u(member))

        result = vote_service.get_votes(proposal.id, _u(member))
        assert result["userVote"] is None
        assert result["counts"] == {"approve": 0, "reject": 1, "abstain": 0}

    def test_remove_missing_id(self, member):
        with pytest.raises(ValidationError):
            vote_service.remove_vote("", _u(member))

    def test_remove_twice(self, make_proposal, member):
        proposal = make_proposal()
        vote_service.cast_vote({"proposalId": proposal.id, "voteType": "approve"}, _u(member))
        vote_service.remove_vote(proposal.id, _u(member))
        assert vote_service.remove_vote(proposal.id, _u(member)) == {"success": True}
        assert _vote_rows(proposal.id) == []


# ═════════════════════════════════════════════════════════════════════════════
# RECENT COMMENTS
# ═════════════════════════════════════════════════════════════════════════════

class TestRecentVotes:
    def test_only_commented_votes_listed(self, make_proposal, make_user):
        proposal = make_proposal()
        commenter = make_user(display_name="Commenter", avatar_url="https://img.example.org/c.png")
        silent = make_user()
        blank = make_user()
        vote_service.cast_vote(
            {"proposalId": proposal.id, "voteType": "approve", "comment": "Strong yes"}, _u(commenter),
        )
        vote_service.cast_vote({"proposalId": proposal.id, "voteType": "reject"}, _u(silent))
        vote_service.cast_vote({"proposalId": proposal.id, "voteType": "reject", "comment": ""}, _u(blank))

        recent = vote_service.get_votes(proposal.id)["recentVotes"]
        assert len(recent) == 1
        assert recent[0]["type"] == "approve"
        assert recent[0]["comment"] == "Strong yes"
        assert recent[0]["user"] == {"name": "Commenter", "avatar": "https://img.example.org/c.png"}
        assert recent[0]["createdAt"]

    def test_newest_first_and_capped(self, make_proposal, make_user):
        proposal = make_proposal()
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for i in range(12):
            user = make_user(display_name=f"Voter {i:02d}")
            _db.session.add(Vote(
                proposal_id=proposal.id, user_id=user.id, vote_type="approve",
                comment=f"comment {i:02d}", created_at=base + timedelta(minutes=i),
            ))
        _db.session.commit()

        recent = vote_service.get_votes(proposal.id)["recentVotes"]
        assert len(recent) == vote_service.RECENT_VOTES_LIMIT
        assert [r["comment"] for r in recent[:3]] == ["comment 11", "comment 10", "comment 09"]
        assert vote_service.get_votes(proposal.id)["counts"]["approve"] == 12


# ═════════════════════════════════════════════════════════════════════════════
# CONCURRENCY
# ═════════════════════════════════════════════════════════════════════════════

@pytest.fixture()
def file_app(tmp_path, monkeypatch):
    """A second app on a file-backed SQLite database shared across threads."""
    monkeypatch.setattr(TestingConfig, "SQLALCHEMY_DATABASE_URI", f"sqlite:///{tmp_path / 'votes.db'}")
    application = create_app("testing")
    with application.app_context():
        _db.create_all()
    yield application
    with application.app_context():
        _db.session.remove()
        _db.engine.dispose()


class TestConcurrentCasts:
    def test_parallel_casts_leave_one_row(self, file_app):
        with file_app.app_context():
            user = User(email="racer@example.org", display_name="Racer", role="member")
            _db.session.add(user)
            _db.session.flush()
            proposal = Proposal(
                title="Race", content="...", proposal_type="policy",
                author_id=user.id, status="voting",
            )
            _db.session.add(proposal)
            _db.session.commit()
            caller = {"id": user.id, "role": user.role}
            proposal_id = proposal.id

        barrier = threading.Barrier(2)
        errors = []

        def _cast(vote_type):
            with file_app.app_context():
                try:
                    barrier.wait()
                    vote_service.cast_vote({"proposalId": proposal_id, "voteType": vote_type}, caller)
                except Exception as exc:  # surfaced by the assertion below
                    errors.append(exc)
                finally:
                    _db.session.remove()

        threads = [threading.Thread(target=_cast, args=(t,)) for t in ("approve", "reject")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        with file_app.app_context():
            rows = _vote_rows(proposal_id)
            assert len(rows) == 1
            counts = vote_service.get_votes(proposal_id)["counts"]
            assert sum(counts.values()) == 1
            assert counts[rows[0].vote_type] == 1
