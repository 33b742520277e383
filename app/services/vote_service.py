"""Vote ledger service — one vote per (proposal, user), last vote wins.

Transaction policy: each write commits its own change, then appends an
activity entry. The activity write is fire-and-forget; its result is
discarded on purpose.

Operations:
- get_votes:   live tallies, caller's own vote, 10 newest commented votes
- cast_vote:   status-gated atomic upsert keyed on (proposal_id, user_id)
- remove_vote: idempotent delete
"""
import logging

from sqlalchemy import func

from app.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from app.models import _utcnow, _uuid, db
from app.models.activity import log_activity
from app.models.auth import User
from app.models.governance import VOTE_TYPES, Proposal, Vote
from app.utils.helpers import dialect_insert

logger = logging.getLogger(__name__)

RECENT_VOTES_LIMIT = 10


def _iso(value):
    return value.isoformat() if value else None


def get_votes(proposal_id, user=None):
    """Tallies per vote type, the caller's vote (if any) and recent comments.

    Every call is a fresh aggregate; nothing is cached.
    """
    if not proposal_id:
        raise ValidationError("Proposal ID required")

    counts = dict.fromkeys(VOTE_TYPES, 0)
    rows = db.session.execute(
        db.select(Vote.vote_type, func.count())
        .where(Vote.proposal_id == proposal_id)
        .group_by(Vote.vote_type)
    ).all()
    for vote_type, n in rows:
        if vote_type in counts:
            counts[vote_type] = n

    user_vote = None
    if user:
        own = db.session.execute(
            db.select(Vote.vote_type, Vote.comment)
            .where(Vote.proposal_id == proposal_id, Vote.user_id == user["id"])
        ).first()
        if own:
            user_vote = {"type": own.vote_type, "comment": own.comment}

    recent = db.session.execute(
        db.select(Vote.vote_type, Vote.comment, Vote.created_at, User.display_name, User.avatar_url)
        .join(User, Vote.user_id == User.id)
        .where(
            Vote.proposal_id == proposal_id,
            Vote.comment.is_not(None),
            Vote.comment != "",
        )
        .order_by(Vote.created_at.desc())
        .limit(RECENT_VOTES_LIMIT)
    ).all()

    return {
        "counts": counts,
        "userVote": user_vote,
        "recentVotes": [
            {
                "type": r.vote_type,
                "comment": r.comment,
                "user": {"name": r.display_name, "avatar": r.avatar_url},
                "createdAt": _iso(r.created_at),
            }
            for r in recent
        ],
    }


def cast_vote(data, user):
    """Record ``user``'s vote, overwriting any earlier one. Returns get_votes()."""
    proposal_id = data.get("proposalId")
    vote_type = data.get("voteType")
    comment = data.get("comment")

    if not proposal_id or not vote_type:
        raise ValidationError("Proposal ID and vote type required")
    if not isinstance(proposal_id, str):
        raise ValidationError("Proposal ID must be a string")
    if comment is not None and not isinstance(comment, str):
        raise ValidationError("Comment must be a string")
    comment = comment or None
    if not isinstance(vote_type, str) or vote_type not in VOTE_TYPES:
        raise ValidationError("Invalid vote type", details={"voteType": vote_type})

    proposal = db.session.get(Proposal, proposal_id)
    if proposal is None:
        raise NotFoundError(resource="Proposal", resource_id=proposal_id)
    # Voting window bounds are not checked; status alone gates voting.
    if not proposal.accepts_votes:
        raise InvalidStateError(
            "Proposal is not open for voting", details={"status": proposal.status},
        )

    table = Vote.__table__
    stmt = dialect_insert(table, db.engine.dialect.name).values(
        id=_uuid(),
        proposal_id=proposal_id,
        user_id=user["id"],
        vote_type=vote_type,
        comment=comment,
        created_at=_utcnow(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["proposal_id", "user_id"],
        set_={
            "vote_type": stmt.excluded.vote_type,
            "comment": stmt.excluded.comment,
            "created_at": stmt.excluded.created_at,
        },
    )
    db.session.execute(stmt)
    db.session.commit()
    logger.info("Vote cast type=%s", vote_type,
                extra={"proposal_id": proposal_id, "user_id": user["id"]})

    _ = log_activity(user["id"], "vote_cast", "proposal", proposal_id, {"voteType": vote_type})

    return get_votes(proposal_id, user)


def remove_vote(proposal_id, user):
    """Delete ``user``'s vote on the proposal. Absent votes are not an error."""
    if not proposal_id:
        raise ValidationError("Proposal ID required")

    db.session.execute(
        db.delete(Vote).where(Vote.proposal_id == proposal_id, Vote.user_id == user["id"])
    )
    db.session.commit()

    _ = log_activity(user["id"], "vote_removed", "proposal", proposal_id)

    return {"success": True}
