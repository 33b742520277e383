"""Proposal service — list, detail and author/admin-guarded writes.

Transaction policy: writes commit, then append an activity entry whose
result is discarded.

Status rules on update:
- admin: any status in PROPOSAL_STATUSES
- author: ``open`` (publish a draft) or ``withdrawn``
- anything else is ignored, not rejected
"""
import logging

from sqlalchemy import func, select

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models import db
from app.models.activity import log_activity
from app.models.auth import User
from app.models.governance import (
    PROPOSAL_STATUSES,
    ArchitectureElement,
    Discussion,
    Proposal,
    Vote,
)
from app.utils.helpers import bounded_int

logger = logging.getLogger(__name__)

AUTHOR_STATUSES = frozenset({"open", "withdrawn"})


def _iso(value):
    return value.isoformat() if value else None


def _vote_count(vote_type):
    return (
        select(func.count())
        .where(Vote.proposal_id == Proposal.id, Vote.vote_type == vote_type)
        .correlate(Proposal)
        .scalar_subquery()
    )


def _comment_count():
    return (
        select(func.count())
        .where(Discussion.proposal_id == Proposal.id)
        .correlate(Proposal)
        .scalar_subquery()
    )


def _format(row) -> dict:
    p = row.Proposal
    return {
        "id": p.id,
        "title": p.title,
        "content": p.content,
        "proposalType": p.proposal_type,
        "status": p.status,
        "author": {"id": p.author_id, "name": row.author_name, "avatar": row.author_avatar},
        "element": (
            {"id": p.element_id, "title": row.element_title, "code": row.element_code}
            if p.element_id else None
        ),
        "votes": {"approve": row.approve_count, "reject": row.reject_count},
        "commentCount": row.comment_count,
        "votingStarts": _iso(p.voting_starts),
        "votingEnds": _iso(p.voting_ends),
        "createdAt": _iso(p.created_at),
        "updatedAt": _iso(p.updated_at),
    }


def _base_query():
    return (
        select(
            Proposal,
            User.display_name.label("author_name"),
            User.avatar_url.label("author_avatar"),
            ArchitectureElement.title.label("element_title"),
            ArchitectureElement.code.label("element_code"),
            _vote_count("approve").label("approve_count"),
            _vote_count("reject").label("reject_count"),
            _comment_count().label("comment_count"),
        )
        .outerjoin(User, Proposal.author_id == User.id)
        .outerjoin(ArchitectureElement, Proposal.element_id == ArchitectureElement.id)
    )


def list_proposals(args) -> dict:
    status = args.get("status") or None
    proposal_type = args.get("type") or None
    limit = bounded_int(args.get("limit"), 20, minimum=1, maximum=100)
    offset = bounded_int(args.get("offset"), 0)

    filters = []
    if status:
        filters.append(Proposal.status == status)
    if proposal_type:
        filters.append(Proposal.proposal_type == proposal_type)

    rows = db.session.execute(
        _base_query().where(*filters)
        .order_by(Proposal.created_at.desc())
        .limit(limit).offset(offset)
    ).all()
    total = db.session.execute(
        select(func.count()).select_from(Proposal).where(*filters)
    ).scalar_one()

    return {
        "proposals": [_format(r) for r in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


def get_proposal(proposal_id) -> dict:
    row = db.session.execute(_base_query().where(Proposal.id == proposal_id)).first()
    if row is None:
        raise NotFoundError(resource="Proposal", resource_id=proposal_id)

    comments = db.session.execute(
        select(Discussion, User.display_name, User.avatar_url)
        .outerjoin(User, Discussion.author_id == User.id)
        .where(Discussion.proposal_id == proposal_id)
        .order_by(Discussion.created_at.asc())
    ).all()

    return {
        "proposal": _format(row),
        "comments": [
            {
                "id": d.id,
                "content": d.content,
                "author": {"id": d.author_id, "name": name, "avatar": avatar},
                "createdAt": _iso(d.created_at),
            }
            for d, name, avatar in comments
        ],
    }


def _require_strings(data, *fields):
    """Reject present, non-null values of ``fields`` that are not strings."""
    bad = [f for f in fields if data.get(f) is not None and not isinstance(data[f], str)]
    if bad:
        raise ValidationError("Fields must be strings", details={"fields": bad})


def create_proposal(data, user) -> dict:
    _require_strings(data, "title", "content", "proposalType", "elementId")
    title = data.get("title")
    content = data.get("content")
    proposal_type = data.get("proposalType")
    if not title or not content or not proposal_type:
        raise ValidationError("Title, content, and proposal type are required")

    element_id = data.get("elementId") or None
    if element_id and db.session.get(ArchitectureElement, element_id) is None:
        raise NotFoundError(resource="Architecture element", resource_id=element_id)

    proposal = Proposal(
        title=title,
        content=content,
        proposal_type=proposal_type,
        author_id=user["id"],
        element_id=element_id,
        status="draft",
    )
    db.session.add(proposal)
    db.session.commit()

    _ = log_activity(
        user["id"], "proposal_created", "proposal", proposal.id,
        {"title": title, "proposalType": proposal_type},
    )
    return {"success": True, "id": proposal.id}


def _load_for_write(proposal_id, user) -> Proposal:
    if not proposal_id:
        raise ValidationError("Proposal ID is required")
    proposal = db.session.get(Proposal, proposal_id)
    if proposal is None:
        raise NotFoundError(resource="Proposal", resource_id=proposal_id)
    if proposal.author_id != user["id"] and user.get("role") != "admin":
        raise ForbiddenError()
    return proposal


def update_proposal(data, user) -> dict:
    _require_strings(data, "id", "title", "content", "status")
    proposal = _load_for_write(data.get("id"), user)

    if data.get("title"):
        proposal.title = data["title"]
    if data.get("content"):
        proposal.content = data["content"]

    status = data.get("status")
    if status:
        if user.get("role") == "admin":
            if status not in PROPOSAL_STATUSES:
                raise ValidationError("Invalid status", details={"status": status})
            proposal.status = status
        elif proposal.author_id == user["id"] and status in AUTHOR_STATUSES:
            proposal.status = status

    db.session.commit()

    _ = log_activity(user["id"], "proposal_updated", "proposal", proposal.id)
    return {"success": True}


def delete_proposal(proposal_id, user) -> dict:
    proposal = _load_for_write(proposal_id, user)
    db.session.delete(proposal)
    db.session.commit()
    logger.info("Proposal deleted", extra={"proposal_id": proposal_id, "user_id": user["id"]})

    _ = log_activity(user["id"], "proposal_deleted", "proposal", proposal_id)
    return {"success": True}
