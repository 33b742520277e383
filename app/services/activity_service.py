"""Activity feed — newest-first view over ``activity_log``.

Writes go through ``app.models.activity.log_activity``; this module only reads.
"""
from sqlalchemy import select

from app.models import db
from app.models.activity import ActivityLog
from app.models.auth import User
from app.utils.helpers import bounded_int


def describe(action: str, user_name: str | None, details: dict | None) -> str:
    """One-line, human-readable sentence for a feed entry."""
    name = user_name or "Someone"
    details = details or {}
    templates = {
        "user_registered": f"{name} joined the community",
        "user_login": f"{name} signed in",
        "proposal_created": f'{name} created a new proposal: "{details.get("title") or "Untitled"}"',
        "proposal_updated": f"{name} updated a proposal",
        "proposal_deleted": f"{name} deleted a proposal",
        "vote_cast": f"{name} voted {details.get('voteType', '')} on a proposal",
        "vote_removed": f"{name} removed their vote",
        "discussion_created": f"{name} started a new discussion",
        "reply_created": f"{name} replied to a discussion",
        "element_created": f"{name} created a new architecture element",
        "element_updated": f"{name} updated an architecture element",
    }
    return templates.get(action, f"{name} performed an action")


def list_activity(args) -> dict:
    limit = bounded_int(args.get("limit"), 20, minimum=1, maximum=100)
    offset = bounded_int(args.get("offset"), 0)
    user_id = args.get("userId")
    entity_type = args.get("entityType")

    query = (
        select(ActivityLog, User.display_name, User.avatar_url)
        .outerjoin(User, ActivityLog.user_id == User.id)
    )
    if user_id:
        query = query.where(ActivityLog.user_id == user_id)
    if entity_type:
        query = query.where(ActivityLog.entity_type == entity_type)
    query = query.order_by(ActivityLog.created_at.desc()).limit(limit).offset(offset)

    activities = []
    for entry, name, avatar in db.session.execute(query).all():
        activities.append({
            "id": entry.id,
            "action": entry.action,
            "entityType": entry.entity_type,
            "entityId": entry.entity_id,
            "details": entry.details or {},
            "user": {"id": entry.user_id, "name": name, "avatar": avatar} if entry.user_id else None,
            "createdAt": entry.created_at.isoformat() if entry.created_at else None,
            "description": describe(entry.action, name, entry.details),
        })

    return {"activities": activities, "limit": limit, "offset": offset}
