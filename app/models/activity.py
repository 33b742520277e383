"""
Community Governance Platform
Activity domain model.

Models:
    - ActivityLog: append-only trail of user actions.

``log_activity`` is the only writer. It is fire-and-forget: it commits its
own row after the caller's primary write has been committed, never raises,
and reports the outcome as an ``ActivityResult`` the caller may ignore.
"""

import logging
from dataclasses import dataclass

from app.models import _utcnow, _uuid, db

logger = logging.getLogger(__name__)


class ActivityLog(db.Model):
    """One row per user action. Rows are never updated."""

    __tablename__ = "activity_log"
    __table_args__ = (
        db.Index("idx_activity_user", "user_id"),
        db.Index("idx_activity_entity", "entity_type", "entity_id"),
        db.Index("idx_activity_created", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = db.Column(db.String(100), nullable=False)
    entity_type = db.Column(db.String(50), nullable=False)
    entity_id = db.Column(db.String(36))
    details = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    def __repr__(self):
        return f"<ActivityLog {self.id}: {self.action} on {self.entity_type}/{self.entity_id}>"


@dataclass(frozen=True)
class ActivityResult:
    ok: bool
    entry_id: str | None = None
    error: str | None = None


# ── Writer ───────────────────────────────────────────────────────────────────

def log_activity(
    user_id: str | None,
    action: str,
    entity_type: str,
    entity_id: str | None = None,
    details: dict | None = None,
) -> ActivityResult:
    """
    Append one activity row in its own transaction.

    Must be called after the caller has committed its primary change:
    a failure here rolls back only the activity row.
    """
    entry = ActivityLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=details or {},
    )
    try:
        db.session.add(entry)
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        logger.warning("Failed to log activity %s on %s/%s: %s", action, entity_type, entity_id, exc)
        return ActivityResult(ok=False, error=str(exc))
    return ActivityResult(ok=True, entry_id=entry.id)
