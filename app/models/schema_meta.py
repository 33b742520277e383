"""Key/value metadata owned by the schema convergence engine (e.g. ``seed_version``)."""

from app.models import _utcnow, db


class SchemaMeta(db.Model):
    __tablename__ = "schema_meta"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
