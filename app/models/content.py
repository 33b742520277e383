"""
Community Governance Platform
Content domain models.

Models:
    - ContentItem: article / guide / video page with a version counter
    - ContentVersion: snapshot history for a content item
    - Tag, content_tags: many-to-many tagging
    - Comment, Attachment: polymorphic (entity_type, entity_id) add-ons
"""

from app.models import _utcnow, _uuid, db

content_tags = db.Table(
    "content_tags",
    db.Column(
        "content_id", db.String(36),
        db.ForeignKey("content_items.id", ondelete="CASCADE"), primary_key=True,
    ),
    db.Column(
        "tag_id", db.String(36),
        db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True,
    ),
)


class ContentItem(db.Model):
    __tablename__ = "content_items"
    __table_args__ = (
        db.Index("idx_content_status", "status"),
        db.Index("idx_content_type", "content_type"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(300), nullable=False)
    slug = db.Column(db.String(300), unique=True, nullable=False)
    content_type = db.Column(db.String(50), default="article")
    body = db.Column(db.Text)
    excerpt = db.Column(db.Text)
    status = db.Column(db.String(50), default="draft")
    visibility = db.Column(db.String(50), default="internal")
    author_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    reviewer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="SET NULL"), nullable=True,
    )
    version = db.Column(db.Integer, default=1)
    featured_image = db.Column(db.Text)
    featured_at = db.Column(db.DateTime(timezone=True))
    published_at = db.Column(db.DateTime(timezone=True))
    meta = db.Column("metadata", db.JSON, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    tags = db.relationship("Tag", secondary=content_tags, lazy="selectin")


class ContentVersion(db.Model):
    __tablename__ = "content_versions"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    content_id = db.Column(
        db.String(36), db.ForeignKey("content_items.id", ondelete="CASCADE"), nullable=False,
    )
    version_number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(300), nullable=False)
    body = db.Column(db.Text)
    changed_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    change_summary = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)


class Tag(db.Model):
    __tablename__ = "tags"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(100), unique=True, nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text)
    color = db.Column(db.String(7), default="#6B7280")


class Comment(db.Model):
    __tablename__ = "comments"
    __table_args__ = (
        db.Index("idx_comments_entity", "entity_type", "entity_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    entity_type = db.Column(db.String(50), nullable=False)
    entity_id = db.Column(db.String(36), nullable=False)
    author_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    body = db.Column(db.Text, nullable=False)
    parent_id = db.Column(db.String(36), db.ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    status = db.Column(db.String(50), default="active")
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class Attachment(db.Model):
    __tablename__ = "attachments"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    entity_type = db.Column(db.String(50), nullable=False)
    entity_id = db.Column(db.String(36), nullable=False)
    filename = db.Column(db.String(255), nullable=False)
    file_url = db.Column(db.Text, nullable=False)
    file_type = db.Column(db.String(100))
    file_size = db.Column(db.Integer)
    uploaded_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    uploaded_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
