"""
Community Governance Platform
Governance domain models.

Models:
    - ArchitectureElement: goal / strategy / capability / principle node
    - ElementRelationship: typed edge between two elements
    - Proposal: change proposal with a voting lifecycle
    - Vote: one row per (proposal, user), last vote wins
    - Discussion: threaded comments on proposals or elements
"""

from app.models import _utcnow, _uuid, db

# ── Constants ────────────────────────────────────────────────────────────────

ELEMENT_TYPES = ("goal", "strategy", "capability", "principle")

VOTE_TYPES = ("approve", "reject", "abstain")

# Only these proposal statuses accept new votes.
VOTABLE_STATUSES = frozenset({"voting", "open"})

PROPOSAL_STATUSES = {"draft", "open", "voting", "closed", "accepted", "rejected", "withdrawn"}


class ArchitectureElement(db.Model):
    """Governance architecture node, identified by a unique ``code``."""

    __tablename__ = "architecture_elements"
    __table_args__ = (
        db.Index("idx_arch_elements_type", "element_type"),
        db.Index("idx_arch_elements_status", "status"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    element_type = db.Column(
        db.String(50), nullable=False,
        comment="goal | strategy | capability | principle",
    )
    code = db.Column(db.String(20), unique=True, nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(50), default="draft")
    parent_id = db.Column(db.String(36), db.ForeignKey("architecture_elements.id"), nullable=True)
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    meta = db.Column("metadata", db.JSON, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.element_type,
            "code": self.code,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "parentId": self.parent_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class ElementRelationship(db.Model):
    __tablename__ = "element_relationships"
    __table_args__ = (
        db.UniqueConstraint("source_id", "target_id", "relationship_type", name="uq_element_relationship"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    source_id = db.Column(
        db.String(36), db.ForeignKey("architecture_elements.id", ondelete="CASCADE"),
    )
    target_id = db.Column(
        db.String(36), db.ForeignKey("architecture_elements.id", ondelete="CASCADE"),
    )
    relationship_type = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)


class Proposal(db.Model):
    """
    Change proposal.

    ``voting_starts`` / ``voting_ends`` are informational; only ``status``
    decides whether a vote is accepted.
    """

    __tablename__ = "proposals"
    __table_args__ = (
        db.Index("idx_proposals_status", "status"),
        db.Index("idx_proposals_type", "proposal_type"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    proposal_type = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(50), default="draft")
    author_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    element_id = db.Column(
        db.String(36), db.ForeignKey("architecture_elements.id", ondelete="SET NULL"), nullable=True,
    )
    voting_starts = db.Column(db.DateTime(timezone=True))
    voting_ends = db.Column(db.DateTime(timezone=True))
    meta = db.Column("metadata", db.JSON, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @property
    def accepts_votes(self) -> bool:
        return self.status in VOTABLE_STATUSES


class Vote(db.Model):
    """
    A user's current vote on a proposal.

    The (proposal_id, user_id) pair is unique; a repeated cast overwrites
    ``vote_type``, ``comment`` and ``created_at`` in place.
    """

    __tablename__ = "votes"
    __table_args__ = (
        db.UniqueConstraint("proposal_id", "user_id", name="uq_vote_proposal_user"),
        db.Index("idx_votes_proposal", "proposal_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    proposal_id = db.Column(
        db.String(36), db.ForeignKey("proposals.id", ondelete="CASCADE"), nullable=False,
    )
    user_id = db.Column(
        db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    vote_type = db.Column(db.String(20), nullable=False, comment="approve | reject | abstain")
    comment = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)


class Discussion(db.Model):
    __tablename__ = "discussions"
    __table_args__ = (
        db.Index("idx_discussions_proposal", "proposal_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(200))
    content = db.Column(db.Text, nullable=False)
    author_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    parent_id = db.Column(db.String(36), db.ForeignKey("discussions.id", ondelete="CASCADE"), nullable=True)
    proposal_id = db.Column(db.String(36), db.ForeignKey("proposals.id", ondelete="CASCADE"), nullable=True)
    element_id = db.Column(
        db.String(36), db.ForeignKey("architecture_elements.id", ondelete="CASCADE"), nullable=True,
    )
    discussion_type = db.Column(db.String(50), default="general")
    status = db.Column(db.String(50), default="active")
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
