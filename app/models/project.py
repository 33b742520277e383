"""Project domain models: Project -> Milestone -> Task, plus working groups.

Deleting a project removes its milestones, tasks and working groups through
``ON DELETE CASCADE`` foreign keys; nothing in the service layer walks the
tree by hand.
"""

from app.models import _utcnow, _uuid, db


class Project(db.Model):
    """Community initiative that owns milestones, tasks and working groups."""

    __tablename__ = "projects"
    __table_args__ = (
        db.Index("idx_projects_status", "status"),
        db.Index("idx_projects_owner", "owner_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False)
    description = db.Column(db.Text)
    project_type = db.Column(
        db.String(50), default="initiative",
        comment="initiative | research | campaign | pilot",
    )
    status = db.Column(db.String(50), default="draft")
    visibility = db.Column(db.String(50), default="members")
    priority = db.Column(db.String(20), default="medium", comment="low | medium | high | critical")
    owner_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    linked_proposal_id = db.Column(
        db.String(36), db.ForeignKey("proposals.id", ondelete="SET NULL"), nullable=True,
    )
    linked_elements = db.Column(db.JSON, default=list)
    start_date = db.Column(db.Date, nullable=True)
    target_end_date = db.Column(db.Date, nullable=True)
    actual_end_date = db.Column(db.Date, nullable=True)
    progress = db.Column(db.Integer, default=0)
    meta = db.Column("metadata", db.JSON, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    milestones = db.relationship("Milestone", back_populates="project", passive_deletes=True)
    tasks = db.relationship("Task", back_populates="project", passive_deletes=True)
    working_groups = db.relationship("WorkingGroup", back_populates="project", passive_deletes=True)


class Milestone(db.Model):
    __tablename__ = "milestones"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    target_date = db.Column(db.Date)
    completed_date = db.Column(db.Date)
    status = db.Column(db.String(50), default="upcoming")
    order_index = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    project = db.relationship("Project", back_populates="milestones")


class Task(db.Model):
    """Unit of work; ``parent_task_id`` gives a shallow subtask tree."""

    __tablename__ = "tasks"
    __table_args__ = (
        db.Index("idx_tasks_project", "project_id"),
        db.Index("idx_tasks_assigned", "assigned_to"),
        db.Index("idx_tasks_status", "status"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False,
    )
    milestone_id = db.Column(
        db.String(36), db.ForeignKey("milestones.id", ondelete="SET NULL"), nullable=True,
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(50), default="backlog")
    priority = db.Column(db.String(20), default="medium")
    assigned_to = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    parent_task_id = db.Column(
        db.String(36), db.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True,
    )
    due_date = db.Column(db.Date)
    estimated_hours = db.Column(db.Numeric(5, 2))
    actual_hours = db.Column(db.Numeric(5, 2))
    order_index = db.Column(db.Integer, default=0)
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    completed_at = db.Column(db.DateTime(timezone=True))
    meta = db.Column("metadata", db.JSON, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    project = db.relationship("Project", back_populates="tasks")


class WorkingGroup(db.Model):
    __tablename__ = "working_groups"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True,
    )
    lead_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = db.Column(db.String(50), default="forming")
    visibility = db.Column(db.String(50), default="members")
    meta = db.Column("metadata", db.JSON, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    project = db.relationship("Project", back_populates="working_groups")


class WorkingGroupMember(db.Model):
    __tablename__ = "working_group_members"
    __table_args__ = (
        db.UniqueConstraint("group_id", "user_id", name="uq_working_group_member"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    group_id = db.Column(db.String(36), db.ForeignKey("working_groups.id", ondelete="CASCADE"))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"))
    role = db.Column(db.String(50), default="member")
    joined_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    left_at = db.Column(db.DateTime(timezone=True))
