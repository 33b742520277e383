"""Seed service — version-gated replacement of baseline reference data.

All functions take a SQLAlchemy ``Connection`` that is already inside a
transaction (``engine.begin()``); nothing here commits. The version marker
is written last, in the same transaction as the data, so a failed reseed
leaves the old marker and the next cold start redoes the whole reseed.

Rules:
  - Seed rows use reserved-range ids (see ``app.seed_data``).
  - Every insert is conflict-tolerant, so concurrent cold starts never fail
    on duplicates.
  - Architecture elements are upserted by ``code`` instead of deleted:
    user proposals reference them.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, or_, select, text

from app.models import _utcnow
from app.models.auth import User
from app.models.content import ContentItem, Tag, content_tags
from app.models.governance import ArchitectureElement
from app.models.project import Milestone, Project, Task, WorkingGroup
from app.models.schema_meta import SchemaMeta
from app.seed_data import (
    KIND_CONTENT,
    KIND_ELEMENT,
    KIND_MILESTONE,
    KIND_PROJECT,
    KIND_TAG,
    KIND_TASK,
    KIND_WORKING_GROUP,
    SEED_ID_PREFIX,
    SEED_VERSION,
    SYSTEM_USER,
    SYSTEM_USER_ID,
    seed_id,
)
from app.seed_data.architecture import ELEMENT_DATA, element_seed_number
from app.seed_data.content import CONTENT_DATA, TAG_DATA
from app.seed_data.projects import MILESTONE_DATA, PROJECT_DATA, TASK_DATA, WORKING_GROUP_DATA
from app.utils.helpers import dialect_insert

logger = logging.getLogger(__name__)

SEED_VERSION_KEY = "seed_version"

# pg_advisory_xact_lock key serializing concurrent reseeds ("PLE" + "seed")
SEED_LOCK_KEY = 0x504C4553

_SEEDED_TABLES = (
    ArchitectureElement.__table__,
    Project.__table__,
    Milestone.__table__,
    Task.__table__,
    WorkingGroup.__table__,
    ContentItem.__table__,
    Tag.__table__,
)


def _seed_range(column):
    return column.like(f"{SEED_ID_PREFIX}%")


def _system_owned(column):
    return or_(column.is_(None), column == SYSTEM_USER_ID)


# ── Version marker ───────────────────────────────────────────────────────────


def read_seed_version(conn) -> int | None:
    """Stored seed version, or None when missing or unparsable."""
    table = SchemaMeta.__table__
    raw = conn.execute(
        select(table.c.value).where(table.c.key == SEED_VERSION_KEY)
    ).scalar_one_or_none()
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Unparsable seed version marker %r — treating as stale", raw)
        return None


def needs_reseed(conn, expected: int = SEED_VERSION) -> bool:
    """True when the stored marker is absent or strictly lower than ``expected``."""
    stored = read_seed_version(conn)
    return stored is None or stored < expected


def _write_seed_version(conn, version: int) -> None:
    table = SchemaMeta.__table__
    stmt = dialect_insert(table, conn.dialect.name).values(
        key=SEED_VERSION_KEY, value=str(version), updated_at=_utcnow(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["key"],
        set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
    )
    conn.execute(stmt)


# ── Entry points ─────────────────────────────────────────────────────────────


def ensure_seeded(conn, expected: int = SEED_VERSION) -> bool:
    """Reseed if the marker is stale. Returns True when a reseed ran."""
    if not needs_reseed(conn, expected):
        return False
    if conn.dialect.name == "postgresql":
        # Another cold start may have finished while we waited for the lock.
        conn.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": SEED_LOCK_KEY})
        if not needs_reseed(conn, expected):
            return False
    reseed(conn, expected)
    return True


def reseed(conn, version: int = SEED_VERSION) -> dict:
    """Delete seed-originated rows, insert the current seed set, stamp ``version``.

    Returns the number of rows written per entity.
    """
    stored = read_seed_version(conn)
    logger.info("Reseeding reference data: stored=%s target=%s", stored, version,
                extra={"seed_version": version})

    _upsert_system_user(conn)
    _delete_seed_rows(conn)

    element_count = _upsert_elements(conn)
    project_ids = _insert_projects(conn)
    milestone_ids = _insert_milestones(conn, project_ids)
    counts = {
        "architecture_elements": element_count,
        "projects": len(project_ids),
        "milestones": len(milestone_ids),
        "tasks": _insert_tasks(conn, project_ids, milestone_ids),
        "working_groups": _insert_working_groups(conn, project_ids),
    }
    tag_ids = _insert_tags(conn)
    counts["tags"] = len(tag_ids)
    counts["content_items"] = _insert_content(conn, project_ids, tag_ids)

    _write_seed_version(conn, version)
    logger.info("Reseed complete: version=%s rows=%s", version, counts,
                extra={"seed_version": version})
    return counts


def seed_status(conn) -> dict:
    """Stored vs expected version plus reserved-range row counts per table."""
    rows = {}
    for table in _SEEDED_TABLES:
        rows[table.name] = conn.execute(
            select(func.count()).select_from(table).where(_seed_range(table.c.id))
        ).scalar_one()
    stored = read_seed_version(conn)
    return {
        "stored_version": stored,
        "expected_version": SEED_VERSION,
        "up_to_date": stored is not None and stored >= SEED_VERSION,
        "rows": rows,
    }


# ── Destructive phase ────────────────────────────────────────────────────────


def _upsert_system_user(conn) -> None:
    stmt = dialect_insert(User.__table__, conn.dialect.name).values(**SYSTEM_USER)
    conn.execute(stmt.on_conflict_do_nothing())


def _delete_seed_rows(conn) -> None:
    """Remove every row that is safely identifiable as seed-originated.

    Order matters only for rows outside a cascade: children in the reserved
    range are removed even if they were re-parented onto a user project.
    """
    content = ContentItem.__table__
    conn.execute(delete(content).where(or_(
        _seed_range(content.c.id), _system_owned(content.c.author_id),
    )))

    for model in (Task, Milestone, WorkingGroup):
        table = model.__table__
        conn.execute(delete(table).where(_seed_range(table.c.id)))

    projects = Project.__table__
    conn.execute(delete(projects).where(or_(
        _seed_range(projects.c.id), _system_owned(projects.c.owner_id),
    )))

    tags = Tag.__table__
    conn.execute(delete(tags).where(_seed_range(tags.c.id)))

    elements = ArchitectureElement.__table__
    current_codes = [row[1] for row in ELEMENT_DATA]
    stale = select(elements.c.id).where(
        _seed_range(elements.c.id), elements.c.code.not_in(current_codes),
    )
    # Children of stale elements would block the delete.
    conn.execute(
        elements.update().where(elements.c.parent_id.in_(stale)).values(parent_id=None)
    )
    conn.execute(delete(elements).where(
        _seed_range(elements.c.id), elements.c.code.not_in(current_codes),
    ))


# ── Additive phase ───────────────────────────────────────────────────────────


def _upsert_elements(conn) -> int:
    table = ArchitectureElement.__table__
    code_to_id: dict[str, str] = {}
    for element_type, code, title, description, parent_code in ELEMENT_DATA:
        stmt = dialect_insert(table, conn.dialect.name).values(
            id=seed_id(KIND_ELEMENT, element_seed_number(code)),
            element_type=element_type,
            code=code,
            title=title,
            description=description,
            status="active",
            parent_id=code_to_id.get(parent_code),
            created_by=SYSTEM_USER_ID,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["code"],
            set_={
                "element_type": stmt.excluded.element_type,
                "title": stmt.excluded.title,
                "description": stmt.excluded.description,
                "parent_id": stmt.excluded.parent_id,
                "updated_at": _utcnow(),
            },
        )
        conn.execute(stmt)
        # The row may predate the reserved range; always read the live id back.
        code_to_id[code] = conn.execute(
            select(table.c.id).where(table.c.code == code)
        ).scalar_one()
    return len(ELEMENT_DATA)


def _insert_ignore(conn, table, rows: list[dict]) -> int:
    if not rows:
        return 0
    stmt = dialect_insert(table, conn.dialect.name).values(rows).on_conflict_do_nothing()
    conn.execute(stmt)
    return len(rows)


def _present_ids(conn, table) -> set[str]:
    """Reserved-range ids actually present (a slug clash can skip a seed row)."""
    return set(conn.execute(select(table.c.id).where(_seed_range(table.c.id))).scalars())


def _insert_projects(conn) -> set[str]:
    table = Project.__table__
    _insert_ignore(conn, table, [
        {
            "id": seed_id(KIND_PROJECT, p["n"]),
            "title": p["title"],
            "slug": p["slug"],
            "description": p["description"],
            "project_type": p["project_type"],
            "status": p["status"],
            "visibility": p["visibility"],
            "priority": p["priority"],
            "owner_id": SYSTEM_USER_ID,
            "linked_elements": p["linked_elements"],
            "progress": p["progress"],
        }
        for p in PROJECT_DATA
    ])
    return _present_ids(conn, table)


def _insert_milestones(conn, project_ids: set[str]) -> set[str]:
    table = Milestone.__table__
    _insert_ignore(conn, table, [
        {
            "id": seed_id(KIND_MILESTONE, m["n"]),
            "project_id": seed_id(KIND_PROJECT, m["project"]),
            "title": m["title"],
            "status": m["status"],
            "order_index": m["order_index"],
        }
        for m in MILESTONE_DATA
        if seed_id(KIND_PROJECT, m["project"]) in project_ids
    ])
    return _present_ids(conn, table)


def _insert_tasks(conn, project_ids: set[str], milestone_ids: set[str]) -> int:
    # Row by row: subtasks reference parents inserted just before.
    table = Task.__table__
    written = 0
    for order, t in enumerate(TASK_DATA):
        project_id = seed_id(KIND_PROJECT, t["project"])
        if project_id not in project_ids:
            continue
        milestone_id = seed_id(KIND_MILESTONE, t["milestone"]) if t.get("milestone") else None
        written += _insert_ignore(conn, table, [{
            "id": seed_id(KIND_TASK, t["n"]),
            "project_id": project_id,
            "milestone_id": milestone_id if milestone_id in milestone_ids else None,
            "parent_task_id": seed_id(KIND_TASK, t["parent"]) if t.get("parent") else None,
            "title": t["title"],
            "status": t["status"],
            "priority": t["priority"],
            "order_index": order,
            "created_by": SYSTEM_USER_ID,
        }])
    return written


def _insert_working_groups(conn, project_ids: set[str]) -> int:
    return _insert_ignore(conn, WorkingGroup.__table__, [
        {
            "id": seed_id(KIND_WORKING_GROUP, g["n"]),
            "project_id": seed_id(KIND_PROJECT, g["project"]),
            "name": g["name"],
            "slug": g["slug"],
            "description": g["description"],
            "status": g["status"],
        }
        for g in WORKING_GROUP_DATA
        if seed_id(KIND_PROJECT, g["project"]) in project_ids
    ])


def _insert_tags(conn) -> dict[str, str]:
    """Insert seed tags; returns slug → live id (user tags win on slug clashes)."""
    table = Tag.__table__
    _insert_ignore(conn, table, [
        {
            "id": seed_id(KIND_TAG, t["n"]),
            "name": t["name"],
            "slug": t["slug"],
            "color": t["color"],
        }
        for t in TAG_DATA
    ])
    slugs = [t["slug"] for t in TAG_DATA]
    rows = conn.execute(select(table.c.slug, table.c.id).where(table.c.slug.in_(slugs))).all()
    return {slug: tag_id for slug, tag_id in rows}


def _insert_content(conn, project_ids: set[str], tag_ids: dict[str, str]) -> int:
    table = ContentItem.__table__
    now = _utcnow()
    _insert_ignore(conn, table, [
        {
            "id": seed_id(KIND_CONTENT, c["n"]),
            "title": c["title"],
            "slug": c["slug"],
            "content_type": c["content_type"],
            "excerpt": c["excerpt"],
            "body": c["excerpt"],
            "status": "published",
            "visibility": "public",
            "author_id": SYSTEM_USER_ID,
            "project_id": (
                seed_id(KIND_PROJECT, c["project"])
                if c["project"] and seed_id(KIND_PROJECT, c["project"]) in project_ids
                else None
            ),
            "published_at": now,
        }
        for c in CONTENT_DATA
    ])
    content_ids = _present_ids(conn, table)
    _insert_ignore(conn, content_tags, [
        {"content_id": seed_id(KIND_CONTENT, c["n"]), "tag_id": tag_ids[slug]}
        for c in CONTENT_DATA
        if seed_id(KIND_CONTENT, c["n"]) in content_ids
        for slug in c["tags"]
        if slug in tag_ids
    ])
    return len(content_ids)
