"""Architecture service — read-only views of the governance element tree.

Elements are maintained by the seed routine; user proposals point at them.
"""
from sqlalchemy import func, or_, select, union_all
from sqlalchemy.orm import aliased

from app.core.exceptions import NotFoundError
from app.models import db
from app.models.auth import User
from app.models.governance import ArchitectureElement, ElementRelationship, Proposal

# element_type → key in the grouped listing
GROUP_KEYS = {
    "goal": "goals",
    "strategy": "strategies",
    "capability": "capabilities",
    "principle": "principles",
}

RELATED_PROPOSALS_LIMIT = 10


def _iso(value):
    return value.isoformat() if value else None


def _format(el: ArchitectureElement, created_by_name=None, relationship_count=0, proposal_count=0) -> dict:
    data = el.to_dict()
    data.update({
        "createdBy": {"id": el.created_by, "name": created_by_name} if el.created_by else None,
        "metadata": el.meta or {},
        "relationshipCount": relationship_count or 0,
        "proposalCount": proposal_count or 0,
        "updatedAt": _iso(el.updated_at),
    })
    return data


def list_elements(args) -> dict:
    element_type = args.get("type")
    status = args.get("status") or "active"
    parent_id = args.get("parentId")
    search = args.get("search")

    relationship_count = (
        select(func.count())
        .where(ElementRelationship.source_id == ArchitectureElement.id)
        .correlate(ArchitectureElement)
        .scalar_subquery()
    )
    proposal_count = (
        select(func.count())
        .where(Proposal.element_id == ArchitectureElement.id)
        .correlate(ArchitectureElement)
        .scalar_subquery()
    )

    query = (
        select(
            ArchitectureElement,
            User.display_name,
            relationship_count.label("relationship_count"),
            proposal_count.label("proposal_count"),
        )
        .outerjoin(User, ArchitectureElement.created_by == User.id)
        .where(ArchitectureElement.status == status)
    )
    if element_type:
        query = query.where(ArchitectureElement.element_type == element_type)
    if parent_id:
        query = query.where(ArchitectureElement.parent_id == parent_id)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            ArchitectureElement.title.ilike(pattern),
            ArchitectureElement.description.ilike(pattern),
            ArchitectureElement.code.ilike(pattern),
        ))
    query = query.order_by(ArchitectureElement.element_type, ArchitectureElement.code)

    elements = []
    grouped = {key: [] for key in GROUP_KEYS.values()}
    for el, name, rel_count, prop_count in db.session.execute(query).all():
        formatted = _format(el, name, rel_count, prop_count)
        elements.append(formatted)
        key = GROUP_KEYS.get(el.element_type)
        if key:
            grouped[key].append(formatted)

    return {"elements": elements, "grouped": grouped, "total": len(elements)}


def get_element(element_id) -> dict:
    row = db.session.execute(
        select(ArchitectureElement, User.display_name)
        .outerjoin(User, ArchitectureElement.created_by == User.id)
        .where(ArchitectureElement.id == element_id)
    ).first()
    if row is None:
        raise NotFoundError(resource="Element", resource_id=element_id)
    element, created_by_name = row

    # Relationships in both directions; "target" is always the other end.
    other = aliased(ArchitectureElement)
    outgoing = (
        select(ElementRelationship.id, ElementRelationship.relationship_type,
               other.id.label("other_id"), other.title, other.code, other.element_type)
        .join(other, ElementRelationship.target_id == other.id)
        .where(ElementRelationship.source_id == element_id)
    )
    incoming = (
        select(ElementRelationship.id, ElementRelationship.relationship_type,
               other.id.label("other_id"), other.title, other.code, other.element_type)
        .join(other, ElementRelationship.source_id == other.id)
        .where(ElementRelationship.target_id == element_id)
    )
    relationships = db.session.execute(union_all(outgoing, incoming)).all()

    children = db.session.execute(
        select(ArchitectureElement)
        .where(ArchitectureElement.parent_id == element_id)
        .order_by(ArchitectureElement.code)
    ).scalars().all()

    proposals = db.session.execute(
        select(Proposal)
        .where(Proposal.element_id == element_id)
        .order_by(Proposal.created_at.desc())
        .limit(RELATED_PROPOSALS_LIMIT)
    ).scalars().all()

    return {
        "element": _format(element, created_by_name, len(relationships), len(proposals)),
        "relationships": [
            {
                "id": r.id,
                "type": r.relationship_type,
                "target": {
                    "id": r.other_id,
                    "title": r.title,
                    "code": r.code,
                    "elementType": r.element_type,
                },
            }
            for r in relationships
        ],
        "children": [c.to_dict() for c in children],
        "proposals": [
            {
                "id": p.id,
                "title": p.title,
                "status": p.status,
                "type": p.proposal_type,
                "createdAt": _iso(p.created_at),
            }
            for p in proposals
        ],
    }


def get_element_by_code(code) -> dict:
    element_id = db.session.execute(
        select(ArchitectureElement.id).where(ArchitectureElement.code == code.upper())
    ).scalar_one_or_none()
    if element_id is None:
        raise NotFoundError(resource="Element", resource_id=code)
    return get_element(element_id)
