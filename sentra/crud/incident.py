from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sentra.db.base_class import utcnow
from sentra.models import (
    AdminNote,
    AdminProof,
    Attachment,
    Incident,
    IncidentCategory,
    IncidentPriority,
    IncidentStatus,
)
from sentra.schemas import IncidentAdminUpdate, IncidentCreate
from sentra.services.storage import StoredFile


def _with_details(query):
    return query.options(
        selectinload(Incident.reported_by),
        selectinload(Incident.attachments),
        selectinload(Incident.admin_proof),
        selectinload(Incident.admin_notes),
    )


def _newest_first(query):
    return query.order_by(Incident.created_at.desc(), Incident.id.desc())


async def get_incident(db: AsyncSession, id: int) -> Optional[Incident]:
    """
    Get an incident by ID, with reporter and evidence loaded.
    """
    result = await db.execute(
        _with_details(select(Incident).filter(Incident.id == id)).execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_incident_by_reference(db: AsyncSession, reference_id: str) -> Optional[Incident]:
    result = await db.execute(select(Incident).filter(Incident.reference_id == reference_id))
    return result.scalars().first()


async def get_incidents(
    db: AsyncSession,
    status: Optional[IncidentStatus] = None,
    priority: Optional[IncidentPriority] = None,
    category: Optional[IncidentCategory] = None,
) -> List[Incident]:
    """
    Get all incidents, optionally filtered by exact status, priority and category.
    """
    query = select(Incident)
    if status:
        query = query.filter(Incident.status == status)
    if priority:
        query = query.filter(Incident.priority == priority)
    if category:
        query = query.filter(Incident.category == category)

    result = await db.execute(_newest_first(_with_details(query)))
    return result.scalars().all()


async def get_user_incidents(db: AsyncSession, user_id: int) -> List[Incident]:
    """
    Get incidents reported by a specific user.
    """
    query = select(Incident).filter(Incident.reported_by_id == user_id)
    result = await db.execute(_newest_first(_with_details(query)))
    return result.scalars().all()


async def create_incident(
    db: AsyncSession,
    obj_in: IncidentCreate,
    reporter_id: Optional[int],
    attachments: Sequence[StoredFile] = (),
) -> Incident:
    """
    Create a new incident. The reference id is assigned when the row is inserted.
    """
    is_anonymous = obj_in.is_anonymous or reporter_id is None
    db_obj = Incident(
        title=obj_in.title,
        category=obj_in.category,
        description=obj_in.description,
        location=obj_in.location,
        incident_date=obj_in.incident_date,
        witnesses=obj_in.witnesses,
        is_anonymous=is_anonymous,
        anonymous_contact=obj_in.anonymous_contact if is_anonymous else None,
        reported_by_id=None if is_anonymous else reporter_id,
        status=IncidentStatus.PENDING,
        attachments=[Attachment(filename=f.filename, path=f.url) for f in attachments],
    )
    db.add(db_obj)
    await db.commit()
    return await get_incident(db, id=db_obj.id)


async def update_incident(
    db: AsyncSession,
    db_obj: Incident,
    obj_in: Union[IncidentAdminUpdate, Dict[str, Any]],
    admin_id: Optional[int] = None,
    proof: Sequence[StoredFile] = (),
) -> Incident:
    """
    Apply an admin update: field changes, an optional note and optional proof files.
    """
    if isinstance(obj_in, dict):
        update_data = dict(obj_in)
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    note = update_data.pop("note", None)
    assigned_to = update_data.pop("assigned_to", None)

    for field in ("status", "priority", "resolution"):
        if update_data.get(field) is not None:
            setattr(db_obj, field, update_data[field])

    if assigned_to is not None:
        db_obj.assigned_to_id = assigned_to

    if update_data.get("status") == IncidentStatus.RESOLVED:
        db_obj.resolved_at = utcnow()

    if note:
        db_obj.admin_notes.append(AdminNote(note=note, added_by_id=admin_id))

    for stored in proof:
        db_obj.admin_proof.append(AdminProof(filename=stored.filename, path=stored.url))

    db_obj.updated_at = utcnow()
    db.add(db_obj)
    await db.commit()
    return await get_incident(db, id=db_obj.id)


async def get_analytics(db: AsyncSession, recent_limit: int = 5) -> Dict[str, Any]:
    """
    Incident counts per status, category and priority, plus the latest reports.
    """
    status_rows = await db.execute(
        select(Incident.status, func.count(Incident.id)).group_by(Incident.status)
    )
    by_status = {IncidentStatus(status): count for status, count in status_rows.all()}

    category_rows = await db.execute(
        select(Incident.category, func.count(Incident.id))
        .group_by(Incident.category)
        .order_by(func.count(Incident.id).desc())
    )
    priority_rows = await db.execute(
        select(Incident.priority, func.count(Incident.id))
        .group_by(Incident.priority)
        .order_by(func.count(Incident.id).desc())
    )
    recent = await db.execute(_newest_first(select(Incident)).limit(recent_limit))

    return {
        "summary": {
            "total": sum(by_status.values()),
            "pending": by_status.get(IncidentStatus.PENDING, 0),
            "in_review": by_status.get(IncidentStatus.IN_REVIEW, 0),
            "resolved": by_status.get(IncidentStatus.RESOLVED, 0),
            "closed": by_status.get(IncidentStatus.CLOSED, 0),
        },
        "category_stats": [{"id": category.value, "count": count} for category, count in category_rows.all()],
        "priority_stats": [{"id": priority.value, "count": count} for priority, count in priority_rows.all()],
        "recent_incidents": recent.scalars().all(),
    }
