from typing import Any, List, Optional
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from sentra.api.deps import get_current_admin_user
from sentra.db.session import get_db
from sentra.models import User, IncidentCategory, IncidentPriority, IncidentStatus
from sentra.schemas import Analytics, Incident as IncidentSchema, IncidentAdminUpdate
from sentra.crud.incident import get_analytics, get_incident, get_incidents, update_incident
from sentra.crud.user import get_user
from sentra.services.storage import StorageBackend, get_storage
from sentra.services.uploads import discard_uploads, store_uploads

logger = logging.getLogger("sentra.admin")

router = APIRouter()

PROOF_FIELD = "adminProof"


async def parse_admin_update(request: Request) -> tuple:
    """
    Read a PATCH body sent either as JSON or as a multipart form.

    Returns the validated update and any proof files (multipart only).
    """
    files: List[UploadFile] = []
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        data = {}
        for key, value in form.multi_items():
            if key == PROOF_FIELD:
                if not isinstance(value, str):
                    files.append(value)
            elif isinstance(value, str):
                data[key] = value
    else:
        body = await request.body()
        try:
            data = json.loads(body) if body else {}
        except json.JSONDecodeError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request body must be valid JSON",
            )
        if not isinstance(data, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request body must be a JSON object",
            )

    try:
        update_in = IncidentAdminUpdate(**data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    return update_in, files


@router.get("/admin/incidents", response_model=List[IncidentSchema])
async def read_all_incidents(
    status: Optional[IncidentStatus] = None,
    priority: Optional[IncidentPriority] = None,
    category: Optional[IncidentCategory] = None,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    All incidents, newest first, filtered by exact status, priority and category.
    """
    incidents = await get_incidents(db, status=status, priority=priority, category=category)
    logger.info(f"Admin {current_user.id} fetched {len(incidents)} incidents")
    return incidents


@router.patch("/admin/incidents/{incident_id}", response_model=IncidentSchema)
async def update_incident_by_id(
    incident_id: int,
    request: Request,
    current_user: User = Depends(get_current_admin_user),
    storage: StorageBackend = Depends(get_storage),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Update status, priority, resolution or assignee, append a note and attach proof.

    Accepts JSON, or multipart with proof files under ``adminProof``.
    """
    update_in, files = await parse_admin_update(request)

    incident = await get_incident(db, id=incident_id)
    if not incident:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Incident not found",
        )

    if update_in.assigned_to is not None and await get_user(db, id=update_in.assigned_to) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Assigned user not found",
        )

    proof = await store_uploads(storage, files)
    try:
        incident = await update_incident(
            db, db_obj=incident, obj_in=update_in, admin_id=current_user.id, proof=proof
        )
    except Exception:
        await discard_uploads(storage, proof)
        raise

    logger.info(
        f"Admin {current_user.id} updated incident {incident.reference_id}: "
        f"status={incident.status.value}, priority={incident.priority.value}, proof={len(proof)}"
    )
    return incident


@router.get("/admin/analytics", response_model=Analytics)
async def read_analytics(
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Incident totals by status, category and priority, and the five latest reports.
    """
    return await get_analytics(db)
