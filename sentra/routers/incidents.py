from typing import Any, List, Optional
from datetime import date
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from sentra.api.deps import get_current_user, get_optional_user
from sentra.db.session import get_db
from sentra.models import User, IncidentCategory
from sentra.schemas import Incident as IncidentSchema
from sentra.schemas import IncidentCreate, IncidentCreated, IncidentTracking
from sentra.crud.incident import (
    create_incident,
    get_incident,
    get_incident_by_reference,
    get_user_incidents,
)
from sentra.services.storage import StorageBackend, get_storage
from sentra.services.uploads import discard_uploads, store_uploads

logger = logging.getLogger("sentra.incidents")

router = APIRouter()


@router.post("/incidents", response_model=IncidentCreated, status_code=status.HTTP_201_CREATED)
async def report_incident(
    title: str = Form(...),
    category: IncidentCategory = Form(...),
    description: str = Form(...),
    incident_date: date = Form(..., alias="incidentDate"),
    location: Optional[str] = Form(None),
    witnesses: Optional[str] = Form(None),
    is_anonymous: bool = Form(False, alias="isAnonymous"),
    anonymous_contact: Optional[str] = Form(None, alias="anonymousContact"),
    attachments: Optional[List[UploadFile]] = File(None),
    current_user: Optional[User] = Depends(get_optional_user),
    storage: StorageBackend = Depends(get_storage),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Report an incident, anonymously or as the logged-in user.

    Without a valid bearer token the report is stored as anonymous.
    """
    try:
        incident_in = IncidentCreate(
            title=title,
            category=category,
            description=description,
            incident_date=incident_date,
            location=location,
            witnesses=witnesses,
            is_anonymous=is_anonymous,
            anonymous_contact=anonymous_contact,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    if not incident_in.is_anonymous and current_user is None:
        logger.info("No valid token, proceeding as anonymous")

    stored = await store_uploads(storage, attachments)

    reporter_id = None if incident_in.is_anonymous or current_user is None else current_user.id
    try:
        incident = await create_incident(db, obj_in=incident_in, reporter_id=reporter_id, attachments=stored)
    except Exception:
        await discard_uploads(storage, stored)
        raise

    logger.info(
        f"Incident created: reference_id={incident.reference_id}, "
        f"anonymous={incident.is_anonymous}, attachments={len(incident.attachments)}"
    )
    return {
        "message": "Incident reported successfully",
        "incident": incident,
    }


@router.get("/incidents/my", response_model=List[IncidentSchema])
@router.get("/incidents/my-reports", response_model=List[IncidentSchema], include_in_schema=False)
async def read_my_incidents(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Incidents reported by the current user, newest first.
    """
    incidents = await get_user_incidents(db, user_id=current_user.id)
    logger.info(f"Fetched {len(incidents)} reports for user {current_user.id}")
    return incidents


@router.get("/incidents/reference/{reference_id}", response_model=IncidentTracking)
async def track_incident(
    reference_id: str,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Look up the progress of a report by its reference id.
    """
    incident = await get_incident_by_reference(db, reference_id=reference_id.strip().upper())
    if not incident:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Incident not found",
        )
    return incident


@router.get("/incidents/{incident_id}", response_model=IncidentSchema)
async def read_incident(
    incident_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Get incident by ID.
    Students can only get their own incidents, admins can get any.
    """
    incident = await get_incident(db, id=incident_id)
    if not incident:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Incident not found",
        )
    if not current_user.is_admin and incident.reported_by_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )
    return incident
