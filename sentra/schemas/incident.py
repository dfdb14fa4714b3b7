from typing import Optional, List
from pydantic import Field, field_validator
from datetime import date

from sentra.models.incident import IncidentCategory, IncidentPriority, IncidentStatus
from sentra.schemas.base import CamelModel, ORMModel, UTCDateTime
from sentra.schemas.user import UserSummary


# Properties to receive on incident creation (parsed from the multipart form)
class IncidentCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    category: IncidentCategory
    description: str = Field(..., min_length=1)
    incident_date: date
    location: Optional[str] = None
    witnesses: Optional[str] = None
    is_anonymous: bool = False
    anonymous_contact: Optional[str] = None

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v

    @field_validator("location", "witnesses", "anonymous_contact")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


# Properties an admin may change on an incident
class IncidentAdminUpdate(CamelModel):
    status: Optional[IncidentStatus] = None
    priority: Optional[IncidentPriority] = None
    resolution: Optional[str] = None
    note: Optional[str] = None
    assigned_to: Optional[int] = None

    @field_validator("*", mode="before")
    @classmethod
    def empty_is_unset(cls, v):
        # Forms submit untouched inputs as empty strings
        if isinstance(v, str) and not v.strip():
            return None
        return v


class StoredFile(ORMModel):
    id: int = Field(..., serialization_alias="_id")
    filename: str
    path: str
    uploaded_at: UTCDateTime


class AdminNote(ORMModel):
    id: int = Field(..., serialization_alias="_id")
    note: str
    added_by_id: Optional[int] = Field(None, serialization_alias="addedBy")
    added_at: UTCDateTime


# Properties to return to client
class Incident(ORMModel):
    id: int = Field(..., serialization_alias="_id")
    reference_id: str
    reported_by: Optional[UserSummary] = None
    is_anonymous: bool
    anonymous_contact: Optional[str] = None
    title: str
    category: IncidentCategory
    description: str
    location: Optional[str] = None
    incident_date: date
    witnesses: Optional[str] = None
    attachments: List[StoredFile] = []
    admin_proof: List[StoredFile] = []
    status: IncidentStatus
    priority: IncidentPriority
    assigned_to_id: Optional[int] = Field(None, serialization_alias="assignedTo")
    admin_notes: List[AdminNote] = []
    resolution: Optional[str] = None
    resolved_at: Optional[UTCDateTime] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class IncidentCreated(ORMModel):
    message: str
    incident: Incident


# Reduced view for tracking a report by its reference id
class IncidentTracking(ORMModel):
    reference_id: str
    title: str
    category: IncidentCategory
    status: IncidentStatus
    priority: IncidentPriority
    resolved_at: Optional[UTCDateTime] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime
