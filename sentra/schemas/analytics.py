from typing import List
from pydantic import Field

from sentra.models.incident import IncidentCategory, IncidentStatus
from sentra.schemas.base import ORMModel, UTCDateTime


class AnalyticsSummary(ORMModel):
    total: int = 0
    pending: int = 0
    in_review: int = 0
    resolved: int = 0
    closed: int = 0


class GroupCount(ORMModel):
    id: str = Field(..., serialization_alias="_id")
    count: int


class RecentIncident(ORMModel):
    id: int = Field(..., serialization_alias="_id")
    title: str
    reference_id: str
    category: IncidentCategory
    status: IncidentStatus
    created_at: UTCDateTime


class Analytics(ORMModel):
    summary: AnalyticsSummary
    category_stats: List[GroupCount] = []
    priority_stats: List[GroupCount] = []
    recent_incidents: List[RecentIncident] = []
