from sentra.schemas.user import User, UserCreate, UserLogin, UserSummary, AuthResponse, TokenPayload
from sentra.schemas.incident import (
    Incident,
    IncidentCreate,
    IncidentCreated,
    IncidentAdminUpdate,
    IncidentTracking,
    StoredFile,
    AdminNote,
)
from sentra.schemas.awareness import Awareness, AwarenessCreate, AwarenessUpdate, AwarenessSaved
from sentra.schemas.analytics import Analytics, AnalyticsSummary, GroupCount, RecentIncident
