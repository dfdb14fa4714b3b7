from sentra.models.counter import Counter
from sentra.models.user import User, UserRole
from sentra.models.incident import Incident, IncidentCategory, IncidentPriority, IncidentStatus
from sentra.models.attachment import Attachment, AdminProof, AdminNote
from sentra.models.awareness import Awareness, AwarenessCategory
