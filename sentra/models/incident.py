from sqlalchemy import Column, String, Integer, Enum, ForeignKey, Text, Boolean, Date, DateTime, event
import enum
from sqlalchemy.orm import relationship, validates

from sentra.db.base_class import Base
from sentra.db.sequence import INCIDENT_SEQUENCE, format_reference_id, next_value


class IncidentStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_REVIEW = "In Review"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class IncidentPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class IncidentCategory(str, enum.Enum):
    HARASSMENT = "Harassment"
    BULLYING = "Bullying"
    DISCRIMINATION = "Discrimination"
    SAFETY_CONCERN = "Safety Concern"
    ACADEMIC_MISCONDUCT = "Academic Misconduct"
    SUBSTANCE_ABUSE = "Substance Abuse"
    MENTAL_HEALTH = "Mental Health"
    PHYSICAL_VIOLENCE = "Physical Violence"
    THEFT = "Theft"
    OTHER = "Other"


class Incident(Base):
    id = Column(Integer, primary_key=True, index=True)
    reference_id = Column(String(32), unique=True, index=True, nullable=False)

    is_anonymous = Column(Boolean, default=False, nullable=False)
    anonymous_contact = Column(String(255), nullable=True)

    title = Column(String(255), nullable=False)
    category = Column(Enum(IncidentCategory), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=True)
    incident_date = Column(Date, nullable=False)
    witnesses = Column(Text, nullable=True)

    status = Column(Enum(IncidentStatus), default=IncidentStatus.PENDING, nullable=False, index=True)
    priority = Column(Enum(IncidentPriority), default=IncidentPriority.MEDIUM, nullable=False, index=True)

    resolution = Column(Text, nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    reported_by_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    reported_by = relationship("User", back_populates="incidents", foreign_keys=[reported_by_id])

    assigned_to_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])

    attachments = relationship(
        "Attachment", back_populates="incident", cascade="all, delete-orphan", order_by="Attachment.id"
    )
    admin_proof = relationship(
        "AdminProof", back_populates="incident", cascade="all, delete-orphan", order_by="AdminProof.id"
    )
    admin_notes = relationship(
        "AdminNote", back_populates="incident", cascade="all, delete-orphan", order_by="AdminNote.id"
    )

    @validates("reference_id")
    def validate_reference_id(self, key, value):
        if self.reference_id and value != self.reference_id:
            raise ValueError("referenceId cannot be changed once assigned")
        return value


@event.listens_for(Incident, "before_insert")
def assign_reference_id(mapper, connection, target: Incident) -> None:
    """Give every new incident its reference id and check reporter attribution."""
    if not target.is_anonymous and target.reported_by_id is None and target.reported_by is None:
        raise ValueError("reportedBy is required unless the incident is anonymous")
    if not target.reference_id:
        target.reference_id = format_reference_id(next_value(connection, INCIDENT_SEQUENCE))
