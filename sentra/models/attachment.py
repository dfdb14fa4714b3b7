
from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship

from sentra.db.base_class import Base, utcnow


class StoredFileMixin:
    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String(255), nullable=False)
    path = Column(String(1024), nullable=False)  # public URL
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class Attachment(StoredFileMixin, Base):
    """Evidence submitted by the reporter."""
    incident_id = Column(Integer, ForeignKey("incident.id", ondelete="CASCADE"), nullable=False, index=True)
    incident = relationship("Incident", back_populates="attachments")


class AdminProof(StoredFileMixin, Base):
    """Evidence of remediation uploaded by an administrator."""
    incident_id = Column(Integer, ForeignKey("incident.id", ondelete="CASCADE"), nullable=False, index=True)
    incident = relationship("Incident", back_populates="admin_proof")


class AdminNote(Base):
    id = Column(Integer, primary_key=True, index=True)
    note = Column(Text, nullable=False)
    added_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    incident_id = Column(Integer, ForeignKey("incident.id", ondelete="CASCADE"), nullable=False, index=True)
    incident = relationship("Incident", back_populates="admin_notes")

    added_by_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    added_by = relationship("User")
