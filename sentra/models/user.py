from sqlalchemy import Boolean, Column, String, Integer, Enum
import enum
from sqlalchemy.orm import relationship

from sentra.db.base_class import Base


class UserRole(str, enum.Enum):
    STUDENT = "student"
    ADMIN = "admin"


class User(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.STUDENT, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    incidents = relationship(
        "Incident", back_populates="reported_by", foreign_keys="Incident.reported_by_id"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
