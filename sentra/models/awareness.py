from sqlalchemy import Column, String, Integer, Enum, ForeignKey, Text, Boolean
import enum
from sqlalchemy.orm import relationship

from sentra.db.base_class import Base


class AwarenessCategory(str, enum.Enum):
    POLICY = "Policy"
    SAFETY_TIPS = "Safety Tips"
    CONTACT = "Contact"
    RESOURCE = "Resource"
    GUIDE = "Guide"


class Awareness(Base):
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    category = Column(Enum(AwarenessCategory), nullable=False)
    content = Column(Text, nullable=False)
    icon = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    order = Column(Integer, default=0, nullable=False)

    created_by_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_by = relationship("User")
