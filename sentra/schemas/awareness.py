from typing import Optional
from pydantic import Field

from sentra.models.awareness import AwarenessCategory
from sentra.schemas.base import CamelModel, ORMModel, UTCDateTime


class AwarenessCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    category: AwarenessCategory
    content: str = Field(..., min_length=1)
    icon: Optional[str] = None
    order: int = 0
    is_active: bool = True


class AwarenessUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[AwarenessCategory] = None
    content: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class Awareness(ORMModel):
    id: int = Field(..., serialization_alias="_id")
    title: str
    category: AwarenessCategory
    content: str
    icon: Optional[str] = None
    order: int
    is_active: bool
    created_by_id: Optional[int] = Field(None, serialization_alias="createdBy")
    created_at: UTCDateTime
    updated_at: UTCDateTime


class AwarenessSaved(ORMModel):
    message: str
    awareness_item: Awareness
