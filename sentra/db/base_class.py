from typing import Any
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import as_declarative, declared_attr


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@as_declarative()
class Base:
    id: Any
    __name__: str
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
