from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, AliasGenerator, BaseModel
from pydantic.alias_generators import to_camel


def as_utc(value: datetime) -> datetime:
    # Stored values are UTC; some drivers (SQLite) return them without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


# Request bodies: accept camelCase (frontend) or snake_case
class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


# Responses: read from ORM objects, emit camelCase
class ORMModel(BaseModel):
    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = AliasGenerator(serialization_alias=to_camel)
