from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection

INCIDENT_SEQUENCE = "incident"


def next_value(connection: Connection, name: str) -> int:
    """
    Increment the named counter and return its new value.

    Runs on the connection of the surrounding transaction. The UPDATE takes a
    row lock that is held until commit, so concurrent callers get distinct values.
    """
    from sentra.models.counter import Counter

    result = connection.execute(
        update(Counter.__table__)
        .where(Counter.name == name)
        .values(value=Counter.value + 1, updated_at=datetime.now(timezone.utc))
    )
    if result.rowcount == 0:
        connection.execute(insert(Counter.__table__).values(name=name, value=1))
    return connection.execute(
        select(Counter.value).where(Counter.name == name)
    ).scalar_one()


def format_reference_id(sequence: int, when: Optional[datetime] = None) -> str:
    """``INC-{YYYYMM}-{NNNNN}``, e.g. ``INC-202401-00042``."""
    when = when or datetime.now(timezone.utc)
    return f"INC-{when.year}{when.month:02d}-{sequence:05d}"
