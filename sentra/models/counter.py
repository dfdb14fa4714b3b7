from sqlalchemy import Column, String, Integer

from sentra.db.base_class import Base


class Counter(Base):
    """Named monotonically increasing sequence."""
    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
