import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from sentra.core.config import settings
from sentra.db.base_class import Base
from sentra.models import Counter, User
from sentra.db.sequence import INCIDENT_SEQUENCE

logger = logging.getLogger("sentra.db")


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables initialized")


async def create_initial_data(session: AsyncSession) -> Optional[User]:
    """Seed the incident counter and the bootstrap admin account."""
    from sentra.crud.user import ensure_admin

    if await session.get(Counter, INCIDENT_SEQUENCE) is None:
        session.add(Counter(name=INCIDENT_SEQUENCE, value=0))
        await session.commit()
        logger.info("Incident counter created")

    admin = None
    if settings.FIRST_ADMIN_EMAIL and settings.FIRST_ADMIN_PASSWORD:
        admin = await ensure_admin(
            session,
            email=settings.FIRST_ADMIN_EMAIL,
            password=settings.FIRST_ADMIN_PASSWORD,
            name=settings.FIRST_ADMIN_NAME,
        )

    logger.info("Initial data created")
    return admin
