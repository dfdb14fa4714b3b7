from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sentra.db.base_class import utcnow
from sentra.models import Awareness
from sentra.schemas import AwarenessCreate, AwarenessUpdate


async def get_active_items(db: AsyncSession) -> List[Awareness]:
    """
    Get published awareness content, by display order then newest first.
    """
    result = await db.execute(
        select(Awareness)
        .filter(Awareness.is_active.is_(True))
        .order_by(Awareness.order.asc(), Awareness.created_at.desc(), Awareness.id.desc())
    )
    return result.scalars().all()


async def get_items(db: AsyncSession) -> List[Awareness]:
    result = await db.execute(
        select(Awareness).order_by(Awareness.order.asc(), Awareness.created_at.desc(), Awareness.id.desc())
    )
    return result.scalars().all()


async def get_item(db: AsyncSession, id: int) -> Optional[Awareness]:
    result = await db.execute(select(Awareness).filter(Awareness.id == id))
    return result.scalars().first()


async def create_item(db: AsyncSession, obj_in: AwarenessCreate, created_by_id: Optional[int]) -> Awareness:
    db_obj = Awareness(
        title=obj_in.title,
        category=obj_in.category,
        content=obj_in.content,
        icon=obj_in.icon,
        order=obj_in.order,
        is_active=obj_in.is_active,
        created_by_id=created_by_id,
    )
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj


async def update_item(
    db: AsyncSession, db_obj: Awareness, obj_in: Union[AwarenessUpdate, Dict[str, Any]]
) -> Awareness:
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    for field in update_data:
        if update_data[field] is not None:
            setattr(db_obj, field, update_data[field])

    db_obj.updated_at = utcnow()
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj


async def delete_item(db: AsyncSession, db_obj: Awareness) -> Awareness:
    await db.delete(db_obj)
    await db.commit()
    return db_obj
