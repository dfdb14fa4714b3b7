from typing import Any, List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sentra.api.deps import get_current_admin_user
from sentra.db.session import get_db
from sentra.models import User
from sentra.schemas import Awareness as AwarenessSchema, AwarenessCreate, AwarenessSaved, AwarenessUpdate
from sentra.crud.awareness import (
    create_item,
    delete_item,
    get_active_items,
    get_item,
    get_items,
    update_item,
)

logger = logging.getLogger("sentra.awareness")

router = APIRouter()


@router.get("/awareness", response_model=List[AwarenessSchema])
async def read_awareness(
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Published awareness content. Public.
    """
    return await get_active_items(db)


@router.get("/awareness/all", response_model=List[AwarenessSchema])
async def read_all_awareness(
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Every awareness item, including unpublished ones.
    """
    return await get_items(db)


@router.post("/awareness", response_model=AwarenessSaved, status_code=status.HTTP_201_CREATED)
async def create_awareness(
    item_in: AwarenessCreate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    item = await create_item(db, obj_in=item_in, created_by_id=current_user.id)
    logger.info(f"Awareness content created: id={item.id}, by={current_user.id}")
    return {
        "message": "Awareness content created successfully",
        "awareness_item": item,
    }


@router.put("/awareness/{item_id}", response_model=AwarenessSaved)
async def update_awareness(
    item_id: int,
    item_in: AwarenessUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    item = await get_item(db, id=item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Content not found",
        )
    item = await update_item(db, db_obj=item, obj_in=item_in)
    logger.info(f"Awareness content updated: id={item.id}, by={current_user.id}")
    return {
        "message": "Awareness content updated successfully",
        "awareness_item": item,
    }


@router.delete("/awareness/{item_id}")
async def delete_awareness(
    item_id: int,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    item = await get_item(db, id=item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Content not found",
        )
    await delete_item(db, db_obj=item)
    logger.info(f"Awareness content deleted: id={item_id}, by={current_user.id}")
    return {"message": "Awareness content deleted successfully"}
