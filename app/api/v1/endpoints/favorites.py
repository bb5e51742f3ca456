from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID
from typing import List

from app.core.database import get_db
from app.models.user import User
from app.schemas.favorite import (
    FavoriteResponse,
    FavoriteListResponse,
    FavoriteStatus,
)
from app.services.favorite_service import favorite_service
from app.api.dependencies import get_current_user, Pagination

router = APIRouter()


@router.get("", response_model=FavoriteListResponse)
async def get_my_favorites(
    pagination: Pagination = Depends(),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get current user's favorite properties

    **Features:**
    - Newest first, paginated
    - Each item carries a summary of the listing
    - Deleted listings are left out
    """
    favorites, total = await favorite_service.get_user_favorites(
        db,
        current_user.id,
        skip=pagination.skip,
        limit=pagination.page_size
    )
    return FavoriteListResponse(
        items=favorites,
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/ids", response_model=List[UUID])
async def get_my_favorite_ids(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Property IDs the current user has favorited, for marking list views"""
    return await favorite_service.get_favorite_ids(db, current_user.id)


@router.get("/{property_id}/check", response_model=FavoriteStatus)
async def check_favorite(
    property_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    is_favorite = await favorite_service.is_favorited(db, current_user.id, property_id)
    return FavoriteStatus(property_id=property_id, is_favorite=is_favorite)


@router.post("/{property_id}", response_model=FavoriteResponse)
async def add_to_favorites(
    property_id: UUID,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Add property to favorites

    **Features:**
    - Validates property exists
    - Idempotent: 201 when added, 200 when it was already a favorite
    - Increments favorite_count and today's favorites in analytics
    """
    favorite, created = await favorite_service.add_favorite(db, current_user.id, property_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return favorite


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_favorites(
    property_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Remove property from favorites

    **Features:**
    - 404 if the property is not a favorite
    - Decrements favorite_count and records an unfavorite in analytics
    """
    await favorite_service.remove_favorite(db, current_user.id, property_id)
