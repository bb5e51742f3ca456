from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import InvalidTokenException
from app.models.user import User
from app.schemas.analytics import UserPropertiesAnalytics
from app.schemas.user import UserResponse, UserUpdate
from app.services.analytics_service import analytics_service
from app.services.user_service import user_service
from app.api.dependencies import get_current_user

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
        current_user: User = Depends(get_current_user)
):
    """
    Get current user's profile

    Requires authentication
    """
    return current_user


@router.put("/me", response_model=UserResponse)
async def update_current_user_profile(
        user_data: UserUpdate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """
    Update current user's profile

    - **first_name**: First name
    - **last_name**: Last name
    - **phone**: Phone number

    Requires authentication
    """
    updated_user = await user_service.update_user(db, current_user.id, user_data)
    if not updated_user:
        raise InvalidTokenException("User not found")
    return updated_user


@router.get("/me/analytics", response_model=UserPropertiesAnalytics)
async def get_my_listings_analytics(
        days: int = Query(30, ge=1, le=365),
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """
    Engagement across all of the current user's listings

    **Features:**
    - Views, net favorites and contacts over the last `days` days
    - Per-listing performance, busiest first
    """
    return await analytics_service.get_user_properties_analytics(db, current_user.id, days)
