from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID
from typing import Optional, List

from app.core.database import get_db
from app.core.exceptions import PropertyNotFoundException
from app.core.rate_limiting import limiter, RateLimits
from app.models.user import User
from app.models.property import PropertyType, ListingType
from app.schemas.analytics import PropertyAnalyticsSummary
from app.schemas.price_history import PriceHistoryResponse, PriceStats
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyFilters,
    PropertyListResponse,
)
from app.schemas.user import Message
from app.services.analytics_service import analytics_service
from app.services.price_history_service import price_history_service
from app.services.property_service import property_service
from app.api.dependencies import get_current_user, Pagination

router = APIRouter()


@router.get("", response_model=PropertyListResponse)
async def list_properties(
        city: Optional[str] = None,
        district: Optional[str] = None,
        property_type: Optional[PropertyType] = None,
        listing_type: Optional[ListingType] = None,
        min_price: Optional[int] = Query(None, ge=0),
        max_price: Optional[int] = Query(None, ge=0),
        rooms: Optional[int] = Query(None, ge=1),
        nearest_metro: Optional[str] = Query(None, description="Station name (ru)"),
        max_metro_distance: Optional[int] = Query(None, ge=0, description="Meters"),
        pagination: Pagination = Depends(),
        db: AsyncSession = Depends(get_db)
):
    """
    List active properties

    **Features:**
    - Location, type, price and room filters
    - Filter by nearest metro station and walking distance to it
    - Newest first, paginated
    """
    filters = PropertyFilters(
        city=city,
        district=district,
        property_type=property_type,
        listing_type=listing_type,
        min_price=min_price,
        max_price=max_price,
        rooms=rooms,
        nearest_metro=nearest_metro,
        max_metro_distance=max_metro_distance,
    )
    items, total = await property_service.list_properties(
        db, filters, skip=pagination.skip, limit=pagination.page_size
    )
    return PropertyListResponse(
        items=items,
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
        total_pages=pagination.total_pages(total),
    )


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
        property_data: PropertyCreate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """
    Create a listing owned by the current user

    Nearest metro is filled in later by scripts/update_nearest_metro.py.
    """
    return await property_service.create_property(db, property_data, current_user.id)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
        property_id: UUID,
        db: AsyncSession = Depends(get_db)
):
    """
    Get property details

    **Features:**
    - Counts a view on the listing and in today's analytics
    """
    property_obj = await property_service.get_or_404(db, property_id)
    await analytics_service.track_view(db, property_obj)
    return property_obj


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
        property_id: UUID,
        property_data: PropertyUpdate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """
    Update a listing (owner or admin)

    **Features:**
    - Partial update
    - A new price is recorded in the price history
    """
    return await property_service.update_property(db, property_id, property_data, current_user)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
        property_id: UUID,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """Soft delete a listing (owner or admin)"""
    await property_service.delete_property(db, property_id, current_user)


@router.get("/{property_id}/price-history", response_model=List[PriceHistoryResponse])
async def get_price_history(
        property_id: UUID,
        db: AsyncSession = Depends(get_db)
):
    """Price changes of a listing, oldest first"""
    await property_service.get_or_404(db, property_id)
    return await price_history_service.get_price_history(db, property_id)


@router.get("/{property_id}/price-history/stats", response_model=Optional[PriceStats])
async def get_price_stats(
        property_id: UUID,
        db: AsyncSession = Depends(get_db)
):
    """
    Price movement summary

    Returns null when the listing has no recorded price changes.
    """
    await property_service.get_or_404(db, property_id)
    return await price_history_service.get_price_stats(db, property_id)


@router.get("/{property_id}/analytics", response_model=PropertyAnalyticsSummary)
async def get_property_analytics(
        property_id: UUID,
        days: int = Query(30, ge=1, le=365),
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """
    Engagement of a listing (owner or admin)

    **Features:**
    - Totals over the last `days` days and today's numbers
    - Week-over-week trends in percent
    - Daily series
    """
    property_obj = await property_service.get_or_404(db, property_id)
    property_service.ensure_can_edit(property_obj, current_user)
    return await analytics_service.get_property_analytics(db, property_id, days)


@router.post("/{property_id}/contact", response_model=Message)
@limiter.limit(RateLimits.PROPERTY_CONTACT)
async def contact_owner(
        request: Request,
        property_id: UUID,
        db: AsyncSession = Depends(get_db)
):
    """Record that a visitor revealed the owner's contacts"""
    property_obj = await property_service.get_by_id(db, property_id)
    if not property_obj:
        raise PropertyNotFoundException(str(property_id))

    await analytics_service.track_contact(db, property_obj.id)
    return Message(message="Contact request recorded")
