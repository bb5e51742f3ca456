from typing import List, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_, desc
from sqlalchemy.orm import selectinload

from app.core.exceptions import PropertyNotFoundException, FavoriteNotFoundException
from app.core.monitoring import MetricsTracker
from app.models.favorite import Favorite
from app.models.property import Property
from app.services.analytics_service import AnalyticsService


class FavoriteService:
    """Service layer for favorites operations"""

    @staticmethod
    async def _get_favorite(db: AsyncSession, user_id: UUID, property_id: UUID):
        result = await db.execute(
            select(Favorite).where(
                and_(
                    Favorite.user_id == user_id,
                    Favorite.property_id == property_id
                )
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def add_favorite(
        db: AsyncSession,
        user_id: UUID,
        property_id: UUID
    ) -> Tuple[Favorite, bool]:
        """
        Add property to favorites

        Adding an existing favorite is a no-op and returns it unchanged.

        Returns:
            (favorite, created)
        """
        property_result = await db.execute(
            select(Property).where(
                Property.id == property_id,
                Property.deleted_at.is_(None)
            )
        )
        property_obj = property_result.scalar_one_or_none()

        if not property_obj:
            raise PropertyNotFoundException(str(property_id))

        existing = await FavoriteService._get_favorite(db, user_id, property_id)
        if existing:
            return existing, False

        favorite = Favorite(user_id=user_id, property_id=property_id)
        db.add(favorite)

        property_obj.favorite_count += 1
        await AnalyticsService.increment_daily(db, property_id, favorites=1)

        await db.flush()
        await db.refresh(favorite)

        MetricsTracker.track_favorite(added=True)
        return favorite, True

    @staticmethod
    async def remove_favorite(
        db: AsyncSession,
        user_id: UUID,
        property_id: UUID
    ) -> None:
        """Remove property from favorites"""
        favorite = await FavoriteService._get_favorite(db, user_id, property_id)
        if not favorite:
            raise FavoriteNotFoundException(str(property_id))

        property_result = await db.execute(
            select(Property).where(Property.id == property_id)
        )
        property_obj = property_result.scalar_one_or_none()

        if property_obj and property_obj.favorite_count > 0:
            property_obj.favorite_count -= 1

        await AnalyticsService.increment_daily(db, property_id, unfavorites=1)
        await db.delete(favorite)
        await db.flush()

        MetricsTracker.track_favorite(added=False)

    @staticmethod
    async def get_user_favorites(
        db: AsyncSession,
        user_id: UUID,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Favorite], int]:
        """User's favorites on live listings, newest first"""
        base = select(Favorite).join(
            Property, Favorite.property_id == Property.id
        ).where(
            Favorite.user_id == user_id,
            Property.deleted_at.is_(None)
        )

        total_result = await db.execute(
            select(func.count()).select_from(base.subquery())
        )
        total = total_result.scalar_one()

        query = base.options(
            selectinload(Favorite.property)
        ).order_by(
            desc(Favorite.created_at)
        ).offset(skip).limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all()), total

    @staticmethod
    async def get_favorite_ids(db: AsyncSession, user_id: UUID) -> List[UUID]:
        result = await db.execute(
            select(Favorite.property_id).where(Favorite.user_id == user_id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def is_favorited(
        db: AsyncSession,
        user_id: UUID,
        property_id: UUID
    ) -> bool:
        """Check if property is favorited by user"""
        return await FavoriteService._get_favorite(db, user_id, property_id) is not None


favorite_service = FavoriteService()
