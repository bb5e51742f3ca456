from typing import Optional, List, Tuple
from uuid import UUID
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.core.exceptions import (
    InvalidPropertyDataException,
    PropertyNotFoundException,
    UnauthorizedPropertyAccessException,
)
from app.models.property import Property, PropertyStatus
from app.models.user import User, UserRole
from app.schemas.property import PropertyCreate, PropertyUpdate, PropertyFilters
from app.services.price_history_service import PriceHistoryService


class PropertyService:
    """Service layer for property operations"""

    @staticmethod
    def ensure_can_edit(property_obj: Property, user: User) -> None:
        """Only the owner or an admin may change a listing"""
        if property_obj.user_id != user.id and user.role != UserRole.ADMIN:
            raise UnauthorizedPropertyAccessException(str(property_obj.id), str(user.id))

    @staticmethod
    async def create_property(
            db: AsyncSession,
            property_data: PropertyCreate,
            owner_id: UUID
    ) -> Property:
        """Create new property listing"""
        db_property = Property(
            **property_data.model_dump(),
            user_id=owner_id,
            status=PropertyStatus.ACTIVE,
        )

        db.add(db_property)
        await db.flush()
        await db.refresh(db_property)
        return db_property

    @staticmethod
    async def get_by_id(
            db: AsyncSession,
            property_id: UUID,
            include_deleted: bool = False
    ) -> Optional[Property]:
        """Get property by ID"""
        query = select(Property).where(Property.id == property_id)

        if not include_deleted:
            query = query.where(Property.deleted_at.is_(None))

        result = await db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_or_404(db: AsyncSession, property_id: UUID) -> Property:
        property_obj = await PropertyService.get_by_id(db, property_id)
        if not property_obj:
            raise PropertyNotFoundException(str(property_id))
        return property_obj

    @staticmethod
    async def update_property(
            db: AsyncSession,
            property_id: UUID,
            property_data: PropertyUpdate,
            user: User
    ) -> Property:
        """
        Update a listing

        A changed price is written to price history, attributed to `user`.
        """
        property_obj = await PropertyService.get_or_404(db, property_id)
        PropertyService.ensure_can_edit(property_obj, user)

        update_data = property_data.model_dump(exclude_unset=True)
        old_price = property_obj.price

        floor = update_data.get('floor', property_obj.floor)
        total_floors = update_data.get('total_floors', property_obj.total_floors)
        if floor is not None and total_floors is not None and floor > total_floors:
            raise InvalidPropertyDataException('Floor cannot be above total floors')

        for field, value in update_data.items():
            setattr(property_obj, field, value)

        if 'price' in update_data and update_data['price'] != old_price:
            await PriceHistoryService.create_price_change(
                db,
                property_id=property_obj.id,
                old_price=old_price,
                new_price=property_obj.price,
                currency=property_obj.currency,
                changed_by=user.id,
            )

        await db.flush()
        await db.refresh(property_obj)
        return property_obj

    @staticmethod
    async def delete_property(
            db: AsyncSession,
            property_id: UUID,
            user: User
    ) -> None:
        """Soft delete property"""
        property_obj = await PropertyService.get_or_404(db, property_id)
        PropertyService.ensure_can_edit(property_obj, user)

        property_obj.deleted_at = datetime.utcnow()
        property_obj.status = PropertyStatus.INACTIVE
        await db.flush()

    @staticmethod
    async def list_properties(
            db: AsyncSession,
            filters: PropertyFilters,
            skip: int = 0,
            limit: int = 20
    ) -> Tuple[List[Property], int]:
        """Active listings matching the filters, newest first"""
        query = select(Property).where(
            Property.status == PropertyStatus.ACTIVE,
            Property.deleted_at.is_(None)
        )

        if filters.city:
            query = query.where(Property.city.ilike(f"%{filters.city}%"))

        if filters.district:
            query = query.where(Property.district.ilike(f"%{filters.district}%"))

        if filters.property_type:
            query = query.where(Property.property_type == filters.property_type)

        if filters.listing_type:
            query = query.where(Property.listing_type == filters.listing_type)

        if filters.min_price is not None:
            query = query.where(Property.price >= filters.min_price)

        if filters.max_price is not None:
            query = query.where(Property.price <= filters.max_price)

        if filters.rooms:
            query = query.where(Property.rooms == filters.rooms)

        if filters.nearest_metro:
            query = query.where(Property.nearest_metro == filters.nearest_metro)

        if filters.max_metro_distance is not None:
            query = query.where(Property.metro_distance <= filters.max_metro_distance)

        if filters.owner_id:
            query = query.where(Property.user_id == filters.owner_id)

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await db.execute(count_query)
        total = total_result.scalar_one()

        query = query.order_by(Property.created_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)

        return list(result.scalars().all()), total


property_service = PropertyService()
