from typing import List, NamedTuple, Optional
from uuid import UUID
from datetime import datetime, timedelta, timezone
import logging
import random

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, desc, func

from app.core.monitoring import MetricsTracker
from app.models.price_history import PriceHistory
from app.models.property import Property, Currency
from app.schemas.batch import PriceSeedSummary
from app.schemas.price_history import PriceStats

logger = logging.getLogger(__name__)

# Synthetic history shape
MIN_POINTS = 3
MAX_POINTS = 4
STEP_DAYS = 60
MIN_VARIATION = 0.05
MAX_VARIATION = 0.15


class PricePoint(NamedTuple):
    old_price: int
    new_price: int
    created_at: datetime


def generate_price_history(
    current_price: int,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None
) -> List[PricePoint]:
    """
    Build a plausible backdated price trail ending at the current price

    Walks backwards from `current_price`: every step moves the price by
    5-15% in a random direction and lies in its own 60-day window further in
    the past, so timestamps strictly decrease along the chain.

    Args:
        current_price: Listing price today
        now: Reference time (defaults to utcnow)
        rng: Random source, for reproducible output

    Returns:
        3-4 points, oldest first. Each point's new_price is the next point's
        old_price and the last new_price equals `current_price`.
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)

    points: List[PricePoint] = []
    new_price = current_price
    for step in range(rng.randint(MIN_POINTS, MAX_POINTS)):
        days_ago = step * STEP_DAYS + rng.randint(0, STEP_DAYS - 1)
        variation = rng.uniform(MIN_VARIATION, MAX_VARIATION)
        if rng.random() < 0.5:
            variation = -variation

        old_price = round(new_price * (1 - variation))
        points.append(PricePoint(old_price, new_price, now - timedelta(days=days_ago)))
        new_price = old_price

    points.reverse()
    return points


class PriceHistoryService:
    """Service layer for listing price history"""

    @staticmethod
    async def get_price_history(db: AsyncSession, property_id: UUID) -> List[PriceHistory]:
        """All price changes of a property, oldest first"""
        result = await db.execute(
            select(PriceHistory).where(
                PriceHistory.property_id == property_id
            ).order_by(PriceHistory.created_at)
        )
        return list(result.scalars().all())

    @staticmethod
    async def create_price_change(
        db: AsyncSession,
        property_id: UUID,
        old_price: int,
        new_price: int,
        currency: Currency = Currency.YE,
        changed_by: Optional[UUID] = None,
        created_at: Optional[datetime] = None
    ) -> PriceHistory:
        """Record one price change"""
        entry = PriceHistory(
            property_id=property_id,
            old_price=old_price,
            new_price=new_price,
            currency=currency,
            changed_by=changed_by,
        )
        if created_at is not None:
            entry.created_at = created_at

        db.add(entry)
        await db.flush()
        await db.refresh(entry)

        MetricsTracker.track_price_change(old_price, new_price)
        return entry

    @staticmethod
    async def get_latest_price(db: AsyncSession, property_id: UUID) -> Optional[int]:
        result = await db.execute(
            select(PriceHistory.new_price).where(
                PriceHistory.property_id == property_id
            ).order_by(desc(PriceHistory.created_at)).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_price_stats(db: AsyncSession, property_id: UUID) -> Optional[PriceStats]:
        """Min/max and overall movement of a property's price; None without history"""
        history = await PriceHistoryService.get_price_history(db, property_id)
        if not history:
            return None

        new_prices = [h.new_price for h in history]
        first_price = history[0].old_price
        current_price = history[-1].new_price
        change = current_price - first_price
        percent = round(change / first_price * 100, 2) if first_price else 0.0

        return PriceStats(
            min_price=min(new_prices),
            max_price=max(new_prices),
            first_price=first_price,
            current_price=current_price,
            price_change=change,
            price_change_percent=percent,
            total_changes=len(history),
        )

    @staticmethod
    async def seed_price_history(
        db: AsyncSession,
        rng: Optional[random.Random] = None,
        reset: bool = False
    ) -> PriceSeedSummary:
        """
        Give every live property a synthetic price history

        Args:
            db: Database session (caller commits)
            rng: Random source, for reproducible output
            reset: Delete all existing price history first

        Returns:
            Counts of properties, records inserted and records cleared
        """
        rng = rng or random.Random()
        summary = PriceSeedSummary()

        if reset:
            existing = await db.execute(select(func.count(PriceHistory.id)))
            summary.cleared = existing.scalar_one()
            await db.execute(delete(PriceHistory))
            logger.info(f"Cleared {summary.cleared} price history records")

        result = await db.execute(
            select(Property).where(
                Property.deleted_at.is_(None)
            ).order_by(Property.created_at)
        )
        properties = list(result.scalars().all())
        logger.info(f"Found {len(properties)} properties")

        now = datetime.now(timezone.utc)
        for prop in properties:
            points = generate_price_history(prop.price, now=now, rng=rng)
            for point in points:
                db.add(PriceHistory(
                    property_id=prop.id,
                    old_price=point.old_price,
                    new_price=point.new_price,
                    currency=prop.currency,
                    changed_by=prop.user_id,
                    created_at=point.created_at,
                ))

            summary.properties += 1
            summary.records += len(points)
            logger.info(f"Created {len(points)} price history records for: {prop.title[:50]}")

        await db.flush()
        return summary


price_history_service = PriceHistoryService()
