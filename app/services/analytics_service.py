from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID
from datetime import date, datetime, timedelta, timezone
from collections import defaultdict
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from app.core.config import settings
from app.core.monitoring import MetricsTracker
from app.models.favorite import Favorite
from app.models.property import Property
from app.models.property_analytics import PropertyAnalytics
from app.schemas.analytics import (
    DailyStat,
    PropertyAnalyticsSummary,
    PropertyPerformance,
    UserPropertiesAnalytics,
)
from app.schemas.batch import FavoritesBackfillSummary

logger = logging.getLogger(__name__)

COUNTER_FIELDS = ("views", "favorites", "unfavorites", "contacts")

# ON CONFLICT upserts; Postgres in production, SQLite in tests
_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def calendar_day(moment: datetime) -> date:
    """Calendar day of a timestamp; aware timestamps are read in UTC"""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def group_favorites_by_day(
    favorites: Iterable[Tuple[UUID, datetime]]
) -> Dict[Tuple[UUID, date], int]:
    """
    Count favorites per (property, calendar day)

    Args:
        favorites: (property_id, created_at) pairs

    Returns:
        Mapping of (property_id, day) to number of favorites that day
    """
    groups: Dict[Tuple[UUID, date], int] = defaultdict(int)
    for property_id, created_at in favorites:
        groups[(property_id, calendar_day(created_at))] += 1
    return dict(groups)


def _trend(current: int, previous: int) -> float:
    """Percent change, one decimal; 0 when there is no previous activity"""
    if previous <= 0:
        return 0.0
    return round((current - previous) / previous * 100, 1)


class AnalyticsService:
    """Per-day property engagement counters"""

    @staticmethod
    async def increment_daily(
        db: AsyncSession,
        property_id: UUID,
        day: Optional[date] = None,
        **increments: int
    ) -> PropertyAnalytics:
        """
        Add to the counters of one (property, day) row, creating it if missing

        Args:
            db: Database session
            property_id: Property ID
            day: Calendar day, defaults to today (UTC)
            **increments: Any of views, favorites, unfavorites, contacts

        Returns:
            The updated row
        """
        unknown = set(increments) - set(COUNTER_FIELDS)
        if unknown:
            raise ValueError(f"Unknown analytics counters: {', '.join(sorted(unknown))}")

        day = day or datetime.utcnow().date()
        amounts = {field: increments.get(field, 0) for field in COUNTER_FIELDS}

        # Insert the day's row or add to it, in one statement
        insert = _UPSERT_INSERTS[db.bind.dialect.name]
        stmt = insert(PropertyAnalytics).values(property_id=property_id, date=day, **amounts)
        stmt = stmt.on_conflict_do_update(
            index_elements=[PropertyAnalytics.property_id, PropertyAnalytics.date],
            set_={field: getattr(PropertyAnalytics, field) + amount for field, amount in amounts.items()},
        ).returning(PropertyAnalytics)

        result = await db.execute(stmt, execution_options={"populate_existing": True})
        return result.scalar_one()

    @staticmethod
    async def track_view(db: AsyncSession, property_obj: Property) -> None:
        """Count a detail-page view on the property and in today's analytics"""
        property_obj.view_count = (property_obj.view_count or 0) + 1
        await AnalyticsService.increment_daily(db, property_obj.id, views=1)
        await db.refresh(property_obj)
        MetricsTracker.track_property_view(
            property_obj.property_type.value,
            property_obj.listing_type.value
        )

    @staticmethod
    async def track_contact(db: AsyncSession, property_id: UUID) -> None:
        await AnalyticsService.increment_daily(db, property_id, contacts=1)
        MetricsTracker.track_contact()

    @staticmethod
    async def backfill_favorites_analytics(db: AsyncSession) -> FavoritesBackfillSummary:
        """
        Fold every existing favorite into property_analytics

        Favorites are grouped by property and calendar day; each group is
        added on top of whatever the analytics row already holds. Running it
        twice counts the favorites twice.
        """
        result = await db.execute(select(Favorite.property_id, Favorite.created_at))
        favorites = result.all()
        logger.info(f"Found {len(favorites)} existing favorites to backfill")

        groups = group_favorites_by_day(favorites)
        logger.info(f"Processing {len(groups)} unique property-date combinations")

        summary = FavoritesBackfillSummary(favorites=len(favorites), groups=len(groups))
        for (property_id, day), count in groups.items():
            await AnalyticsService.increment_daily(db, property_id, day, favorites=count)
            summary.upserted += 1
            if summary.upserted % 10 == 0:
                logger.info(f"Processed {summary.upserted}/{summary.groups}")

        return summary

    @staticmethod
    async def get_property_analytics(
        db: AsyncSession,
        property_id: UUID,
        days: int = None
    ) -> PropertyAnalyticsSummary:
        """Totals, today's numbers, week-over-week trends and the daily series"""
        days = days or settings.ANALYTICS_DEFAULT_DAYS
        today = datetime.utcnow().date()
        start_date = today - timedelta(days=days)

        result = await db.execute(
            select(PropertyAnalytics).where(
                PropertyAnalytics.property_id == property_id,
                PropertyAnalytics.date >= start_date
            ).order_by(PropertyAnalytics.date)
        )
        rows = list(result.scalars().all())

        today_row = next((r for r in rows if r.date == today), None)

        # Last 7 recorded days vs the 7 before them
        last_7 = rows[-7:]
        previous_7 = rows[-14:-7]

        def total(items, attr):
            if attr == "favorites":
                return sum(r.net_favorites for r in items)
            return sum(getattr(r, attr) for r in items)

        return PropertyAnalyticsSummary(
            total_views=total(rows, "views"),
            total_favorites=total(rows, "favorites"),
            total_contacts=total(rows, "contacts"),
            views_today=today_row.views if today_row else 0,
            favorites_today=today_row.net_favorites if today_row else 0,
            contacts_today=today_row.contacts if today_row else 0,
            views_trend=_trend(total(last_7, "views"), total(previous_7, "views")),
            favorites_trend=_trend(total(last_7, "favorites"), total(previous_7, "favorites")),
            contacts_trend=_trend(total(last_7, "contacts"), total(previous_7, "contacts")),
            daily_stats=[
                DailyStat(
                    date=r.date,
                    views=r.views,
                    favorites=r.net_favorites,
                    contacts=r.contacts
                )
                for r in rows
            ],
        )

    @staticmethod
    async def get_user_properties_analytics(
        db: AsyncSession,
        user_id: UUID,
        days: int = None
    ) -> UserPropertiesAnalytics:
        """Aggregate analytics across all listings owned by a user"""
        days = days or settings.ANALYTICS_DEFAULT_DAYS
        start_date = datetime.utcnow().date() - timedelta(days=days)

        props_result = await db.execute(
            select(Property.id, Property.title).where(
                Property.user_id == user_id,
                Property.deleted_at.is_(None)
            ).order_by(Property.created_at)
        )
        properties = props_result.all()
        if not properties:
            return UserPropertiesAnalytics()

        stats_result = await db.execute(
            select(
                PropertyAnalytics.property_id,
                func.sum(PropertyAnalytics.views).label("views"),
                func.sum(PropertyAnalytics.favorites - PropertyAnalytics.unfavorites).label("favorites"),
                func.sum(PropertyAnalytics.contacts).label("contacts"),
            ).where(
                PropertyAnalytics.property_id.in_([p.id for p in properties]),
                PropertyAnalytics.date >= start_date
            ).group_by(PropertyAnalytics.property_id)
        )
        stats = {row.property_id: row for row in stats_result.all()}

        performance: List[PropertyPerformance] = []
        for prop in properties:
            row = stats.get(prop.id)
            views = int(row.views or 0) if row else 0
            performance.append(PropertyPerformance(
                property_id=prop.id,
                title=prop.title,
                total_views=views,
                total_favorites=int(row.favorites or 0) if row else 0,
                total_contacts=int(row.contacts or 0) if row else 0,
                avg_views_per_day=round(views / days, 2),
            ))

        performance.sort(key=lambda p: p.total_views, reverse=True)

        return UserPropertiesAnalytics(
            total_views=sum(p.total_views for p in performance),
            total_favorites=sum(p.total_favorites for p in performance),
            total_contacts=sum(p.total_contacts for p in performance),
            property_performance=performance,
        )


analytics_service = AnalyticsService()
