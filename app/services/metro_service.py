from typing import Optional, List, Tuple
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from app.data.metro_stations import iter_station_rows
from app.models.metro_station import MetroStation, MetroLine
from app.models.property import Property
from app.schemas.batch import NearestMetroSummary, MetroSeedSummary
from app.utils.geo import find_nearest

logger = logging.getLogger(__name__)


class MetroService:
    """Service layer for metro stations and the nearest-metro backfill"""

    @staticmethod
    async def list_stations(
        db: AsyncSession,
        line: Optional[MetroLine] = None,
        operational_only: bool = False
    ) -> List[MetroStation]:
        """Stations ordered by line, then by position on the line"""
        query = select(MetroStation)

        if line:
            query = query.where(MetroStation.line == line)
        if operational_only:
            query = query.where(MetroStation.is_operational.is_(True))

        query = query.order_by(MetroStation.line, MetroStation.order)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_station(db: AsyncSession, station_id: UUID) -> Optional[MetroStation]:
        result = await db.execute(
            select(MetroStation).where(MetroStation.id == station_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_nearest_station(
        db: AsyncSession,
        latitude: float,
        longitude: float
    ) -> Optional[Tuple[MetroStation, float]]:
        """Closest operational station and its distance in meters"""
        stations = await MetroService.list_stations(db, operational_only=True)
        return find_nearest(latitude, longitude, stations)

    @staticmethod
    async def update_nearest_metro(db: AsyncSession) -> NearestMetroSummary:
        """
        Store the closest operational station on every property with coordinates

        Full scan: every property is compared against every station. A property
        whose distance cannot be computed is counted as an error and skipped,
        the rest of the batch still goes through.

        Args:
            db: Database session (caller commits)

        Returns:
            Counts of stations, candidate properties, updates and errors
        """
        stations = await MetroService.list_stations(db, operational_only=True)
        logger.info(f"Found {len(stations)} metro stations")

        result = await db.execute(
            select(Property).where(
                Property.latitude.isnot(None),
                Property.longitude.isnot(None),
                Property.deleted_at.is_(None)
            ).order_by(Property.created_at)
        )
        properties = list(result.scalars().all())
        logger.info(f"Found {len(properties)} properties with coordinates")

        summary = NearestMetroSummary(stations=len(stations), total=len(properties))
        if not stations:
            logger.warning("No operational metro stations, nothing to update")
            return summary

        for prop in properties:
            try:
                nearest = find_nearest(prop.latitude, prop.longitude, stations)
            except (TypeError, ValueError) as e:
                summary.errors += 1
                logger.error(f"Error updating property {prop.id}: {e}")
                continue

            if nearest is None:
                continue

            station, distance = nearest
            prop.nearest_metro = station.name_ru
            prop.metro_distance = round(distance)
            summary.updated += 1

            logger.info(
                f"[{summary.updated}/{summary.total}] {prop.title[:40]} -> "
                f"{station.name_ru} ({distance / 1000:.2f} km)"
            )

        await db.flush()
        return summary

    @staticmethod
    async def seed_stations(db: AsyncSession) -> MetroSeedSummary:
        """Replace the station table with the bundled Tashkent network"""
        await db.execute(delete(MetroStation))
        logger.info("Cleared existing metro stations")

        for row in iter_station_rows():
            db.add(MetroStation(**row))
        await db.flush()

        counts = await db.execute(
            select(MetroStation.line, func.count(MetroStation.id)).group_by(MetroStation.line)
        )
        per_line = {line.value: count for line, count in counts.all()}

        return MetroSeedSummary(total=sum(per_line.values()), per_line=per_line)


metro_service = MetroService()
