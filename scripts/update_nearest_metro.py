"""
Nearest Metro Backfill for Realtor.uz
Stores the closest operational metro station and the distance to it on
every property that has coordinates.

Usage:
    python scripts/update_nearest_metro.py
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.batch import batch_session, run_script
from app.core.exceptions import BatchJobError
from app.core.monitoring import MetricsTracker, StructuredLogger
from app.services.metro_service import metro_service

TASK_TYPE = "update_nearest_metro"

structured_logger = StructuredLogger(__name__)


async def update_nearest_metro():
    print("=" * 60)
    print("🚇 Updating nearest metro stations")
    print("=" * 60)

    async with batch_session() as db:
        summary = await metro_service.update_nearest_metro(db)

        if summary.stations == 0:
            raise BatchJobError(TASK_TYPE, "no operational metro stations, run seed_metro_stations.py first")

    MetricsTracker.track_task_items(TASK_TYPE, "updated", summary.updated)
    MetricsTracker.track_task_items(TASK_TYPE, "error", summary.errors)
    structured_logger.info("Nearest metro backfill finished", **summary.model_dump())

    print("\n" + "=" * 60)
    print("✅ Nearest metro update completed!")
    print("=" * 60)
    print(f"\n📈 Summary:")
    print(f"  - Stations: {summary.stations}")
    print(f"  - Properties with coordinates: {summary.total}")
    print(f"  - Updated: {summary.updated}")
    print(f"  - Errors: {summary.errors}")


if __name__ == "__main__":
    run_script(TASK_TYPE, update_nearest_metro)
