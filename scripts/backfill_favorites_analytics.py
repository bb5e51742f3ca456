"""
Favorites Analytics Backfill for Realtor.uz
Copies favorites created before daily analytics existed into
property_analytics, one row per property and day.

Counts are added to existing rows, so run it once per database.

Usage:
    python scripts/backfill_favorites_analytics.py
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.batch import batch_session, run_script
from app.core.monitoring import MetricsTracker, StructuredLogger
from app.services.analytics_service import analytics_service

TASK_TYPE = "backfill_favorites_analytics"

structured_logger = StructuredLogger(__name__)


async def backfill_favorites_analytics():
    print("=" * 60)
    print("📊 Backfilling favorites analytics")
    print("=" * 60)

    async with batch_session() as db:
        summary = await analytics_service.backfill_favorites_analytics(db)

    MetricsTracker.track_task_items(TASK_TYPE, "updated", summary.upserted)
    structured_logger.info("Favorites analytics backfill finished", **summary.model_dump())

    print("\n" + "=" * 60)
    print("✅ Favorites analytics backfill completed!")
    print("=" * 60)
    print(f"\n📈 Summary:")
    print(f"  - Favorites read: {summary.favorites}")
    print(f"  - Property/day groups: {summary.groups}")
    print(f"  - Analytics rows upserted: {summary.upserted}")


if __name__ == "__main__":
    run_script(TASK_TYPE, backfill_favorites_analytics)
