"""
Metro Station Seeding for Realtor.uz
Replaces the metro_stations table with the Tashkent network
(Chilanzar, Uzbekistan and Yunusabad lines).

Usage:
    python scripts/seed_metro_stations.py
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.batch import batch_session, run_script
from app.core.monitoring import StructuredLogger
from app.data.metro_stations import LINE_NAMES
from app.models.metro_station import MetroLine
from app.services.metro_service import metro_service

TASK_TYPE = "seed_metro_stations"

structured_logger = StructuredLogger(__name__)


async def seed_metro_stations():
    print("=" * 60)
    print("🚇 Seeding Tashkent metro stations")
    print("=" * 60)

    async with batch_session() as db:
        summary = await metro_service.seed_stations(db)

    structured_logger.info("Metro stations seeded", **summary.model_dump())

    print("\n" + "=" * 60)
    print(f"✅ Seeded {summary.total} metro stations")
    print("=" * 60)
    for line, count in summary.per_line.items():
        name_ru, _ = LINE_NAMES[MetroLine(line)]
        print(f"  - {name_ru}: {count}")


if __name__ == "__main__":
    run_script(TASK_TYPE, seed_metro_stations)
