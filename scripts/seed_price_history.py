"""
Price History Seeding for Realtor.uz
Gives every property 3-4 synthetic, backdated price changes ending at its
current price, so price charts have something to show in development.

Usage:
    python scripts/seed_price_history.py
    python scripts/seed_price_history.py --reset       # Drop existing history first
    python scripts/seed_price_history.py --seed 42     # Reproducible output
"""

import argparse
import random
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.batch import batch_session, run_script
from app.core.monitoring import MetricsTracker, StructuredLogger
from app.services.price_history_service import price_history_service

TASK_TYPE = "seed_price_history"

structured_logger = StructuredLogger(__name__)


async def seed_price_history(reset: bool = False, seed: int = None):
    print("=" * 60)
    print("💰 Seeding price history")
    print("=" * 60)

    rng = random.Random(seed)

    async with batch_session() as db:
        summary = await price_history_service.seed_price_history(db, rng=rng, reset=reset)

    MetricsTracker.track_task_items(TASK_TYPE, "updated", summary.records)
    structured_logger.info("Price history seeding finished", **summary.model_dump())

    print("\n" + "=" * 60)
    print("✅ Price history seeding completed!")
    print("=" * 60)
    print(f"\n📈 Summary:")
    if reset:
        print(f"  - Records cleared: {summary.cleared}")
    print(f"  - Properties: {summary.properties}")
    print(f"  - Records created: {summary.records}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed synthetic price history")
    parser.add_argument("--reset", action="store_true", help="Delete existing price history first")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args()

    run_script(TASK_TYPE, lambda: seed_price_history(reset=args.reset, seed=args.seed))
