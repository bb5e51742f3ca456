import random
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from app.models import PriceHistory, UserRole
from app.services.price_history_service import generate_price_history, price_history_service

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("seed", range(25))
def test_generated_history_chains_to_current_price(seed):
    points = generate_price_history(100_000, now=NOW, rng=random.Random(seed))

    assert 3 <= len(points) <= 4
    assert points[-1].new_price == 100_000
    for older, newer in zip(points, points[1:]):
        assert older.new_price == newer.old_price


@pytest.mark.parametrize("seed", range(25))
def test_generated_history_is_chronological(seed):
    points = generate_price_history(100_000, now=NOW, rng=random.Random(seed))

    timestamps = [p.created_at for p in points]
    assert timestamps[0] < timestamps[-1]
    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == len(timestamps)
    assert all(NOW - timedelta(days=240) < t <= NOW for t in timestamps)


@pytest.mark.parametrize("seed", range(25))
def test_generated_steps_stay_within_bounds(seed):
    points = generate_price_history(100_000, now=NOW, rng=random.Random(seed))

    for point in points:
        variation = abs(1 - point.old_price / point.new_price)
        # old_price is rounded to whole units
        assert 0.05 - 1e-4 <= variation <= 0.15 + 1e-4


def test_generation_is_reproducible():
    first = generate_price_history(50_000, now=NOW, rng=random.Random(7))
    second = generate_price_history(50_000, now=NOW, rng=random.Random(7))
    assert first == second


@pytest.mark.asyncio
async def test_seed_price_history(db_session, user_factory, property_factory):
    owner = await user_factory(role=UserRole.AGENT)
    first = await property_factory(owner, price=80_000)
    second = await property_factory(owner, price=500)
    await property_factory(owner, deleted_at=datetime.utcnow())

    summary = await price_history_service.seed_price_history(db_session, rng=random.Random(1))

    assert summary.properties == 2
    assert 6 <= summary.records <= 8
    assert summary.cleared == 0

    for prop in (first, second):
        history = await price_history_service.get_price_history(db_session, prop.id)
        assert 3 <= len(history) <= 4
        assert history[-1].new_price == prop.price
        assert all(h.changed_by == owner.id for h in history)
        assert await price_history_service.get_latest_price(db_session, prop.id) == prop.price


@pytest.mark.asyncio
async def test_seed_price_history_reset(db_session, user_factory, property_factory):
    owner = await user_factory(role=UserRole.AGENT)
    await property_factory(owner)

    first = await price_history_service.seed_price_history(db_session, rng=random.Random(3))
    second = await price_history_service.seed_price_history(db_session, rng=random.Random(3), reset=True)

    assert second.cleared == first.records
    result = await db_session.execute(select(PriceHistory))
    assert len(result.scalars().all()) == second.records


@pytest.mark.asyncio
async def test_price_stats(db_session, user_factory, property_factory):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner, price=90_000)
    base = datetime(2025, 1, 1)

    for days, old, new in [(0, 100_000, 95_000), (30, 95_000, 110_000), (60, 110_000, 90_000)]:
        await price_history_service.create_price_change(
            db_session, prop.id, old, new, created_at=base + timedelta(days=days)
        )

    stats = await price_history_service.get_price_stats(db_session, prop.id)

    assert stats.min_price == 90_000
    assert stats.max_price == 110_000
    assert stats.first_price == 100_000
    assert stats.current_price == 90_000
    assert stats.price_change == -10_000
    assert stats.price_change_percent == -10.0
    assert stats.total_changes == 3


@pytest.mark.asyncio
async def test_price_stats_without_history(db_session, user_factory, property_factory):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner)

    assert await price_history_service.get_price_stats(db_session, prop.id) is None
    assert await price_history_service.get_latest_price(db_session, prop.id) is None
