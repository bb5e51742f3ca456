from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models import PriceHistory, PropertyAnalytics, UserRole

NEW_LISTING = {
    "title": "3-комнатная квартира у метро Юнусобод",
    "description": "Свежий ремонт, мебель остаётся",
    "property_type": "apartment",
    "listing_type": "sale",
    "price": 82000,
    "area": 78.5,
    "rooms": 3,
    "floor": 4,
    "total_floors": 9,
    "address": "Юнусабад, 4-квартал, дом 12",
    "district": "Yunusabad",
    "latitude": 41.3614,
    "longitude": 69.2886,
}


@pytest.mark.asyncio
async def test_create_property(client: AsyncClient, user_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)

    response = await client.post("/api/v1/properties", json=NEW_LISTING, headers=auth_headers(owner))

    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == str(owner.id)
    assert data["status"] == "active"
    assert data["currency"] == "YE"
    assert data["city"] == "Tashkent"
    assert data["price_per_sqm"] == round(82000 / 78.5)
    assert data["nearest_metro"] is None


@pytest.mark.asyncio
async def test_create_property_requires_auth(client: AsyncClient):
    response = await client.post("/api/v1/properties", json=NEW_LISTING)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_property_validation(client: AsyncClient, user_factory, auth_headers):
    owner = await user_factory()
    listing = {**NEW_LISTING, "floor": 12, "total_floors": 9}

    response = await client.post("/api/v1/properties", json=listing, headers=auth_headers(owner))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_update_floor_checked_against_stored_values(client: AsyncClient, user_factory, property_factory,
                                                         auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner, floor=3, total_floors=9)

    response = await client.put(f"/api/v1/properties/{prop.id}", json={"floor": 10}, headers=auth_headers(owner))
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_PROPERTY_DATA"

    response = await client.put(f"/api/v1/properties/{prop.id}", json={"total_floors": 2},
                                headers=auth_headers(owner))
    assert response.status_code == 422

    response = await client.put(f"/api/v1/properties/{prop.id}", json={"floor": 12, "total_floors": 16},
                                headers=auth_headers(owner))
    assert response.status_code == 200
    assert response.json()["floor"] == 12


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"price": None},
    {"title": None},
    {"area": None},
    {"address": None},
    {"city": None},
    {"status": None},
    {"currency": None},
])
async def test_update_rejects_null_for_required_fields(client: AsyncClient, db_session, user_factory,
                                                       property_factory, auth_headers, payload):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner, price=65_000)

    response = await client.put(f"/api/v1/properties/{prop.id}", json=payload, headers=auth_headers(owner))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert prop.price == 65_000
    result = await db_session.execute(select(PriceHistory))
    assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_update_allows_clearing_optional_fields(client: AsyncClient, user_factory, property_factory,
                                                      auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner, description="Первая линия")

    response = await client.put(f"/api/v1/properties/{prop.id}", json={"description": None, "rooms": None},
                                headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.json()["description"] is None
    assert response.json()["rooms"] is None


@pytest.mark.asyncio
async def test_get_property_counts_views(client: AsyncClient, db_session, user_factory, property_factory):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner)

    await client.get(f"/api/v1/properties/{prop.id}")
    response = await client.get(f"/api/v1/properties/{prop.id}")

    assert response.status_code == 200
    assert response.json()["view_count"] == 2

    result = await db_session.execute(
        select(PropertyAnalytics).where(PropertyAnalytics.property_id == prop.id)
    )
    row = result.scalar_one()
    assert row.views == 2
    assert row.date == datetime.utcnow().date()


@pytest.mark.asyncio
async def test_get_missing_property(client: AsyncClient):
    response = await client.get("/api/v1/properties/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PROPERTY_NOT_FOUND"


@pytest.mark.asyncio
async def test_list_properties_filters(client: AsyncClient, user_factory, property_factory):
    owner = await user_factory(role=UserRole.AGENT)
    await property_factory(owner, price=50_000, rooms=2, nearest_metro="Чилонзор", metro_distance=400)
    await property_factory(owner, price=120_000, rooms=4, nearest_metro="Чилонзор", metro_distance=1500)
    await property_factory(owner, price=70_000, rooms=2, district="Yunusabad", nearest_metro="Юнусобод",
                           metro_distance=300)
    await property_factory(owner, price=60_000, deleted_at=datetime.utcnow())

    response = await client.get("/api/v1/properties")
    data = response.json()
    assert data["total"] == 3
    assert data["page"] == 1

    response = await client.get("/api/v1/properties", params={"max_price": 80_000, "rooms": 2})
    assert response.json()["total"] == 2

    response = await client.get("/api/v1/properties", params={"nearest_metro": "Чилонзор", "max_metro_distance": 500})
    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["metro_distance"] == 400

    response = await client.get("/api/v1/properties", params={"district": "yunus"})
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_list_properties_pagination(client: AsyncClient, user_factory, property_factory):
    owner = await user_factory(role=UserRole.AGENT)
    for _ in range(5):
        await property_factory(owner)

    response = await client.get("/api/v1/properties", params={"page": 2, "page_size": 2})

    data = response.json()
    assert data["total"] == 5
    assert data["total_pages"] == 3
    assert len(data["items"]) == 2


@pytest.mark.asyncio
async def test_update_price_records_history(client: AsyncClient, db_session, user_factory,
                                            property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner, price=65_000)

    response = await client.put(
        f"/api/v1/properties/{prop.id}",
        json={"price": 60_000, "title": "Срочно! 2-комнатная квартира"},
        headers=auth_headers(owner)
    )

    assert response.status_code == 200
    assert response.json()["price"] == 60_000

    response = await client.get(f"/api/v1/properties/{prop.id}/price-history")
    history = response.json()
    assert len(history) == 1
    assert history[0]["old_price"] == 65_000
    assert history[0]["new_price"] == 60_000
    assert history[0]["changed_by"] == str(owner.id)
    assert history[0]["change_percent"] == round(-5000 / 65000 * 100, 2)

    response = await client.get(f"/api/v1/properties/{prop.id}/price-history/stats")
    stats = response.json()
    assert stats["first_price"] == 65_000
    assert stats["current_price"] == 60_000
    assert stats["total_changes"] == 1


@pytest.mark.asyncio
async def test_update_without_price_change_keeps_history_empty(client: AsyncClient, db_session, user_factory,
                                                               property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner, price=65_000)

    await client.put(
        f"/api/v1/properties/{prop.id}",
        json={"price": 65_000, "rooms": 3},
        headers=auth_headers(owner)
    )

    result = await db_session.execute(select(PriceHistory))
    assert result.scalars().all() == []

    response = await client.get(f"/api/v1/properties/{prop.id}/price-history/stats")
    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_update_by_stranger_forbidden(client: AsyncClient, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    stranger = await user_factory()
    prop = await property_factory(owner)

    response = await client.put(
        f"/api/v1/properties/{prop.id}",
        json={"price": 1},
        headers=auth_headers(stranger)
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "UNAUTHORIZED_PROPERTY_ACCESS"


@pytest.mark.asyncio
async def test_admin_can_update_any_property(client: AsyncClient, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    admin = await user_factory(role=UserRole.ADMIN)
    prop = await property_factory(owner)

    response = await client.put(
        f"/api/v1/properties/{prop.id}",
        json={"status": "sold"},
        headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["status"] == "sold"


@pytest.mark.asyncio
async def test_delete_property_is_soft(client: AsyncClient, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner)

    response = await client.delete(f"/api/v1/properties/{prop.id}", headers=auth_headers(owner))
    assert response.status_code == 204

    assert prop.deleted_at is not None
    response = await client.get(f"/api/v1/properties/{prop.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_contact_and_analytics(client: AsyncClient, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    stranger = await user_factory()
    prop = await property_factory(owner)

    await client.get(f"/api/v1/properties/{prop.id}")
    response = await client.post(f"/api/v1/properties/{prop.id}/contact")
    assert response.status_code == 200

    response = await client.get(f"/api/v1/properties/{prop.id}/analytics", headers=auth_headers(owner))
    assert response.status_code == 200
    data = response.json()
    assert data["total_views"] == 1
    assert data["contacts_today"] == 1
    assert len(data["daily_stats"]) == 1

    response = await client.get(f"/api/v1/properties/{prop.id}/analytics", headers=auth_headers(stranger))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_my_listings_analytics(client: AsyncClient, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    prop = await property_factory(owner)
    await client.get(f"/api/v1/properties/{prop.id}")

    response = await client.get("/api/v1/users/me/analytics", headers=auth_headers(owner))

    assert response.status_code == 200
    data = response.json()
    assert data["total_views"] == 1
    assert data["property_performance"][0]["property_id"] == str(prop.id)
