import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models import PropertyAnalytics, UserRole


@pytest.mark.asyncio
async def test_add_favorite(client: AsyncClient, db_session, user_factory, property_factory, auth_headers):
    """Adding a favorite bumps the listing counter and today's analytics"""
    owner = await user_factory(role=UserRole.AGENT)
    user = await user_factory()
    prop = await property_factory(owner)

    response = await client.post(f"/api/v1/favorites/{prop.id}", headers=auth_headers(user))

    assert response.status_code == 201
    data = response.json()
    assert data["property_id"] == str(prop.id)
    assert data["user_id"] == str(user.id)
    assert prop.favorite_count == 1

    result = await db_session.execute(
        select(PropertyAnalytics).where(PropertyAnalytics.property_id == prop.id)
    )
    assert result.scalar_one().favorites == 1


@pytest.mark.asyncio
async def test_add_favorite_twice(client: AsyncClient, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    user = await user_factory()
    prop = await property_factory(owner)

    first = await client.post(f"/api/v1/favorites/{prop.id}", headers=auth_headers(user))
    second = await client.post(f"/api/v1/favorites/{prop.id}", headers=auth_headers(user))

    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert prop.favorite_count == 1


@pytest.mark.asyncio
async def test_add_favorite_unknown_property(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()

    response = await client.post(
        "/api/v1/favorites/00000000-0000-0000-0000-000000000000",
        headers=auth_headers(user)
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PROPERTY_NOT_FOUND"


@pytest.mark.asyncio
async def test_favorites_require_auth(client: AsyncClient):
    response = await client.get("/api/v1/favorites")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_favorites(client: AsyncClient, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    user = await user_factory()
    first = await property_factory(owner, title="Квартира на Чиланзаре")
    second = await property_factory(owner, title="Дом в Мирабаде", nearest_metro="Ойбек", metro_distance=350)
    headers = auth_headers(user)

    await client.post(f"/api/v1/favorites/{first.id}", headers=headers)
    await client.post(f"/api/v1/favorites/{second.id}", headers=headers)

    response = await client.get("/api/v1/favorites", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    titles = {item["property"]["title"] for item in data["items"]}
    assert titles == {"Квартира на Чиланзаре", "Дом в Мирабаде"}

    response = await client.get("/api/v1/favorites/ids", headers=headers)
    assert set(response.json()) == {str(first.id), str(second.id)}


@pytest.mark.asyncio
async def test_check_favorite(client: AsyncClient, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    user = await user_factory()
    prop = await property_factory(owner)
    headers = auth_headers(user)

    response = await client.get(f"/api/v1/favorites/{prop.id}/check", headers=headers)
    assert response.json() == {"property_id": str(prop.id), "is_favorite": False}

    await client.post(f"/api/v1/favorites/{prop.id}", headers=headers)

    response = await client.get(f"/api/v1/favorites/{prop.id}/check", headers=headers)
    assert response.json()["is_favorite"] is True


@pytest.mark.asyncio
async def test_remove_favorite(client: AsyncClient, db_session, user_factory, property_factory, auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    user = await user_factory()
    prop = await property_factory(owner)
    headers = auth_headers(user)

    await client.post(f"/api/v1/favorites/{prop.id}", headers=headers)
    response = await client.delete(f"/api/v1/favorites/{prop.id}", headers=headers)

    assert response.status_code == 204
    assert prop.favorite_count == 0

    result = await db_session.execute(
        select(PropertyAnalytics).where(PropertyAnalytics.property_id == prop.id)
    )
    row = result.scalar_one()
    assert (row.favorites, row.unfavorites) == (1, 1)
    assert row.net_favorites == 0

    response = await client.delete(f"/api/v1/favorites/{prop.id}", headers=headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "FAVORITE_NOT_FOUND"


@pytest.mark.asyncio
async def test_deleted_listing_hidden_from_favorites(client: AsyncClient, user_factory, property_factory,
                                                     auth_headers):
    owner = await user_factory(role=UserRole.AGENT)
    user = await user_factory()
    prop = await property_factory(owner)

    await client.post(f"/api/v1/favorites/{prop.id}", headers=auth_headers(user))
    await client.delete(f"/api/v1/properties/{prop.id}", headers=auth_headers(owner))

    response = await client.get("/api/v1/favorites", headers=auth_headers(user))
    assert response.json()["total"] == 0
