import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.core.security import create_refresh_token
from app.models import UserRole


async def register(client: AsyncClient, email: str, **extra):
    payload = {
        "email": email,
        "password": "TestPass123",
        "password_confirm": "TestPass123",
        **extra,
    }
    return await client.post("/api/v1/auth/register", json=payload)


async def login(client: AsyncClient, email: str, password: str = "TestPass123"):
    return await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Test user registration"""
    response = await register(client, "test@example.com", first_name="Test", last_name="User")

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "test@example.com"
    assert data["role"] == "user"
    assert data["first_name"] == "Test"
    assert "id" in data
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_agent(client: AsyncClient):
    response = await register(client, "agent@example.com", role="agent")

    assert response.status_code == 201
    assert response.json()["role"] == "agent"


@pytest.mark.asyncio
async def test_register_as_admin_rejected(client: AsyncClient):
    response = await register(client, "sneaky@example.com", role="admin")

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient):
    """Test registration with duplicate email"""
    await register(client, "duplicate@example.com")
    response = await register(client, "duplicate@example.com")

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "USER_ALREADY_EXISTS"
    assert "already registered" in error["message"].lower()
    assert error["path"] == "/api/v1/auth/register"


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Test registration with weak password"""
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "weak@example.com",
            "password": "weak",
            "password_confirm": "weak",
        }
    )

    assert response.status_code == 422
    assert response.json()["error"]["details"]


@pytest.mark.asyncio
async def test_register_password_mismatch(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "mismatch@example.com",
            "password": "TestPass123",
            "password_confirm": "TestPass124",
        }
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_sets_cookie(client: AsyncClient):
    """Login returns tokens and stores the access token in an HTTP-only cookie"""
    await register(client, "login@example.com")

    response = await login(client, "login@example.com")

    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"{settings.AUTH_COOKIE_NAME}=")
    assert "httponly" in set_cookie.lower()


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    """Test login with wrong password"""
    await register(client, "wrongpass@example.com")

    response = await login(client, "wrongpass@example.com", "WrongPass123")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_nonexistent_user(client: AsyncClient):
    """Test login with nonexistent user"""
    response = await login(client, "nonexistent@example.com")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_inactive_user(client: AsyncClient, user_factory):
    await user_factory(email="inactive@example.com", is_active=False)

    response = await login(client, "inactive@example.com")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INACTIVE_USER"


@pytest.mark.asyncio
async def test_get_current_user_with_cookie(client: AsyncClient):
    """The cookie set at login authenticates later requests"""
    await register(client, "cookie@example.com", first_name="Cookie")
    await login(client, "cookie@example.com")

    response = await client.get("/api/v1/users/me")

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "cookie@example.com"
    assert data["first_name"] == "Cookie"


@pytest.mark.asyncio
async def test_get_current_user_with_bearer(client: AsyncClient):
    """Bearer token is accepted when no cookie is present"""
    await register(client, "current@example.com", first_name="Current", last_name="User")
    login_response = await login(client, "current@example.com")
    token = login_response.json()["access_token"]
    client.cookies.clear()

    response = await client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    assert response.json()["email"] == "current@example.com"


@pytest.mark.asyncio
async def test_cookie_takes_precedence_over_bearer(client: AsyncClient, user_factory, auth_headers):
    other = await user_factory(email="other@example.com")
    await register(client, "cookie-first@example.com")
    await login(client, "cookie-first@example.com")

    response = await client.get("/api/v1/users/me", headers=auth_headers(other))

    assert response.json()["email"] == "cookie-first@example.com"


@pytest.mark.asyncio
async def test_get_current_user_unauthorized(client: AsyncClient):
    """Test getting current user without authentication"""
    response = await client.get("/api/v1/users/me")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"


@pytest.mark.asyncio
async def test_invalid_token_rejected(client: AsyncClient):
    response = await client.get(
        "/api/v1/users/me",
        headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_refresh_token_not_accepted_as_access(client: AsyncClient, user_factory):
    user = await user_factory()

    response = await client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {create_refresh_token(subject=str(user.id))}"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh(client: AsyncClient):
    await register(client, "refresh@example.com")
    tokens = (await login(client, "refresh@example.com")).json()
    client.cookies.clear()

    response = await client.post(
        "/api/v1/auth/refresh",
        json={"refresh_token": tokens["refresh_token"]}
    )

    assert response.status_code == 200
    assert "access_token" in response.json()
    assert settings.AUTH_COOKIE_NAME in response.cookies

    response = await client.post(
        "/api/v1/auth/refresh",
        json={"refresh_token": tokens["access_token"]}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient):
    await register(client, "logout@example.com")
    await login(client, "logout@example.com")

    response = await client.post("/api/v1/auth/logout")
    assert response.status_code == 200

    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()

    response = await client.put(
        "/api/v1/users/me",
        json={"first_name": "Aziz", "phone": "+998901234567"},
        headers=auth_headers(user)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["first_name"] == "Aziz"
    assert data["phone"] == "+998901234567"


@pytest.mark.asyncio
async def test_role_checkers(user_factory):
    from app.api.dependencies import require_admin, require_agent
    from app.core.exceptions import InsufficientPermissionsException

    admin = await user_factory(role=UserRole.ADMIN)
    agent = await user_factory(role=UserRole.AGENT)
    user = await user_factory()

    assert await require_admin(current_user=admin) is admin
    with pytest.raises(InsufficientPermissionsException):
        await require_admin(current_user=agent)

    assert await require_agent(current_user=agent) is agent
    assert await require_agent(current_user=admin) is admin
    with pytest.raises(InsufficientPermissionsException):
        await require_agent(current_user=user)
