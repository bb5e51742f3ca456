import pytest
from httpx import AsyncClient

from app.core.batch import run_script
from app.core.exceptions import BatchJobError, UserAlreadyExistsException
from app.core.security import verify_password
from app.models import UserRole
from app.services.user_service import user_service


@pytest.mark.asyncio
async def test_ensure_admin_creates_admin(db_session):
    admin, created = await user_service.ensure_admin(
        db_session, email="Boss@Realtor.uz", password="Adm1nPass!", phone="+998901112233"
    )

    assert created is True
    assert admin.email == "boss@realtor.uz"
    assert admin.role == UserRole.ADMIN
    assert admin.is_verified is True
    assert verify_password("Adm1nPass!", admin.hashed_password)


@pytest.mark.asyncio
async def test_ensure_admin_keeps_existing_admin(db_session, user_factory):
    existing = await user_factory(role=UserRole.ADMIN, email="first@realtor.uz")

    admin, created = await user_service.ensure_admin(db_session, email="second@realtor.uz", password="Adm1nPass!")

    assert created is False
    assert admin.id == existing.id
    assert await user_service.get_by_email(db_session, "second@realtor.uz") is None


@pytest.mark.asyncio
async def test_ensure_admin_email_taken_by_regular_user(db_session, user_factory):
    await user_factory(email="taken@realtor.uz")

    with pytest.raises(UserAlreadyExistsException):
        await user_service.ensure_admin(db_session, email="taken@realtor.uz", password="Adm1nPass!")


def test_run_script_exits_zero_on_success(capsys):
    async def job():
        print("working")

    with pytest.raises(SystemExit) as exc_info:
        run_script("test_job", job)

    assert exc_info.value.code == 0
    assert "working" in capsys.readouterr().out


def test_run_script_exits_one_on_error(capsys):
    async def job():
        raise BatchJobError("test_job", "no metro stations")

    with pytest.raises(SystemExit) as exc_info:
        run_script("test_job", job)

    assert exc_info.value.code == 1
    assert "❌ Error:" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"]["status"] == "healthy"
