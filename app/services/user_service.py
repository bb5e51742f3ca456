from typing import Optional, Tuple
from uuid import UUID
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models.user import User, UserRole
from app.schemas.user import UserCreate, UserUpdate
from app.core.exceptions import UserAlreadyExistsException
from app.core.monitoring import MetricsTracker
from app.core.security import get_password_hash, verify_password


class UserService:
    """Service layer for user operations"""

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        result = await db.execute(
            select(User).where(User.id == user_id, User.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        """Get user by email"""
        result = await db.execute(
            select(User).where(User.email == email.lower(), User.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_user(db: AsyncSession, user_data: UserCreate) -> User:
        """
        Create a new user

        Args:
            db: Database session
            user_data: User creation data

        Returns:
            Created user object

        Raises:
            UserAlreadyExistsException: If email already exists
        """
        existing_user = await UserService.get_by_email(db, user_data.email)
        if existing_user:
            raise UserAlreadyExistsException(user_data.email)

        db_user = User(
            email=user_data.email.lower(),
            hashed_password=get_password_hash(user_data.password),
            role=user_data.role,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone=user_data.phone,
        )

        try:
            db.add(db_user)
            await db.flush()
            await db.refresh(db_user)
        except IntegrityError:
            await db.rollback()
            raise UserAlreadyExistsException(user_data.email)

        MetricsTracker.track_user_registration(db_user.role.value)
        return db_user

    @staticmethod
    async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password

        Args:
            db: Database session
            email: User email
            password: Plain text password

        Returns:
            User object if the credentials match, None otherwise. Inactive
            users are returned too; the caller decides how to refuse them.
        """
        user = await UserService.get_by_email(db, email)
        if not user or not verify_password(password, user.hashed_password):
            MetricsTracker.track_login_failure()
            return None

        if user.is_active:
            user.last_login = datetime.utcnow()
            await db.flush()

        return user

    @staticmethod
    async def update_user(
            db: AsyncSession,
            user_id: UUID,
            user_data: UserUpdate
    ) -> Optional[User]:
        """Update profile fields that were provided"""
        user = await UserService.get_by_id(db, user_id)
        if not user:
            return None

        update_data = user_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(user, field, value)

        await db.flush()
        await db.refresh(user)
        return user

    @staticmethod
    async def get_admin(db: AsyncSession) -> Optional[User]:
        result = await db.execute(
            select(User).where(
                User.role == UserRole.ADMIN,
                User.deleted_at.is_(None)
            ).order_by(User.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def ensure_admin(
            db: AsyncSession,
            email: str,
            password: str,
            phone: Optional[str] = None,
            first_name: str = "Admin",
            last_name: str = "Realtor.uz"
    ) -> Tuple[User, bool]:
        """
        Create the first admin account unless one already exists

        An existing admin is returned untouched, whatever its email.

        Returns:
            (admin user, created)
        """
        admin = await UserService.get_admin(db)
        if admin:
            return admin, False

        if await UserService.get_by_email(db, email):
            raise UserAlreadyExistsException(email)

        admin = User(
            email=email.lower(),
            hashed_password=get_password_hash(password),
            role=UserRole.ADMIN,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            is_active=True,
            is_verified=True,
        )
        db.add(admin)
        await db.flush()
        await db.refresh(admin)
        return admin, True


user_service = UserService()
