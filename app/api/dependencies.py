from typing import Optional
from uuid import UUID
from fastapi import Depends, Query, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import (
    InactiveUserException,
    InsufficientPermissionsException,
    InvalidTokenException,
    NotAuthenticatedException,
)
from app.core.security import decode_token, ACCESS_TOKEN_TYPE
from app.models.user import User, UserRole
from app.services.user_service import user_service

# Bearer is the fallback for clients that cannot keep cookies
security = HTTPBearer(auto_error=False)


def get_token(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """Access token from the auth cookie, else from the Authorization header"""
    cookie_token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if cookie_token:
        return cookie_token
    if credentials:
        return credentials.credentials
    return None


async def get_current_user(
        token: Optional[str] = Depends(get_token),
        db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user from JWT token

    Args:
        token: Access token from cookie or bearer header
        db: Database session

    Returns:
        Current user object

    Raises:
        NotAuthenticatedException: No token supplied
        InvalidTokenException: Token is invalid, expired or not an access token
        InactiveUserException: Account is disabled
    """
    if not token:
        raise NotAuthenticatedException()

    payload = decode_token(token, expected_type=ACCESS_TOKEN_TYPE)
    if not payload:
        raise InvalidTokenException()

    user_id_str: Optional[str] = payload.get("sub")
    try:
        user_id = UUID(user_id_str)
    except (TypeError, ValueError):
        raise InvalidTokenException("Invalid user ID in token")

    user = await user_service.get_by_id(db, user_id)
    if not user:
        raise InvalidTokenException("User not found")

    if not user.is_active:
        raise InactiveUserException()

    return user


class RoleChecker:
    """Dependency class to check user roles"""

    def __init__(self, allowed_roles: list[UserRole]):
        self.allowed_roles = allowed_roles

    async def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in self.allowed_roles:
            raise InsufficientPermissionsException(self.allowed_roles[0].value)
        return current_user


# Pre-configured role checkers
require_admin = RoleChecker([UserRole.ADMIN])
require_agent = RoleChecker([UserRole.AGENT, UserRole.ADMIN])


class Pagination:
    """page/page_size query parameters"""

    def __init__(
            self,
            page: int = Query(1, ge=1),
            page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    ):
        self.page = page
        self.page_size = page_size

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    def total_pages(self, total: int) -> int:
        return (total + self.page_size - 1) // self.page_size if total else 0
