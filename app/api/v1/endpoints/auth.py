from uuid import UUID
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import InactiveUserException, InvalidCredentialsException, InvalidTokenException
from app.core.rate_limiting import limiter, RateLimits
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    set_auth_cookie,
    clear_auth_cookie,
    REFRESH_TOKEN_TYPE,
)
from app.schemas.user import (
    UserCreate,
    UserLogin,
    UserResponse,
    Token,
    RefreshTokenRequest,
    Message
)
from app.services.user_service import user_service

router = APIRouter()


def _issue_tokens(response: Response, user_id: UUID) -> Token:
    access_token = create_access_token(subject=str(user_id))
    refresh_token = create_refresh_token(subject=str(user_id))
    set_auth_cookie(response, access_token)
    return Token(access_token=access_token, refresh_token=refresh_token, token_type="bearer")


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RateLimits.AUTH_REGISTER)
async def register(
        request: Request,
        user_data: UserCreate,
        db: AsyncSession = Depends(get_db)
):
    """
    Register a new user

    - **email**: Valid email address
    - **password**: Minimum 8 characters, must contain uppercase, lowercase, and digit
    - **password_confirm**: Must match password
    - **role**: user or agent
    - **first_name**, **last_name**, **phone**: Optional profile fields

    Returns 409 if the email is already registered.
    """
    return await user_service.create_user(db, user_data)


@router.post("/login", response_model=Token)
@limiter.limit(RateLimits.AUTH_LOGIN)
async def login(
        request: Request,
        response: Response,
        credentials: UserLogin,
        db: AsyncSession = Depends(get_db)
):
    """
    Login with email and password

    Returns access and refresh tokens and sets the access token as an
    HTTP-only cookie.
    """
    user = await user_service.authenticate(db, credentials.email, credentials.password)

    if not user:
        raise InvalidCredentialsException()
    if not user.is_active:
        raise InactiveUserException()

    return _issue_tokens(response, user.id)


@router.post("/refresh", response_model=Token)
@limiter.limit(RateLimits.AUTH_REFRESH)
async def refresh_token(
        request: Request,
        response: Response,
        token_data: RefreshTokenRequest,
        db: AsyncSession = Depends(get_db)
):
    """
    Exchange a refresh token for a new token pair

    - **refresh_token**: Valid refresh token
    """
    payload = decode_token(token_data.refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    if not payload:
        raise InvalidTokenException("Invalid refresh token")

    try:
        user_id = UUID(payload.get("sub"))
    except (TypeError, ValueError):
        raise InvalidTokenException("Invalid user ID in token")

    user = await user_service.get_by_id(db, user_id)
    if not user or not user.is_active:
        raise InvalidTokenException("User not found or inactive")

    return _issue_tokens(response, user.id)


@router.post("/logout", response_model=Message)
async def logout(response: Response):
    """
    Clear the auth cookie

    Tokens are stateless; bearer clients simply drop theirs.
    """
    clear_auth_cookie(response)
    return Message(message="Successfully logged out")
