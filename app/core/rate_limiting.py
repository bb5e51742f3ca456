"""
Rate Limiting Module
Throttles the authentication endpoints using slowapi
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, status
from fastapi.responses import JSONResponse
from datetime import datetime

from app.core.config import settings

# ============================================================================
# RATE LIMITER CONFIGURATION
# ============================================================================

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000/hour"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


class RateLimits:
    """Centralized rate limit configurations"""

    AUTH_REGISTER = "5/minute"
    AUTH_LOGIN = "10/minute"
    AUTH_REFRESH = "20/minute"

    PROPERTY_CONTACT = "30/hour"


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Same error envelope as the rest of the API"""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": f"Too many requests: {exc.detail}",
                "timestamp": datetime.utcnow().isoformat(),
                "path": request.url.path
            }
        },
        headers={"Retry-After": "60"}
    )
