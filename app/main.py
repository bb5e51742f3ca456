from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import platform

from app.core.config import settings
from app.core.database import init_db, get_db
from app.core.exceptions import register_exception_handlers
from app.core.monitoring import (
    PrometheusMonitoringMiddleware,
    MetricsTracker,
    configure_logging,
    metrics_endpoint,
    health_check,
)
from app.core.rate_limiting import limiter, rate_limit_exceeded_handler
from app.api.v1.api import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """
    configure_logging()
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION} ({settings.ENVIRONMENT})")
    MetricsTracker.set_system_info(
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        python_version=platform.python_version(),
    )

    # In production, use Alembic migrations
    if settings.ENVIRONMENT == "development":
        await init_db()
        logger.info("Database tables created")

    yield

    logger.info("Shutting down")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
    version=settings.VERSION,
    description="""
    # Realtor.uz API

    Real estate marketplace for Tashkent.

    ## Features

    * **Authentication**: Register, login, refresh; HTTP-only cookie or bearer token
    * **Property Listings**: Create, filter and manage listings, price history
    * **Metro**: Tashkent metro stations and nearest-station lookup
    * **Favorites**: Save listings
    * **Analytics**: Daily views, favorites and contacts per listing

    ## User Roles

    * **User**: Can browse, favorite and list properties
    * **Agent**: Manages listings on behalf of owners
    * **Admin**: Full platform access
    """
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Error envelopes
register_exception_handlers(app)

# Request metrics
app.add_middleware(PrometheusMonitoringMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME} API",
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    """Health check endpoint with database probe"""
    return await health_check(db)


app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)
