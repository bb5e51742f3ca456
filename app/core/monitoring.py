"""
Monitoring and Observability Module
Prometheus metrics, structured logging and request tracking
"""

from prometheus_client import Counter, Histogram, Info, generate_latest, REGISTRY
from prometheus_client.exposition import CONTENT_TYPE_LATEST
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
import re
import sys
import time
import logging
from typing import Callable
from datetime import datetime
import json

from app.core.config import settings

# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=(0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0)
)

# Property engagement
property_views_total = Counter(
    'property_views_total',
    'Total property views',
    ['property_type', 'listing_type']
)

property_contacts_total = Counter(
    'property_contacts_total',
    'Total contact requests on properties'
)

favorites_total = Counter(
    'favorites_total',
    'Favorite additions and removals',
    ['action']  # added, removed
)

price_changes_total = Counter(
    'price_changes_total',
    'Recorded property price changes',
    ['direction']  # up, down, unchanged
)

# User metrics
user_registrations_total = Counter(
    'user_registrations_total',
    'Total user registrations',
    ['role']
)

user_login_failures_total = Counter(
    'user_login_failures_total',
    'Total failed login attempts'
)

# Batch jobs (scripts/)
background_tasks_total = Counter(
    'background_tasks_total',
    'Total background tasks',
    ['task_type', 'status']  # status: success, failed
)

background_task_duration_seconds = Histogram(
    'background_task_duration_seconds',
    'Background task duration in seconds',
    ['task_type'],
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 300.0)
)

background_task_items_total = Counter(
    'background_task_items_total',
    'Records processed by background tasks',
    ['task_type', 'outcome']  # updated, skipped, error
)

system_info = Info(
    'system',
    'System information'
)

errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type', 'endpoint']
)

_UUID_RE = re.compile(r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', re.IGNORECASE)
_NUMERIC_ID_RE = re.compile(r'/\d+(?=/|$)')


def clean_endpoint(path: str) -> str:
    """
    Collapse ids in a path so metrics stay low-cardinality
    Example: /api/v1/properties/123e4567-e89b-12d3-a456-426614174000 -> /api/v1/properties/{uuid}
    """
    path = _UUID_RE.sub('{uuid}', path)
    return _NUMERIC_ID_RE.sub('/{id}', path)


# ============================================================================
# MONITORING MIDDLEWARE
# ============================================================================

class PrometheusMonitoringMiddleware(BaseHTTPMiddleware):
    """Track HTTP requests and responses with Prometheus metrics"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        endpoint = clean_endpoint(request.url.path)
        method = request.method
        status_code = 500
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            errors_total.labels(
                error_type=type(e).__name__,
                endpoint=endpoint
            ).inc()
            raise
        finally:
            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint
            ).observe(time.time() - start_time)
            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=status_code
            ).inc()

        return response


# ============================================================================
# METRICS TRACKING HELPERS
# ============================================================================

class MetricsTracker:
    """Helper class for tracking custom metrics"""

    @staticmethod
    def track_property_view(property_type: str, listing_type: str):
        property_views_total.labels(
            property_type=property_type,
            listing_type=listing_type
        ).inc()

    @staticmethod
    def track_contact():
        property_contacts_total.inc()

    @staticmethod
    def track_favorite(added: bool):
        favorites_total.labels(action='added' if added else 'removed').inc()

    @staticmethod
    def track_price_change(old_price: int, new_price: int):
        if new_price > old_price:
            direction = 'up'
        elif new_price < old_price:
            direction = 'down'
        else:
            direction = 'unchanged'
        price_changes_total.labels(direction=direction).inc()

    @staticmethod
    def track_user_registration(role: str):
        user_registrations_total.labels(role=role).inc()

    @staticmethod
    def track_login_failure():
        user_login_failures_total.inc()

    @staticmethod
    def track_background_task(task_type: str, success: bool, duration: float):
        """Track a batch job run"""
        status = 'success' if success else 'failed'
        background_tasks_total.labels(task_type=task_type, status=status).inc()
        background_task_duration_seconds.labels(task_type=task_type).observe(duration)

    @staticmethod
    def track_task_items(task_type: str, outcome: str, count: int = 1):
        if count:
            background_task_items_total.labels(task_type=task_type, outcome=outcome).inc(count)

    @staticmethod
    def set_system_info(version: str, environment: str, python_version: str):
        system_info.info({
            'version': version,
            'environment': environment,
            'python_version': python_version
        })


# ============================================================================
# STRUCTURED LOGGING
# ============================================================================

def configure_logging(level: str = None) -> None:
    """Set up root logging once for the API process or a script"""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stdout,
    )


class StructuredLogger:
    """Structured JSON logger for batch job summaries and audit events"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log(self, level: str, message: str, **kwargs):
        log_data = {
            'message': message,
            'timestamp': datetime.utcnow().isoformat(),
            **kwargs
        }
        log_func = getattr(self.logger, level.lower())
        log_func(json.dumps(log_data, default=str))

    def info(self, message: str, **kwargs):
        self.log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs):
        self.log('ERROR', message, **kwargs)

    def debug(self, message: str, **kwargs):
        self.log('DEBUG', message, **kwargs)


# ============================================================================
# METRICS ENDPOINT
# ============================================================================

async def metrics_endpoint() -> Response:
    """Prometheus exposition format"""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )


# ============================================================================
# HEALTH CHECK
# ============================================================================

async def health_check(db: AsyncSession) -> dict:
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat(),
        "checks": {}
    }

    start = time.time()
    try:
        await db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "latency_ms": round((time.time() - start) * 1000, 2)
        }
    except Exception as e:
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "error": str(e)
        }
        health_status["status"] = "degraded"

    return health_status
