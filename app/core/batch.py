"""
Batch Job Runner
Shared plumbing for the offline scripts in scripts/
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable
import asyncio
import logging
import sys
import time

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import AsyncSessionLocal, engine
from app.core.monitoring import MetricsTracker, configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def batch_session() -> AsyncIterator[AsyncSession]:
    """
    One session for a whole job

    Commits once at the end; any error rolls back everything the job did.
    The engine is disposed afterwards so the process can exit cleanly.
    """
    async with AsyncSessionLocal() as db:
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        finally:
            await engine.dispose()


def run_script(task_type: str, main: Callable[[], Awaitable[Any]]) -> None:
    """
    Run a job coroutine as a CLI entry point

    Exits 0 on success. Any uncaught error is printed and logged, recorded
    as a failed task and turned into exit code 1.
    """
    configure_logging()
    start_time = time.time()

    try:
        asyncio.run(main())
    except Exception as e:
        duration = time.time() - start_time
        MetricsTracker.track_background_task(task_type, success=False, duration=duration)
        logger.error(f"{task_type} failed after {duration:.2f}s", exc_info=True)
        print(f"\n❌ Error: {e}")
        sys.exit(1)

    duration = time.time() - start_time
    MetricsTracker.track_background_task(task_type, success=True, duration=duration)
    print(f"\n⏱  Finished in {duration:.2f}s")
    sys.exit(0)
