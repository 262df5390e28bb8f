"""
APScheduler-backed trigger client.

Each trigger is a one-shot "date" job whose id is the trigger name. Jobs
can be persisted to PostgreSQL so they survive restarts; APScheduler removes
a date job once it has run.
"""

import asyncio
import logging
from datetime import datetime

from apscheduler.jobstores.base import ConflictingIdError, JobLookupError
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..config import get_database_url
from ..database import get_sync_database_url
from ..errors import ConflictError, ExternalServiceError
from ..types import TriggerPayload
from .base import TriggerClient
from .delivery import deliver_reminder

logger = logging.getLogger(__name__)


_scheduler: AsyncIOScheduler | None = None

# Created and owned by APScheduler, not by Alembic
JOBSTORE_TABLE = "apscheduler_jobs"

JOB_DEFAULTS = {
    "coalesce": True,  # Combine missed runs into one
    "max_instances": 1,
    "misfire_grace_time": 3600,  # Allow 1 hour late execution
}


# =============================================================================
# Scheduler initialization and shutdown
# =============================================================================


def init_scheduler(skip_if_db_unavailable: bool = True) -> AsyncIOScheduler:
    """
    Initialize and start the APScheduler.

    Call this during app startup (in FastAPI lifespan).

    Args:
        skip_if_db_unavailable: If True, fall back to an in-memory job store
                                when the DB is unreachable instead of failing.
    """
    global _scheduler

    if _scheduler is not None:
        return _scheduler

    jobstores = {}
    if get_database_url():
        # Short connect timeout so an unreachable DB fails startup fast
        jobstores["default"] = SQLAlchemyJobStore(
            url=get_sync_database_url(connect_timeout=5),
            tablename=JOBSTORE_TABLE,
        )

    _scheduler = AsyncIOScheduler(jobstores=jobstores, job_defaults=JOB_DEFAULTS)

    try:
        _scheduler.start()
        print("Reminder scheduler started")
    except Exception as e:
        if skip_if_db_unavailable and "timeout" in str(e).lower():
            print(
                "Warning: Could not connect to database for scheduler: timeout expired"
            )
            print("  └─ Scheduler running in memory-only mode (jobs won't persist)")
            _scheduler = AsyncIOScheduler(jobstores={}, job_defaults=JOB_DEFAULTS)
            _scheduler.start()
            print("Reminder scheduler started (memory-only)")
        else:
            _scheduler = None
            raise

    return _scheduler


def shutdown_scheduler() -> None:
    """
    Shutdown the scheduler gracefully.

    Call this during app shutdown.
    """
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=True)
        _scheduler = None
        print("Reminder scheduler stopped")


# =============================================================================
# Trigger client
# =============================================================================


class ApschedulerTriggerClient(TriggerClient):
    """TriggerClient that registers date jobs on an APScheduler instance."""

    def __init__(self, scheduler: AsyncIOScheduler):
        self._scheduler = scheduler

    async def create(
        self,
        name: str,
        description: str,
        fire_at: datetime,
        payload: TriggerPayload,
    ) -> str:
        try:
            # The SQLAlchemy job store does blocking I/O
            job = await asyncio.to_thread(
                self._scheduler.add_job,
                deliver_reminder,
                trigger="date",
                run_date=fire_at,
                id=name,
                name=description,
                replace_existing=False,
                kwargs={"contact": payload.contact, "message": payload.message},
            )
        except ConflictingIdError as e:
            raise ConflictError(name) from e
        except Exception as e:
            raise ExternalServiceError(f"Failed to schedule job {name}: {e}") from e

        logger.info(f"Scheduled trigger {name} at {fire_at.isoformat()}")
        return job.id

    async def delete(self, handle: str) -> None:
        try:
            await asyncio.to_thread(self._scheduler.remove_job, handle)
        except JobLookupError:
            logger.info(f"Trigger {handle} already gone")
            return
        except Exception as e:
            raise ExternalServiceError(f"Failed to remove job {handle}: {e}") from e

        logger.info(f"Removed trigger {handle}")
