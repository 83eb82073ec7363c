import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

logger = logging.getLogger(__name__)

_scheduler: Optional[AsyncIOScheduler] = None


def init_scheduler() -> AsyncIOScheduler:
    global _scheduler
    _scheduler = AsyncIOScheduler(timezone="UTC")
    _scheduler.start()
    logger.info("Background scheduler initialized.")
    return _scheduler


def get_scheduler() -> Optional[AsyncIOScheduler]:
    return _scheduler


def shutdown_scheduler() -> None:
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped.")
    _scheduler = None


def schedule_task(func, trigger, task_id, replace=True):
    if not _scheduler:
        raise RuntimeError("Scheduler not initialized")

    job = _scheduler.add_job(
        func,
        trigger,
        id=task_id,
        replace_existing=replace,
    )
    logger.info("Scheduled task '%s' with trigger: %s", task_id, trigger)
    return job
