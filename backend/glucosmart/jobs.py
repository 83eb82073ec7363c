import logging
from pathlib import Path

from apscheduler.triggers.cron import CronTrigger

from glucosmart import jobs_state
from glucosmart.core.constants import SHARE_LINKS_FILENAME
from glucosmart.core.datastore import ShareLinkStore
from glucosmart.core.scheduler import init_scheduler, schedule_task
from glucosmart.core.settings import get_settings
from glucosmart.services.share_links import ShareLinkService

logger = logging.getLogger(__name__)


async def _purge_expired_share_links_task() -> int:
    """
    Background Task: drops share links past their expiry.
    Runs at the top of every hour.
    """
    settings = get_settings()
    store = ShareLinkStore(Path(settings.data.data_dir) / SHARE_LINKS_FILENAME)
    service = ShareLinkService(
        store=store,
        public_base_url=settings.share.public_base_url,
        ttl_hours=settings.share.ttl_hours,
    )
    removed = service.purge_expired()
    logger.info("Share link purge completed. Removed %d links.", removed)
    return removed


async def run_share_link_purge() -> int:
    return await jobs_state.track_purge(_purge_expired_share_links_task)


def setup_periodic_tasks() -> None:
    init_scheduler()

    schedule_task(run_share_link_purge, CronTrigger(minute=0), jobs_state.PURGE_SCHEDULER_ID)
