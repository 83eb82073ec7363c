"""
In-process record of the share link purge job, surfaced by /api/health/jobs.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from glucosmart.core.scheduler import get_scheduler

logger = logging.getLogger(__name__)

PURGE_JOB_KEY = "share_link_purge"
PURGE_SCHEDULER_ID = "purge_expired_share_links"


@dataclass
class PurgeStatus:
    runs: int = 0
    last_run_at: Optional[str] = None
    last_ok: Optional[bool] = None
    last_error: Optional[str] = None
    last_removed: Optional[int] = None
    total_removed: int = 0
    next_run_at: Optional[str] = None


_status = PurgeStatus()


def _iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def _next_purge_at() -> Optional[str]:
    scheduler = get_scheduler()
    if scheduler is None:
        return None
    job = scheduler.get_job(PURGE_SCHEDULER_ID)
    return _iso(job.next_run_time) if job else None


def snapshot() -> dict[str, dict[str, object]]:
    _status.next_run_at = _next_purge_at()
    return {PURGE_JOB_KEY: asdict(_status)}


def reset() -> None:
    global _status
    _status = PurgeStatus()


async def track_purge(purge: Callable[[], Awaitable[int]]) -> int:
    """Run one purge, recording outcome and removed count; failures are recorded and re-raised."""
    _status.runs += 1
    _status.last_run_at = _iso(datetime.now(timezone.utc))
    try:
        removed = await purge()
    except Exception as exc:
        _status.last_ok = False
        _status.last_error = str(exc)
        _status.last_removed = None
        logger.error("Share link purge failed: %s", exc)
        raise

    _status.last_ok = True
    _status.last_error = None
    _status.last_removed = removed
    _status.total_removed += removed
    return removed
