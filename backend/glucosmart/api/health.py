from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, Request

from glucosmart import __version__, jobs_state
from glucosmart.api.share import get_share_link_store
from glucosmart.core.datastore import ShareLinkStore
from glucosmart.core.settings import get_settings, Settings

router = APIRouter()

_start_time = datetime.now(timezone.utc)


def _uptime_seconds() -> float:
    return (datetime.now(timezone.utc) - _start_time).total_seconds()


@router.api_route("/", methods=["GET", "HEAD"], summary="Liveness check", response_model=None)
async def health(request: Request):
    if request.method == "HEAD":
        return Response(status_code=200)
    return {"ok": True}


@router.options("/", include_in_schema=False)
async def health_options() -> Response:
    return Response(status_code=200)


@router.get("/full", summary="Full health check")
async def full_health(
    settings: Settings = Depends(get_settings),
    store: ShareLinkStore = Depends(get_share_link_store),
) -> dict:
    status: dict[str, object] = {
        "ok": True,
        "uptime_seconds": _uptime_seconds(),
        "version": __version__,
    }

    try:
        status["share_links"] = {"stored": len(store.load())}
    except (OSError, ValueError) as exc:
        status["ok"] = False
        status["share_links"] = {"error": str(exc)}

    status["server"] = {"host": settings.server.host, "port": settings.server.port}
    return status


@router.get("/jobs", summary="Background job status")
async def jobs_health() -> dict:
    return jobs_state.snapshot()
