import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from glucosmart import __version__
from glucosmart.api import api_router
from glucosmart.core.logging import configure_logging
from glucosmart.core.settings import get_settings

settings = get_settings()
configure_logging(settings.logging)
logger = logging.getLogger(__name__)

app = FastAPI(title="GlucoSmart API", version=__version__)


def _collect_cors_origins() -> list[str]:
    collected: list[str] = []
    for origin in settings.security.cors_origins:
        if origin and origin not in collected:
            collected.append(origin)
    return collected


_cors_origins = _collect_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    # Browsers reject credentialed requests against a wildcard origin.
    allow_credentials="*" not in _cors_origins,
    # Preflights are answered here; keep them to the verbs the API actually serves.
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event() -> None:
    current = get_settings()
    data_dir = Path(current.data.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Using data directory: %s", data_dir)

    if current.jobs.enabled:
        from glucosmart.jobs import setup_periodic_tasks

        setup_periodic_tasks()
    else:
        logger.info("Background jobs disabled")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    from glucosmart.core.scheduler import shutdown_scheduler

    shutdown_scheduler()


@app.get("/", include_in_schema=False)
def root():
    return {"message": "GlucoSmart API running"}


def run() -> None:
    uvicorn.run(
        "glucosmart.main:app",
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
        access_log=settings.logging.access_log,
    )
