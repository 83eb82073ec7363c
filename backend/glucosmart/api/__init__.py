from fastapi import APIRouter

from .bolus import router as bolus_router
from .health import router as health_router
from .share import router as share_router

api_router = APIRouter()
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(bolus_router, prefix="/bolus", tags=["bolus"])
api_router.include_router(share_router, tags=["share"])

__all__ = ["api_router"]
