"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter
from datetime import datetime

from profitlens import __version__
from profitlens.core import settings
from profitlens.api.reporting import router as reporting_router

api_router = APIRouter(tags=["API"])

api_router.include_router(reporting_router)

# ===================== HEALTH & STATUS =====================

@api_router.get("/status")
async def api_status():
    return {
        "status": "ok",
        "version": __version__,
        "timezone": settings.STORE_TIMEZONE,
        "timestamp": datetime.now().isoformat(),
    }
