"""
ProfitLens - Order Economics Engine
FastAPI Application Entry Point
"""
import logging

import uvicorn
from fastapi import FastAPI
from contextlib import asynccontextmanager

from profitlens import __version__
from profitlens.core import settings, setup_logging
from profitlens.core.dates import resolve_timezone
from profitlens.api import api_router

logger = logging.getLogger(__name__)

# Lifespan for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Fail fast on a bad store timezone
    resolve_timezone(settings.STORE_TIMEZONE)
    logger.info(f"{settings.APP_NAME} starting on port {settings.APP_PORT} ({settings.STORE_TIMEZONE})")

    yield

    logger.info(f"{settings.APP_NAME} shutting down")

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Per-order profit, daily P&L and profit projections",
    version=__version__,
    lifespan=lifespan
)

# Include routers
app.include_router(api_router, prefix="/api")

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.DEBUG
    )
