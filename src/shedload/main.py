"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shedload.api import router
from shedload.config import settings
from shedload.db import async_session, init_db
from shedload.logging_config import setup_logging
from shedload.state import build_state

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging(settings.log_level)
    logger.info("Starting %s...", settings.app_name)
    await init_db()
    state = build_state(settings, async_session)
    await state.load()
    app.state.shedload = state

    yield

    # Shutdown
    logger.info("Shutting down...")
    await state.aclose()


app = FastAPI(
    title=settings.app_name,
    description="Courier booking, tracking and invoicing portal",
    version="0.1.0",
    lifespan=lifespan,
)

# Include routes
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shedload.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
