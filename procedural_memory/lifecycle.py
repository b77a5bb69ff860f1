"""
Application lifespan management.

Handles startup and shutdown of all subsystems:
- Service container setup
- Storage initialization (in-memory or SQLite)
- Review activity subscribers
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.health import set_start_time
from .core.config import get_settings
from .core.container import get_container
from .core.database import close_database
from .core.services import setup_services
from .domain.subscribers import ReviewActivityRecorder

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "Procedural memory service starting (env=%s, storage=%s)",
        settings.environment,
        settings.storage_backend,
    )
    set_start_time()

    container = get_container()
    if not container.has("procedure_service"):
        setup_services()

    # Build storage eagerly so configuration errors surface at startup
    await container.get_async("procedure_repository")
    recorder = ReviewActivityRecorder(container.get("event_bus"))
    recorder.register()

    app.state.container = container
    logger.info("Startup complete")

    try:
        yield
    finally:
        logger.info("Shutting down")
        recorder.unregister()
        await close_database()
