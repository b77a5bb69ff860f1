"""
Health endpoint for observability.

Returns uptime, version, storage backend status and the configured review
algorithms. Lightweight and requires no authentication.
"""

import logging
import time
from typing import Any, Dict

from fastapi import APIRouter

from ..version import __version__

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

_started_at: float = time.monotonic()


def set_start_time() -> None:
    """Mark the moment the app finished starting; called from the lifespan."""
    global _started_at
    _started_at = time.monotonic()


def get_uptime_seconds() -> float:
    return time.monotonic() - _started_at


async def check_storage_health(backend: str) -> str:
    """``ok`` / ``error`` for the configured storage backend."""
    if backend != "sqlite":
        return "ok"
    from ..core.database import health_check

    return "ok" if await health_check() else "error"


async def build_health() -> Dict[str, Any]:
    from ..core.config import get_settings
    from ..core.typed_config_loader import get_algorithm_catalog

    settings = get_settings()
    storage_status = await check_storage_health(settings.storage_backend)
    return {
        "status": "ok" if storage_status == "ok" else "degraded",
        "version": __version__,
        "uptime_seconds": round(get_uptime_seconds(), 1),
        "storage": {"backend": settings.storage_backend, "status": storage_status},
        "algorithms": get_algorithm_catalog().available_algorithms(),
    }


@router.get("/health")
async def health() -> Dict[str, Any]:
    return await build_health()
