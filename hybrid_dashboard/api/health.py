"""
Health check endpoints for monitoring and connectivity verification.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request

from ..core.config import Settings, get_settings
from ..core.utils import ms_to_datetime
from ..database.kv_store import KeyValueStore, RedisKeyValueStore
from ..services.settings_hybrid import HybridSettingsService
from .settings import get_settings_service

logger = structlog.get_logger()

router = APIRouter()


def get_kv_store(request: Request) -> KeyValueStore:
    """Dependency to get the key/value store from app state."""
    kv_store: KeyValueStore = request.app.state.kv_store
    return kv_store


@router.get("/health")
async def health_check(
    kv_store: KeyValueStore = Depends(get_kv_store),
    service: HybridSettingsService = Depends(get_settings_service),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    Health check endpoint.

    Reports the key/value backing and the current cache state. Upstream
    GraphQL health is not checked here; see /settings/performance.
    """
    if isinstance(kv_store, RedisKeyValueStore):
        kv_status = kv_store.health_check()
    else:
        kv_status = {"connected": True}
    kv_status["backend"] = type(kv_store).__name__

    stats = service.get_cache_stats()
    last_fetch_at = ms_to_datetime(stats.last_fetch)

    healthy = bool(kv_status.get("connected", False))
    health_response = {
        "status": "ok" if healthy else "degraded",
        "environment": settings.environment,
        "dependencies": {"kv_store": kv_status},
        "cache": {
            **stats.to_dict(),
            "lastFetchAt": last_fetch_at.isoformat() if last_fetch_at else None,
        },
    }

    if healthy:
        logger.info("Health check passed", status="healthy")
    else:
        logger.warning("Health check failed", status="degraded", kv_store=kv_status)

    return health_response


@router.get("/health/live")
async def liveness_check() -> dict[str, Any]:
    """Simple check that the application is running."""
    return {"alive": True, "status": "ok"}
