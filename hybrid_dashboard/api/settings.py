"""
SmartMenu settings endpoints for the dashboard UI and mutation handlers.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from ..core.exceptions import ConfigurationError
from ..services.settings_hybrid import HybridSettingsService

logger = structlog.get_logger()

router = APIRouter(prefix="/settings", tags=["settings"])


class InvalidateRequest(BaseModel):
    """Mutation report from a code path that changed settings upstream."""

    entity_id: str = Field(..., description="Id of the mutated SmartMenu")
    changed_fields: list[str] = Field(
        ..., description="Changed field names (snake_case or camelCase)"
    )
    refresh: bool = Field(False, description="Refetch immediately after invalidating")


def get_settings_service(request: Request) -> HybridSettingsService:
    """Dependency to get the hybrid settings service from app state."""
    service: HybridSettingsService | None = getattr(
        request.app.state, "settings_service", None
    )
    if service is None:
        raise ConfigurationError("Hybrid settings service not initialized")
    return service


@router.get("")
async def get_smartmenu_settings(
    service: HybridSettingsService = Depends(get_settings_service),
) -> dict[str, Any]:
    """Merged SmartMenu settings and quarterly metrics (cached)."""
    result = await service.get_settings()
    return result.to_dict()


@router.post("/invalidate")
async def invalidate_settings(
    body: InvalidateRequest,
    service: HybridSettingsService = Depends(get_settings_service),
) -> dict[str, Any]:
    """
    Invalidate the cache after a mutation.

    With ``refresh`` the merged view is refetched and returned in the same call.
    """
    if body.refresh:
        result = await service.update_and_refresh(body.entity_id, body.changed_fields)
        return {"invalidated": True, "result": result.to_dict()}

    mutation = service.invalidate_on_mutation(body.entity_id, body.changed_fields)
    stats = service.get_cache_stats()
    return {
        "invalidated": True,
        "entityId": mutation.entity_id,
        "changedFields": mutation.field_names,
        "cacheVersion": stats.cache_version,
    }


@router.delete("/cache")
async def clear_settings_cache(
    service: HybridSettingsService = Depends(get_settings_service),
) -> dict[str, Any]:
    """Drop all cached settings and reset the cache version."""
    service.clear_cache()
    return {"cleared": True, "stats": service.get_cache_stats().to_dict()}


@router.get("/cache/stats")
async def settings_cache_stats(
    service: HybridSettingsService = Depends(get_settings_service),
) -> dict[str, Any]:
    """Last fetch time, cache version and cache age."""
    return service.get_cache_stats().to_dict()


@router.get("/performance")
async def compare_source_performance(
    service: HybridSettingsService = Depends(get_settings_service),
) -> dict[str, Any]:
    """Time both upstream sources directly; upstream errors surface as 502/503."""
    comparison = await service.compare_performance()
    return comparison.to_dict()


@router.get("/metrics")
async def settings_read_metrics(
    service: HybridSettingsService = Depends(get_settings_service),
) -> dict[str, Any]:
    """Hit/miss counters and read latency percentiles."""
    return service.read_metrics.snapshot()
