from fastapi import APIRouter, Depends
from loguru import logger

from app.api.deps import get_services
from app.models.response import SuccessResponse
from app.services.container import Services

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/stats", response_model=SuccessResponse)
async def cache_stats(services: Services = Depends(get_services)):
    """Number of live cache entries."""
    return SuccessResponse(data={"entries": len(services.cache)}, message="Cache stats retrieved successfully")


@router.post("/sweep", response_model=SuccessResponse)
async def sweep_cache(services: Services = Depends(get_services)):
    removed = services.cache.sweep()
    return SuccessResponse(data={"removed": removed}, message="Expired cache entries removed")


@router.delete("/", response_model=SuccessResponse)
async def clear_caches(services: Services = Depends(get_services)):
    """
    Clear every cached provider response and computed result.
    This will force fresh data to be fetched from external APIs on next request.
    """
    services.cache.clear()
    logger.info("Cache cleared via API endpoint")
    return SuccessResponse(message="All caches cleared successfully")


@router.delete("/{key}", response_model=SuccessResponse)
async def delete_cache_entry(key: str, services: Services = Depends(get_services)):
    existed = key in services.cache
    services.cache.delete(key)
    return SuccessResponse(data={"key": key, "deleted": existed}, message="Cache entry removed")
