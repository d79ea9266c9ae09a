from fastapi import APIRouter, Depends

from app.api.deps import get_services
from app.core.version import __version__
from app.services.container import Services

router = APIRouter(tags=["health"])


@router.get("/health", summary="Simple readiness probe")
async def health_check(services: Services = Depends(get_services)) -> dict:
    return {
        "status": "healthy",
        "service": "reelscout",
        "version": __version__,
        "cache_entries": len(services.cache),
    }
