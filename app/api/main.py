from fastapi import APIRouter

from .endpoints.caching import router as caching_router
from .endpoints.media import router as media_router
from .endpoints.movies import router as movies_router
from .endpoints.trending import router as trending_router
from .endpoints.watchlist import router as watchlist_router

api_router = APIRouter(prefix="/api/v1")


@api_router.get("/")
async def root():
    return {"message": "ReelScout API is running"}


api_router.include_router(movies_router)
api_router.include_router(media_router)
api_router.include_router(trending_router)
api_router.include_router(watchlist_router)
api_router.include_router(caching_router)
