from fastapi import APIRouter, Depends

from app.api.deps import get_services, get_user_id
from app.models.response import Meta, RecommendationResponse, SuccessResponse
from app.models.watchlist import WatchlistCreateRequest, WatchlistItemAddRequest, WatchlistItemUpdateRequest
from app.services.container import Services

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


@router.post("", status_code=201, response_model=SuccessResponse)
async def create_watchlist(
    payload: WatchlistCreateRequest,
    user_id: str = Depends(get_user_id),
    services: Services = Depends(get_services),
):
    watchlist = services.watchlists.create_watchlist(user_id, payload)
    return SuccessResponse(data=watchlist, message="Watchlist created successfully")


@router.get("", response_model=SuccessResponse)
async def get_watchlist(user_id: str = Depends(get_user_id), services: Services = Depends(get_services)):
    watchlist = await services.watchlists.get_watchlist(user_id)
    return SuccessResponse(data=watchlist, message="Watchlist retrieved successfully")


@router.post("/items", status_code=201, response_model=SuccessResponse)
async def add_to_watchlist(
    payload: WatchlistItemAddRequest,
    user_id: str = Depends(get_user_id),
    services: Services = Depends(get_services),
):
    item = await services.watchlists.add_item(user_id, payload)
    return SuccessResponse(data=item, message="Movie added to watchlist successfully")


@router.put("/items", response_model=SuccessResponse)
async def update_watchlist_item(
    item_id: int,
    payload: WatchlistItemUpdateRequest,
    user_id: str = Depends(get_user_id),
    services: Services = Depends(get_services),
):
    item = services.watchlists.update_item(user_id, item_id, payload)
    return SuccessResponse(data=item, message="Watchlist item updated successfully")


@router.delete("/items", response_model=SuccessResponse)
async def remove_from_watchlist(
    item_id: int,
    user_id: str = Depends(get_user_id),
    services: Services = Depends(get_services),
):
    services.watchlists.remove_item(user_id, item_id)
    return SuccessResponse(message="Movie removed from watchlist successfully")


@router.get("/stats", response_model=SuccessResponse)
async def get_watchlist_stats(user_id: str = Depends(get_user_id), services: Services = Depends(get_services)):
    stats = services.watchlists.get_stats(user_id)
    return SuccessResponse(data=stats, message="Watchlist stats retrieved successfully")


@router.get("/recommendations", response_model=RecommendationResponse)
async def get_recommendations(
    limit: int = 10,
    user_id: str = Depends(get_user_id),
    services: Services = Depends(get_services),
):
    if limit <= 0:
        limit = services.settings.DEFAULT_RESULT_LIMIT
    recommendations = await services.recommendations.get_recommendations(user_id, limit)
    meta = Meta.for_page(1, limit, 1, len(recommendations))
    return RecommendationResponse(recommendations=recommendations, user_id=user_id, meta=meta)
