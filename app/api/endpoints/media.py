from fastapi import APIRouter, Depends

from app.api.deps import get_services
from app.core.exceptions import InvalidRequestError
from app.models.response import SuccessResponse
from app.services.container import Services

router = APIRouter(prefix="/media", tags=["media"])


@router.get("/{media_type}/{media_id}", response_model=SuccessResponse)
async def get_media_details(media_type: str, media_id: int, services: Services = Depends(get_services)):
    if media_type == "movie":
        data = await services.tmdb.get_movie_details(media_id)
    elif media_type == "tv":
        data = await services.tmdb.get_tv_details(media_id)
    else:
        raise InvalidRequestError("media type must be movie or tv")
    return SuccessResponse(data=data, message="Media details retrieved successfully")
