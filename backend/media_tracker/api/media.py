from fastapi import APIRouter, Depends

from media_tracker.core.deps import get_media_service, require_api_key
from media_tracker.schemas.media import (
    CoverRequest,
    CoverResponse,
    MediaItem,
    MediaSearchRequest,
    MediaUpdate,
    UpdateCheckRequest,
)
from media_tracker.services.media import MediaService

router = APIRouter(prefix="/media", tags=["media"], dependencies=[Depends(require_api_key)])


@router.post("/search", response_model=list[MediaItem])
async def search_media(
    data: MediaSearchRequest,
    service: MediaService = Depends(get_media_service),
):
    """Search media works with the AI engine."""
    return await service.search(data.query, data.type)


@router.get("/trending", response_model=list[MediaItem])
async def trending_media(service: MediaService = Depends(get_media_service)):
    """Recently released or updated popular titles."""
    return await service.get_trending()


@router.post("/updates", response_model=list[MediaUpdate])
async def check_updates(
    data: UpdateCheckRequest,
    service: MediaService = Depends(get_media_service),
):
    """Latest episode/chapter info for tracked items."""
    return await service.check_updates(data.items)


@router.post("/cover", response_model=CoverResponse)
async def fetch_cover(
    data: CoverRequest,
    service: MediaService = Depends(get_media_service),
):
    """Resolve a cover image for an item stored without one."""
    poster_url = await service.fetch_cover(data.title, data.release_date, data.type)
    return CoverResponse(poster_url=poster_url)
