# backend/media_tracker/core/deps.py
import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from media_tracker.core.config import settings
from media_tracker.services.media import MediaService

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def require_api_key(
    api_key: str | None = Depends(api_key_header),
) -> None:
    """Guard the API with a shared key when one is configured."""
    if not settings.api_key:
        return
    if not api_key or not secrets.compare_digest(api_key, settings.api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )


def get_media_service() -> MediaService:
    """Dependency for the media service (fresh config snapshot per request)."""
    return MediaService()
