from media_tracker.schemas.config import AIConfig, LLMProvider, SearchConfig, SearchProvider
from media_tracker.schemas.media import (
    MediaItem,
    MediaType,
    MediaUpdate,
)
from media_tracker.schemas.search import SearchResult

__all__ = [
    "AIConfig",
    "LLMProvider",
    "SearchConfig",
    "SearchProvider",
    "MediaItem",
    "MediaType",
    "MediaUpdate",
    "SearchResult",
]
