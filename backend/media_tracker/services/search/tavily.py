"""Tavily web search adapter."""
from pydantic import ValidationError
from tavily import AsyncTavilyClient

from media_tracker.schemas.config import SearchCredentials
from media_tracker.schemas.search import SearchResult
from media_tracker.services.search.base import MAX_RESULTS, SearchAdapter, SearchOutcome, items_of


class TavilySearch(SearchAdapter):
    """Search via the Tavily API, with image results enabled."""

    name = "Tavily"
    supports_images = True

    def __init__(self, search_depth: str = "basic"):
        """
        Initialize Tavily adapter.

        Args:
            search_depth: "basic" or "advanced"
        """
        self.search_depth = search_depth

    async def search(self, query: str, credentials: SearchCredentials) -> SearchOutcome:
        if not credentials.api_key:
            return "Error: Tavily Search configuration missing (API Key)"

        client = AsyncTavilyClient(api_key=credentials.api_key)
        try:
            response = await client.search(
                query=query,
                max_results=MAX_RESULTS,
                search_depth=self.search_depth,
                include_images=True,
            )
        except Exception as e:
            # The SDK raises its own error types as well as httpx ones
            return self.errored(e)

        items = items_of(response, "results")
        if not items:
            return self.no_results()

        # Images come back as a flat list, paired with results by position
        raw_images = response.get("images")
        images = [_image_url(image) for image in raw_images] if isinstance(raw_images, list) else []

        results = []
        try:
            for index, item in enumerate(items[:MAX_RESULTS]):
                results.append(SearchResult(
                    title=item.get("title") or "",
                    link=item.get("url") or "",
                    snippet=item.get("content") or "",
                    source=self.name,
                    image=images[index] if index < len(images) else None,
                ))
        except ValidationError as e:
            return self.errored(e)
        return results


def _image_url(image: str | dict) -> str | None:
    # include_image_descriptions switches entries to {"url", "description"}
    if isinstance(image, dict):
        return image.get("url") or None
    return image if isinstance(image, str) and image else None
