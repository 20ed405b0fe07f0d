"""Google Custom Search JSON API adapter."""
import httpx
from pydantic import ValidationError

from media_tracker.schemas.config import SearchCredentials
from media_tracker.schemas.search import SearchResult
from media_tracker.services.search.base import (
    HTTP_TIMEOUT,
    MAX_RESULTS,
    SearchAdapter,
    SearchOutcome,
    items_of,
)

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"


class GoogleSearch(SearchAdapter):
    """Search through a Google Programmable Search Engine (API key + cx)."""

    name = "Google"
    supports_images = True

    async def search(self, query: str, credentials: SearchCredentials) -> SearchOutcome:
        if not credentials.api_key or not credentials.cx:
            return "Error: Google Search configuration missing (API Key or CX)"

        params = {"key": credentials.api_key, "cx": credentials.cx, "q": query}
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
                response = await client.get(GOOGLE_SEARCH_URL, params=params)
            if not response.is_success:
                return self.failed(response.reason_phrase)
            data = response.json()
        except httpx.HTTPError as e:
            return self.errored(e)
        except ValueError as e:
            return self.errored(e)

        items = items_of(data, "items")
        if not items:
            return self.no_results()

        try:
            return [
                SearchResult(
                    title=item.get("title") or "",
                    link=item.get("link") or "",
                    snippet=item.get("snippet") or "",
                    source=self.name,
                    image=_cse_image(item),
                )
                for item in items[:MAX_RESULTS]
            ]
        except ValidationError as e:
            return self.errored(e)


def _cse_image(item: dict) -> str | None:
    pagemap = item.get("pagemap")
    images = items_of(pagemap, "cse_image")
    if images:
        return images[0].get("src") or None
    return None
