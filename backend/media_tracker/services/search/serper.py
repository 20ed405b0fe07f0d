"""Serper (google.serper.dev) adapter."""
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

SERPER_SEARCH_URL = "https://google.serper.dev/search"


class SerperSearch(SearchAdapter):
    name = "Serper"
    supports_images = True

    async def search(self, query: str, credentials: SearchCredentials) -> SearchOutcome:
        if not credentials.api_key:
            return "Error: Serper Search configuration missing (API Key)"

        headers = {"X-API-KEY": credentials.api_key, "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
                response = await client.post(SERPER_SEARCH_URL, json={"q": query}, headers=headers)
            if not response.is_success:
                return self.failed(response.reason_phrase)
            data = response.json()
        except httpx.HTTPError as e:
            return self.errored(e)
        except ValueError as e:
            return self.errored(e)

        organic = items_of(data, "organic")
        if not organic:
            return self.no_results()

        try:
            return [
                SearchResult(
                    title=item.get("title") or "",
                    link=item.get("link") or "",
                    snippet=item.get("snippet") or "",
                    source=self.name,
                    image=item.get("imageUrl") or None,
                )
                for item in organic[:MAX_RESULTS]
            ]
        except ValidationError as e:
            return self.errored(e)
