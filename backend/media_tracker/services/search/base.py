"""Common contract for web search provider adapters."""
from abc import ABC, abstractmethod
from typing import Any

from media_tracker.schemas.config import SearchCredentials
from media_tracker.schemas.search import SearchResult

MAX_RESULTS = 5
HTTP_TIMEOUT = 30.0

SearchOutcome = list[SearchResult] | str


def items_of(data: Any, key: str) -> list[dict[str, Any]]:
    """Object entries under data[key]; bodies of any other shape have none."""
    if not isinstance(data, dict):
        return []
    items = data.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class SearchAdapter(ABC):
    """
    Base for provider adapters.

    search() never raises: failures come back as human-readable strings,
    successes as a list of at most MAX_RESULTS records.
    """

    name: str = "unknown"  # Override in subclass, used in messages and source tags
    supports_images: bool = False

    @abstractmethod
    async def search(self, query: str, credentials: SearchCredentials) -> SearchOutcome:
        """Run a query against the provider."""

    def failed(self, reason: str) -> str:
        return f"{self.name} Search failed: {reason}"

    def errored(self, error: Exception) -> str:
        return f"{self.name} Search error: {error}"

    def no_results(self) -> str:
        return f"No {self.name} results found."
