"""Routes web search queries to the configured provider adapter."""
import logging

from media_tracker.schemas.config import SearchConfig, SearchProvider
from media_tracker.services.search.base import SearchAdapter, SearchOutcome
from media_tracker.services.search.duckduckgo import DuckDuckGoSearch
from media_tracker.services.search.google import GoogleSearch
from media_tracker.services.search.serper import SerperSearch
from media_tracker.services.search.tavily import TavilySearch
from media_tracker.services.search.yandex import YandexSearch

logger = logging.getLogger(__name__)

SEARCH_DISABLED = "Search disabled"

ADAPTERS: dict[SearchProvider, SearchAdapter] = {
    SearchProvider.GOOGLE: GoogleSearch(),
    SearchProvider.SERPER: SerperSearch(),
    SearchProvider.TAVILY: TavilySearch(),
    SearchProvider.DUCKDUCKGO: DuckDuckGoSearch(),
    SearchProvider.YANDEX: YandexSearch(),
}

DEFAULT_PROVIDER = SearchProvider.GOOGLE


def get_adapter(provider: SearchProvider | str) -> SearchAdapter:
    """Adapter for a provider name; unknown names get the Google adapter."""
    try:
        return ADAPTERS[SearchProvider(provider)]
    except (KeyError, ValueError):
        return ADAPTERS[DEFAULT_PROVIDER]


async def dispatch(query: str, config: SearchConfig) -> SearchOutcome:
    """
    Run a web search with the configured provider.

    Args:
        query: Search query
        config: Search configuration snapshot

    Returns:
        List of results, or a human-readable message explaining why there are none
    """
    if not config.enabled:
        return SEARCH_DISABLED

    adapter = get_adapter(config.provider)
    logger.info(f"Web search via {adapter.name}: {query!r}")
    return await adapter.search(query, config.credentials())
