"""Tests for the search dispatcher."""
import pytest
from unittest.mock import AsyncMock, Mock, patch

from media_tracker.schemas.config import SearchConfig, SearchCredentials, SearchProvider
from media_tracker.schemas.search import SearchResult
from media_tracker.services.search.dispatcher import ADAPTERS, SEARCH_DISABLED, dispatch, get_adapter
from media_tracker.services.search.duckduckgo import DuckDuckGoSearch
from media_tracker.services.search.google import GoogleSearch


def fake_adapter(search: AsyncMock) -> Mock:
    adapter = Mock()
    adapter.name = "Fake"
    adapter.search = search
    return adapter


@pytest.mark.asyncio
async def test_dispatch_disabled_never_calls_an_adapter():
    """Test disabled search returns the literal marker without touching adapters."""
    mocks = {provider: AsyncMock() for provider in ADAPTERS}
    adapters = {provider: fake_adapter(mock) for provider, mock in mocks.items()}
    with patch("media_tracker.services.search.dispatcher.ADAPTERS", adapters):
        for provider in SearchProvider:
            result = await dispatch("Inception", SearchConfig(enabled=False, provider=provider))
            assert result == "Search disabled"

    assert SEARCH_DISABLED == "Search disabled"
    assert all(mock.call_count == 0 for mock in mocks.values())


@pytest.mark.asyncio
async def test_dispatch_routes_to_configured_provider():
    hit = [SearchResult(title="t", link="https://x", source="Serper")]
    serper = AsyncMock(return_value=hit)
    google = AsyncMock(return_value="unused")

    adapters = {
        SearchProvider.SERPER: fake_adapter(serper),
        SearchProvider.GOOGLE: fake_adapter(google),
    }
    with patch("media_tracker.services.search.dispatcher.ADAPTERS", adapters):
        config = SearchConfig(enabled=True, provider="serper", serper_api_key="s-key")
        result = await dispatch("Dune", config)

    assert result == hit
    serper.assert_awaited_once_with("Dune", SearchCredentials(api_key="s-key"))
    google.assert_not_awaited()


@pytest.mark.asyncio
async def test_dispatch_returns_adapter_error_text():
    config = SearchConfig(enabled=True, provider="google")
    result = await dispatch("Dune", config)
    assert result == "Error: Google Search configuration missing (API Key or CX)"


def test_get_adapter_unknown_provider_falls_back_to_google():
    assert isinstance(get_adapter("bing"), GoogleSearch)
    assert isinstance(get_adapter(SearchProvider.DUCKDUCKGO), DuckDuckGoSearch)


def test_image_capability_flags():
    assert get_adapter(SearchProvider.GOOGLE).supports_images
    assert get_adapter(SearchProvider.SERPER).supports_images
    assert get_adapter(SearchProvider.TAVILY).supports_images
    assert not get_adapter(SearchProvider.DUCKDUCKGO).supports_images
    assert not get_adapter(SearchProvider.YANDEX).supports_images
