"""Tests for the media API endpoints."""
import pytest
from unittest.mock import AsyncMock, Mock, patch
from httpx import AsyncClient, ASGITransport

from media_tracker.api.media import router
from media_tracker.core.config import settings
from media_tracker.core.deps import get_media_service
from media_tracker.main import app
from media_tracker.schemas.media import MediaItem, MediaType, MediaUpdate


@pytest.fixture
def service():
    """Media service stub injected into the app."""
    mock_service = Mock()
    mock_service.search = AsyncMock(return_value=[])
    mock_service.get_trending = AsyncMock(return_value=[])
    mock_service.check_updates = AsyncMock(return_value=[])
    mock_service.fetch_cover = AsyncMock(return_value="https://img/cover.jpg")
    app.dependency_overrides[get_media_service] = lambda: mock_service
    yield mock_service
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


def test_media_router_exists():
    assert router.prefix == "/media"
    assert "media" in router.tags


@pytest.mark.asyncio
async def test_health(client):
    async with client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_search_endpoint_returns_camel_case_items(service, client):
    service.search.return_value = [
        MediaItem(id="1", title="Dune", poster_url="https://img/dune.jpg", type=MediaType.MOVIE, release_date="2021"),
    ]

    async with client:
        response = await client.post("/api/media/search", json={"query": "dune", "type": "Movie"})

    assert response.status_code == 200
    body = response.json()
    assert body[0]["title"] == "Dune"
    assert body[0]["posterUrl"] == "https://img/dune.jpg"
    assert body[0]["releaseDate"] == "2021"
    service.search.assert_awaited_once_with("dune", MediaType.MOVIE)


@pytest.mark.asyncio
async def test_search_endpoint_all_means_no_filter(service, client):
    async with client:
        response = await client.post("/api/media/search", json={"query": "dune", "type": "All"})

    assert response.status_code == 200
    service.search.assert_awaited_once_with("dune", None)


@pytest.mark.asyncio
async def test_trending_endpoint(service, client):
    async with client:
        response = await client.get("/api/media/trending")

    assert response.status_code == 200
    assert response.json() == []
    service.get_trending.assert_awaited_once()


@pytest.mark.asyncio
async def test_updates_endpoint(service, client):
    service.check_updates.return_value = [
        MediaUpdate(id="id-1", latest_update_info="Chapter 1130", is_ongoing=True),
    ]
    payload = {"items": [{"id": "id-1", "title": "One Piece", "posterUrl": "https://img/op.jpg", "type": "Comic"}]}

    async with client:
        response = await client.post("/api/media/updates", json=payload)

    assert response.status_code == 200
    assert response.json() == [{"id": "id-1", "latestUpdateInfo": "Chapter 1130", "isOngoing": True}]
    items = service.check_updates.await_args.args[0]
    assert items[0].title == "One Piece"


@pytest.mark.asyncio
async def test_cover_endpoint(service, client):
    async with client:
        response = await client.post(
            "/api/media/cover",
            json={"title": "Dune", "releaseDate": "2021-10-22", "type": "Movie"},
        )

    assert response.status_code == 200
    assert response.json() == {"posterUrl": "https://img/cover.jpg"}
    service.fetch_cover.assert_awaited_once_with("Dune", "2021-10-22", MediaType.MOVIE)


@pytest.mark.asyncio
async def test_api_key_required_when_configured(service, client):
    with patch.object(settings, "api_key", "gorgonzola"):
        async with client:
            missing = await client.get("/api/media/trending")
            wrong = await client.get("/api/media/trending", headers={"X-API-Key": "cheddar"})
            valid = await client.get("/api/media/trending", headers={"X-API-Key": "gorgonzola"})

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert valid.status_code == 200


@pytest.mark.asyncio
async def test_search_endpoint_validates_body(service, client):
    async with client:
        response = await client.post("/api/media/search", json={"type": "Movie"})

    assert response.status_code == 422
    service.search.assert_not_awaited()
