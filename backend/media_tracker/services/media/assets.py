"""Poster/cover image resolution with an ordered provider fallback chain."""
import logging
from typing import Awaitable, Callable
from urllib.parse import quote, urlparse

import httpx

from media_tracker.schemas.config import AIConfig
from media_tracker.schemas.media import MediaType
from media_tracker.services.llm.conversation import SearchFn
from media_tracker.services.search.base import HTTP_TIMEOUT
from media_tracker.services.search.dispatcher import dispatch, get_adapter

logger = logging.getLogger(__name__)

OMDB_URL = "https://www.omdbapi.com/"

# Pages on these hosts are not hotlinkable images
SOCIAL_MEDIA_HOSTS = ("instagram.com", "facebook.com", "twitter.com", "x.com")

PLACEHOLDER_COLOURS = {
    MediaType.MOVIE: "1a1a1a",
    MediaType.TV_SERIES: "2b2b2b",
    MediaType.BOOK: "3c3c3c",
    MediaType.COMIC: "4d4d4d",
    MediaType.SHORT_DRAMA: "5e5e5e",
    MediaType.MUSIC: "6f6f6f",
    MediaType.OTHER: "808080",
}

LOCALIZED_TYPE_LABELS = {
    "zh": {
        MediaType.BOOK: "书籍",
        MediaType.MOVIE: "电影",
        MediaType.TV_SERIES: "电视剧",
        MediaType.COMIC: "漫画",
        MediaType.SHORT_DRAMA: "短剧",
        MediaType.MUSIC: "音乐",
        MediaType.OTHER: "作品",
    },
}

Resolver = Callable[[str, str, MediaType], Awaitable[str | None]]


def is_hotlinkable(url: str) -> bool:
    """False for social media pages posing as image URLs."""
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return False
    return not any(host == blocked or host.endswith(f".{blocked}") for blocked in SOCIAL_MEDIA_HOSTS)


def placeholder_url(media_type: MediaType) -> str:
    """Deterministic placeholder labelled with the media type."""
    media_type = MediaType.coerce(media_type)
    colour = PLACEHOLDER_COLOURS.get(media_type, PLACEHOLDER_COLOURS[MediaType.OTHER])
    return f"https://placehold.co/600x900/{colour}/FFF?text={quote(media_type.value)}"


def _join(*parts: str) -> str:
    return " ".join(part.strip() for part in parts if part and part.strip())


def generic_image_query(title: str, year: str, media_type: MediaType) -> str:
    return _join(media_type.value, title, year, "poster")


def localized_image_query(title: str, year: str, media_type: MediaType, language: str) -> str:
    code = (language or "en").split("-")[0].split("_")[0].lower()
    labels = LOCALIZED_TYPE_LABELS.get(code)
    if labels:
        return _join(title, year, labels[media_type], "海报")
    return _join(media_type.value, title, year, "poster cover")


class AssetResolver:
    """
    Finds a displayable image for a title.

    Tries the active search provider (localized, then generic phrasing), then
    OMDb, and finally falls back to a placeholder, so the result is never empty.
    """

    def __init__(self, config: AIConfig, search: SearchFn | None = None):
        self.config = config
        self.search = search or dispatch

    @property
    def resolvers(self) -> list[Resolver]:
        return [self.from_localized_search, self.from_generic_search, self.from_omdb]

    async def resolve_image(self, title: str, year: str, media_type: MediaType) -> str:
        """
        Resolve an image URL.

        Args:
            title: Work title
            year: Release year ("" if unknown)
            media_type: Type used in queries and in the placeholder label

        Returns:
            Image URL, the placeholder when every resolver came up empty
        """
        media_type = MediaType.coerce(media_type)
        for resolver in self.resolvers:
            try:
                url = await resolver(title, year, media_type)
            except Exception as e:
                logger.warning(f"{resolver.__name__} failed for {title!r}: {e}")
                continue
            if url:
                return url
        return placeholder_url(media_type)

    def _can_search_images(self) -> bool:
        search = self.config.search
        return search.enabled and get_adapter(search.provider).supports_images

    async def _image_from_search(self, query: str) -> str | None:
        outcome = await self.search(query, self.config.search)
        if isinstance(outcome, str):
            logger.debug(f"Image search for {query!r} returned: {outcome}")
            return None
        for result in outcome:
            if result.image and is_hotlinkable(result.image):
                return result.image
        return None

    async def from_localized_search(self, title: str, year: str, media_type: MediaType) -> str | None:
        if not self._can_search_images():
            return None
        return await self._image_from_search(
            localized_image_query(title, year, media_type, self.config.language)
        )

    async def from_generic_search(self, title: str, year: str, media_type: MediaType) -> str | None:
        if not self._can_search_images():
            return None
        query = generic_image_query(title, year, media_type)
        if query == localized_image_query(title, year, media_type, self.config.language):
            return None
        return await self._image_from_search(query)

    async def from_omdb(self, title: str, year: str, media_type: MediaType) -> str | None:
        if not self.config.omdb_api_key:
            return None

        params = {
            "t": title,
            "y": year.split("-")[0].strip() if year else "",
            "apikey": self.config.omdb_api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
                response = await client.get(OMDB_URL, params=params)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to fetch poster for {title!r} from OMDb: {e}")
            return None

        poster = data.get("Poster")
        if data.get("Response") == "True" and poster and poster != "N/A":
            return poster
        return None
