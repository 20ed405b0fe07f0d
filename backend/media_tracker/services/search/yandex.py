"""Yandex XML search adapter (regex parsing, no XML parser)."""
import re

import httpx

from media_tracker.schemas.config import SearchCredentials
from media_tracker.schemas.search import SearchResult
from media_tracker.services.search.base import (
    HTTP_TIMEOUT,
    MAX_RESULTS,
    SearchAdapter,
    SearchOutcome,
)

YANDEX_XML_URL = "https://yandex.com/search/xml"

DOC_PATTERN = re.compile(r"<doc(?:\s[^>]*)?>([\s\S]*?)</doc>")
TITLE_PATTERN = re.compile(r"<title>([\s\S]*?)</title>")
URL_PATTERN = re.compile(r"<url>([\s\S]*?)</url>")
SNIPPET_PATTERN = re.compile(r"<headline>([\s\S]*?)</headline>|<passage>([\s\S]*?)</passage>")
ERROR_PATTERN = re.compile(r"<error[^>]*>([\s\S]*?)</error>")
TAG_PATTERN = re.compile(r"<[^>]+>")

DEFAULT_SNIPPET = "Click to view content"


def strip_markup(text: str | None) -> str:
    """Drop highlight tags such as <hlword> embedded in titles."""
    return TAG_PATTERN.sub("", text).strip() if text else ""


def parse_results(xml_text: str) -> list[SearchResult]:
    results: list[SearchResult] = []
    for match in DOC_PATTERN.finditer(xml_text):
        if len(results) >= MAX_RESULTS:
            break
        doc = match.group(1)
        title = TITLE_PATTERN.search(doc)
        url = URL_PATTERN.search(doc)
        if not title or not url:
            continue
        snippet = SNIPPET_PATTERN.search(doc)
        snippet_text = strip_markup(snippet.group(1) or snippet.group(2)) if snippet else ""
        results.append(SearchResult(
            title=strip_markup(title.group(1)),
            link=url.group(1).strip(),
            snippet=snippet_text or DEFAULT_SNIPPET,
            source=YandexSearch.name,
        ))
    return results


class YandexSearch(SearchAdapter):
    """Needs a Yandex login (user) and XML API key; results carry no images."""

    name = "Yandex"
    supports_images = False

    def __init__(self, l10n: str = "en"):
        self.l10n = l10n

    async def search(self, query: str, credentials: SearchCredentials) -> SearchOutcome:
        if not credentials.api_key or not credentials.user:
            return "Error: Yandex Search configuration missing (User or Key)"

        params = {
            "user": credentials.user,
            "key": credentials.api_key,
            "query": query,
            "l10n": self.l10n,
            "sortby": "rlv",
            "filter": "none",
        }
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
                response = await client.get(YANDEX_XML_URL, params=params)
            if not response.is_success:
                return self.failed(response.reason_phrase)
            xml_text = response.text
        except httpx.HTTPError as e:
            return self.errored(e)

        results = parse_results(xml_text)
        if results:
            return results

        if "<error" in xml_text:
            error = ERROR_PATTERN.search(xml_text)
            return f"Yandex API Error: {error.group(1) if error else 'Unknown error'}"
        return self.no_results()
