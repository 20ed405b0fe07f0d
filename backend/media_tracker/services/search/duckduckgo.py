"""Keyless DuckDuckGo adapter scraping the lightweight HTML endpoint."""
import logging
import re
from urllib.parse import parse_qs, urlparse

import httpx

from media_tracker.schemas.config import SearchCredentials
from media_tracker.schemas.search import SearchResult
from media_tracker.services.search.base import (
    HTTP_TIMEOUT,
    MAX_RESULTS,
    SearchAdapter,
    SearchOutcome,
)

logger = logging.getLogger(__name__)

DUCKDUCKGO_HTML_URL = "https://html.duckduckgo.com/html/"

# The endpoint rejects default HTTP client user agents
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# Result containers carry other classes too, e.g. class="links_main links_deep result__body"
RESULT_MARKER = re.compile(r'class="[^"]*\bresult__body\b[^"]*"')
TITLE_MARKER = 'class="result__a"'
SNIPPET_MARKER = 'class="result__snippet"'

HREF_PATTERN = re.compile(r'href="(.*?)"')
ANCHOR_TEXT_PATTERN = re.compile(r">(.*?)</a>")
TAG_PATTERN = re.compile(r"<[^>]+>")

HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}
ENTITY_PATTERN = re.compile("|".join(HTML_ENTITIES))


def decode_entities(text: str) -> str:
    """Decode the handful of entities DuckDuckGo emits."""
    return ENTITY_PATTERN.sub(lambda m: HTML_ENTITIES[m.group(0)], text)


def _anchor_text(block: str, marker: str) -> str | None:
    _, found, rest = block.partition(marker)
    if not found:
        return None
    match = ANCHOR_TEXT_PATTERN.search(rest)
    if not match:
        return None
    return decode_entities(TAG_PATTERN.sub("", match.group(1))).strip()


def _unwrap_link(href: str) -> str:
    """Resolve DuckDuckGo redirect links (/l/?uddg=...) to their target."""
    href = decode_entities(href)
    parsed = urlparse(href)
    if parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            return target[0]
    if href.startswith("//"):
        return f"https:{href}"
    return href


def parse_results(html: str) -> list[SearchResult]:
    """Extract up to MAX_RESULTS results from a DuckDuckGo HTML page."""
    results: list[SearchResult] = []
    for block in RESULT_MARKER.split(html)[1:]:
        if len(results) >= MAX_RESULTS:
            break
        link = HREF_PATTERN.search(block)
        title = _anchor_text(block, TITLE_MARKER)
        if not link or not title:
            continue
        results.append(SearchResult(
            title=title,
            link=_unwrap_link(link.group(1)),
            snippet=_anchor_text(block, SNIPPET_MARKER) or "",
            source=DuckDuckGoSearch.name,
        ))
    return results


class DuckDuckGoSearch(SearchAdapter):
    """No credentials needed; results carry no images."""

    name = "DuckDuckGo"
    supports_images = False

    async def search(self, query: str, credentials: SearchCredentials) -> SearchOutcome:
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT, follow_redirects=True) as client:
                response = await client.get(
                    DUCKDUCKGO_HTML_URL,
                    params={"q": query},
                    headers=BROWSER_HEADERS,
                )
            if not response.is_success:
                logger.error(f"DuckDuckGo Search failed: {response.status_code} {response.reason_phrase}")
                return self.failed(response.reason_phrase)
            html = response.text
        except httpx.HTTPError as e:
            logger.error(f"DuckDuckGo Search error: {e}")
            return self.errored(e)

        results = parse_results(html)
        if not results:
            logger.warning("DuckDuckGo parsing found 0 results. HTML might have changed.")
            return "No DuckDuckGo results found (parsing may have failed or no results)."
        return results
