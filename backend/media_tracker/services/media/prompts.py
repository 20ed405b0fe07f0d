"""Prompt templates for media search, trending and update tracking."""
from datetime import date

from media_tracker.schemas.media import MediaItem, MediaType

LANGUAGE_NAMES = {
    "en": "English",
    "zh": "Simplified Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "ru": "Russian",
}

SYSTEM_PROMPT = """You are a helpful media encyclopedia and curator.
{date_context}
When searching or recommending, you must return a VALID JSON array of objects.
Do not wrap the JSON in markdown code blocks. Just return the raw JSON array.
Each object must have the following fields:
- title: string
- directorOrAuthor: string
- cast: string[] (max 5 main actors, empty for books if not applicable)
- description: string (approx 150 words, covering theme and background)
- releaseDate: string (YYYY-MM-DD preferred, or YYYY)
- type: one of [{types}]
- isOngoing: boolean
- latestUpdateInfo: string (empty if completed)
- rating: string (e.g. "8.5/10")

Write title, description and latestUpdateInfo in {language}.
Ensure data is accurate.
"""

UPDATES_SYSTEM_PROMPT = "You are a media update tracker. Return ONLY raw JSON array. No markdown."

UPDATES_PROMPT = """Provide the latest update information (latest episode, chapter, etc.) for the following titles: {titles}.
Return a JSON array with objects containing:
- title: string (exact match)
- latestUpdateInfo: string (e.g. "Season 4 Episode 8" or "Chapter 1052")
- isOngoing: boolean (true if still updating)
"""


def get_date_context() -> str:
    """
    Get current date context for LLM prompts.

    Returns:
        Date string like "Today's date is January 25, 2026. "
    """
    today = date.today()
    return f"Today's date is {today.strftime('%B %d, %Y')}. "


def language_name(language: str) -> str:
    """Human-readable language for a locale code such as "zh-CN"."""
    code = (language or "en").split("-")[0].split("_")[0].lower()
    return LANGUAGE_NAMES.get(code, language)


def build_system_prompt(language: str) -> str:
    return SYSTEM_PROMPT.format(
        date_context=get_date_context(),
        types=", ".join(f'"{t.value}"' for t in MediaType),
        language=language_name(language),
    )


def build_search_prompt(query: str, type_filter: MediaType | None = None) -> str:
    prompt = f'Search for media works matching the query: "{query}".'
    if type_filter:
        prompt += f' Strictly limit results to type: "{type_filter.value}".'
    else:
        prompt += " (books, movies, TV series, comics, short dramas)"
    prompt += (
        " Perform a fuzzy search to find the most relevant results."
        " Do not limit the number of results, return as many as possible."
    )
    return prompt


def build_trending_prompt(search_enabled: bool) -> str:
    prompt = (
        "Recommend 4 currently trending movies, TV series, or dramas that have been "
        "updated or released within the last 2 months. Focus on the highest "
        "popularity/heat. Ensure the results are strictly from the recent 60 days."
    )
    if search_enabled:
        prompt += "\n\nUse the web_search tool to find real-time information before answering."
    else:
        prompt += (
            "\n\n(Note: If you cannot access real-time data, please recommend the most "
            "widely discussed and anticipated titles you know of.)"
        )
    return prompt


def build_updates_prompt(items: list[MediaItem]) -> str:
    titles = ", ".join(f'"{item.title}" ({item.type.value})' for item in items)
    return UPDATES_PROMPT.format(titles=titles)
