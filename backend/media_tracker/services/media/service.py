"""Media search, trending and update tracking on top of the query engine."""
import asyncio
import logging
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import ValidationError

from media_tracker.core.config import settings
from media_tracker.schemas.config import AIConfig
from media_tracker.schemas.conversation import ChatMessage
from media_tracker.schemas.media import MediaDraft, MediaItem, MediaType, MediaUpdate, UpdateDraft
from media_tracker.services.llm.client import LLMError
from media_tracker.services.llm.conversation import ConversationEngine
from media_tracker.services.media.assets import AssetResolver
from media_tracker.services.media.extractor import extract_records, parse_drafts
from media_tracker.services.media.prompts import (
    UPDATES_SYSTEM_PROMPT,
    build_search_prompt,
    build_system_prompt,
    build_trending_prompt,
    build_updates_prompt,
)

logger = logging.getLogger(__name__)

SEARCH_TEMPERATURE = 0.3
TRENDING_TEMPERATURE = 0.5
UPDATES_TEMPERATURE = 0.1


class MediaService:
    """
    Entry points used by the presentation layer.

    Every public method takes a configuration snapshot at call start and
    returns an empty collection instead of raising.
    """

    def __init__(self, config: AIConfig | None = None):
        """
        Args:
            config: Configuration snapshot (defaults to one built from settings)
        """
        self.config = config or AIConfig.from_settings(settings)

    def _engine(self, config: AIConfig) -> ConversationEngine:
        return ConversationEngine(config)

    def _resolver(self, config: AIConfig) -> AssetResolver:
        return AssetResolver(config)

    async def _ask(self, config: AIConfig, messages: list[ChatMessage], temperature: float) -> str:
        try:
            return await self._engine(config).run(messages, temperature=temperature)
        except (LLMError, ValueError) as e:
            logger.error(f"AI chat failed: {e}")
            return ""

    async def _finalize(self, config: AIConfig, drafts: list[MediaDraft]) -> list[MediaItem]:
        """Assign ids and resolve posters for all drafts concurrently."""
        resolver = self._resolver(config)
        added_at = datetime.now(timezone.utc).isoformat()

        async def finalize(draft: MediaDraft) -> MediaItem:
            poster_url = await resolver.resolve_image(draft.title, draft.year, draft.type)
            return MediaItem(
                **draft.model_dump(),
                id=str(uuid4()),
                poster_url=poster_url,
                added_at=added_at,
            )

        return list(await asyncio.gather(*(finalize(draft) for draft in drafts)))

    async def search(self, query: str, type_filter: MediaType | None = None) -> list[MediaItem]:
        """
        Search media works matching a free-text query.

        Args:
            query: Free-text query
            type_filter: Restrict results to one media type

        Returns:
            Finalized media items (empty on any failure)
        """
        if not query or not query.strip():
            return []

        config = self.config
        messages = [
            ChatMessage.system(build_system_prompt(config.language)),
            ChatMessage.user(build_search_prompt(query.strip(), type_filter)),
        ]
        try:
            text = await self._ask(config, messages, SEARCH_TEMPERATURE)
            return await self._finalize(config, parse_drafts(text))
        except Exception:
            logger.exception(f"Media search failed for {query!r}")
            return []

    async def get_trending(self) -> list[MediaItem]:
        """Currently trending titles."""
        config = self.config
        messages = [
            ChatMessage.system(build_system_prompt(config.language)),
            ChatMessage.user(build_trending_prompt(config.search.enabled)),
        ]
        try:
            text = await self._ask(config, messages, TRENDING_TEMPERATURE)
            return await self._finalize(config, parse_drafts(text))
        except Exception:
            logger.exception("Loading trending media failed")
            return []

    async def check_updates(self, items: list[MediaItem]) -> list[MediaUpdate]:
        """
        Ask for the latest episode/chapter of tracked items.

        Updates are matched back to items by case-insensitive title; updates
        for titles not in the input are dropped.
        """
        if not items:
            return []

        config = self.config
        title_to_id = {item.title.lower(): item.id for item in items}
        messages = [
            ChatMessage.system(UPDATES_SYSTEM_PROMPT),
            ChatMessage.user(build_updates_prompt(items)),
        ]
        try:
            text = await self._ask(config, messages, UPDATES_TEMPERATURE)
        except Exception:
            logger.exception("Update check failed")
            return []

        updates = []
        for record in extract_records(text):
            try:
                draft = UpdateDraft.model_validate(record)
            except ValidationError as e:
                logger.debug(f"Skipping invalid update {record!r}: {e}")
                continue
            item_id = title_to_id.get(draft.title.lower())
            if not item_id:
                continue
            updates.append(MediaUpdate(
                id=item_id,
                latest_update_info=draft.latest_update_info,
                is_ongoing=draft.is_ongoing,
            ))
        return updates

    async def fetch_cover(self, title: str, release_date: str = "", media_type: MediaType = MediaType.OTHER) -> str:
        """Resolve a cover for an item the catalog stored without one."""
        year = release_date.split("-")[0].strip() if release_date else ""
        return await self._resolver(self.config).resolve_image(title, year, media_type)
