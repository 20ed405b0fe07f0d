"""Provider configuration snapshots handed to the query engine."""
import enum
import logging

from pydantic import BaseModel, ConfigDict, field_validator

from media_tracker.core.config import Settings

logger = logging.getLogger(__name__)


class LLMProvider(str, enum.Enum):
    """Supported language-model providers (all OpenAI-compatible)."""

    MOONSHOT = "moonshot"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    DEEPSEEK = "deepseek"
    QWEN = "qwen"
    GOOGLE = "google"
    MISTRAL = "mistral"
    CUSTOM = "custom"


class SearchProvider(str, enum.Enum):
    """Supported web search providers."""

    GOOGLE = "google"
    SERPER = "serper"
    TAVILY = "tavily"
    DUCKDUCKGO = "duckduckgo"
    YANDEX = "yandex"


# provider -> (base_url, model)
PROVIDER_DEFAULTS: dict[LLMProvider, tuple[str, str]] = {
    LLMProvider.MOONSHOT: ("https://api.moonshot.cn/v1", "moonshot-v1-8k"),
    LLMProvider.OPENAI: ("https://api.openai.com/v1", "gpt-4o"),
    LLMProvider.ANTHROPIC: ("https://api.anthropic.com/v1/", "claude-sonnet-4-20250514"),
    LLMProvider.DEEPSEEK: ("https://api.deepseek.com", "deepseek-chat"),
    LLMProvider.QWEN: ("https://dashscope.aliyuncs.com/compatible-mode/v1", "qwen-plus"),
    LLMProvider.GOOGLE: ("https://generativelanguage.googleapis.com/v1beta/openai/", "gemini-1.5-flash"),
    LLMProvider.MISTRAL: ("https://api.mistral.ai/v1", "mistral-small-latest"),
    LLMProvider.CUSTOM: ("", ""),
}


class SearchCredentials(BaseModel):
    """Credentials for the active search provider."""
    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    cx: str | None = None  # Google curated index id
    user: str | None = None  # Yandex login


class SearchConfig(BaseModel):
    """Web search settings. Holds credentials for every provider."""
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    provider: SearchProvider = SearchProvider.GOOGLE
    google_api_key: str | None = None
    google_cx: str | None = None
    serper_api_key: str | None = None
    tavily_api_key: str | None = None
    yandex_api_key: str | None = None
    yandex_user: str | None = None

    @field_validator("provider", mode="before")
    @classmethod
    def fallback_unknown_provider(cls, value):
        """Unknown provider names fall back to Google."""
        if isinstance(value, SearchProvider):
            return value
        try:
            return SearchProvider(str(value).lower())
        except ValueError:
            logger.warning(f"Unknown search provider '{value}', using google")
            return SearchProvider.GOOGLE

    def credentials(self) -> SearchCredentials:
        """Credentials of the currently selected provider."""
        if self.provider == SearchProvider.GOOGLE:
            return SearchCredentials(api_key=self.google_api_key, cx=self.google_cx)
        if self.provider == SearchProvider.SERPER:
            return SearchCredentials(api_key=self.serper_api_key)
        if self.provider == SearchProvider.TAVILY:
            return SearchCredentials(api_key=self.tavily_api_key)
        if self.provider == SearchProvider.YANDEX:
            return SearchCredentials(api_key=self.yandex_api_key, user=self.yandex_user)
        return SearchCredentials()


class AIConfig(BaseModel):
    """
    Immutable configuration snapshot for one engine call.

    Switching providers goes through with_provider(), which replaces the
    endpoint and model together.
    """
    model_config = ConfigDict(frozen=True)

    provider: LLMProvider = LLMProvider.MOONSHOT
    api_key: str | None = None
    base_url: str = PROVIDER_DEFAULTS[LLMProvider.MOONSHOT][0]
    model: str = PROVIDER_DEFAULTS[LLMProvider.MOONSHOT][1]
    temperature: float = 0.3
    max_tokens: int = 2000
    language: str = "en"
    search: SearchConfig = SearchConfig()
    omdb_api_key: str | None = None

    def with_provider(
        self,
        provider: LLMProvider,
        base_url: str | None = None,
        model: str | None = None,
    ) -> "AIConfig":
        """
        Return a copy bound to another provider.

        Args:
            provider: New LLM provider
            base_url: Explicit endpoint (defaults to the provider's)
            model: Explicit model name (defaults to the provider's)

        Returns:
            New AIConfig with provider, base_url and model replaced together
        """
        default_url, default_model = PROVIDER_DEFAULTS[provider]
        return self.model_copy(update={
            "provider": provider,
            "base_url": base_url if base_url is not None else default_url,
            "model": model if model is not None else default_model,
        })

    @classmethod
    def from_settings(cls, settings: Settings) -> "AIConfig":
        """Build a snapshot from environment-backed settings."""
        try:
            provider = LLMProvider(settings.llm_provider.lower())
        except ValueError:
            logger.warning(f"Unknown LLM provider '{settings.llm_provider}', using custom")
            provider = LLMProvider.CUSTOM

        search = SearchConfig(
            enabled=settings.enable_search,
            provider=settings.search_provider,
            google_api_key=settings.google_search_api_key,
            google_cx=settings.google_search_cx,
            serper_api_key=settings.serper_api_key,
            tavily_api_key=settings.tavily_api_key,
            yandex_api_key=settings.yandex_search_api_key,
            yandex_user=settings.yandex_search_login,
        )
        base = cls(
            api_key=settings.llm_api_key,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            language=settings.language,
            search=search,
            omdb_api_key=settings.omdb_api_key,
        )
        return base.with_provider(
            provider,
            base_url=settings.llm_base_url,
            model=settings.llm_model,
        )
