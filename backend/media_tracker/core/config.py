# backend/media_tracker/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    app_name: str = "Media Tracker"
    environment: str = "development"
    debug: bool = False

    # Security (HTTP surface is open when unset)
    api_key: str | None = None

    # Frontend
    frontend_url: str = "http://localhost:5173"

    # LLM provider
    llm_provider: str = "moonshot"
    llm_api_key: str | None = None
    llm_base_url: str | None = None  # Falls back to the provider default
    llm_model: str | None = None  # Falls back to the provider default
    llm_temperature: float = 0.3
    llm_max_tokens: int = 2000
    language: str = "en"

    # Web search
    enable_search: bool = False
    search_provider: str = "google"
    google_search_api_key: str | None = None
    google_search_cx: str | None = None
    serper_api_key: str | None = None
    tavily_api_key: str | None = None
    yandex_search_api_key: str | None = None
    yandex_search_login: str | None = None

    # Poster metadata
    omdb_api_key: str | None = None

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
