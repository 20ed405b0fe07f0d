"""Media records produced by the query engine."""
import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_CAST = 5


class MediaType(str, enum.Enum):
    """Closed set of media types the engine emits."""

    BOOK = "Book"
    MOVIE = "Movie"
    TV_SERIES = "TV Series"
    COMIC = "Comic"
    SHORT_DRAMA = "Short Drama"
    MUSIC = "Music"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value: Any) -> "MediaType":
        """Map free-form model output onto the closed set."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.OTHER


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MediaDraft(CamelModel):
    """A record as recovered from model output, before enrichment."""
    title: str
    director_or_author: str = ""
    cast: list[str] = Field(default_factory=list)
    description: str = ""
    release_date: str = ""
    type: MediaType = MediaType.OTHER
    is_ongoing: bool = False
    latest_update_info: str = ""
    rating: str = ""

    @field_validator(
        "title", "director_or_author", "description", "release_date",
        "latest_update_info", "rating",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("cast", mode="before")
    @classmethod
    def cap_cast(cls, value: Any) -> list[str]:
        if not value:
            return []
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",") if part.strip()]
        return [str(name) for name in value][:MAX_CAST]

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, value: Any) -> MediaType:
        return MediaType.coerce(value)

    @field_validator("is_ongoing", mode="before")
    @classmethod
    def coerce_ongoing(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1", "ongoing")
        return bool(value)

    @property
    def year(self) -> str:
        """Year part of release_date ("" when unknown)."""
        return self.release_date.split("-")[0].strip()


class MediaItem(MediaDraft):
    """A finalized record handed to the catalog."""
    id: str = Field(min_length=1)
    poster_url: str = Field(min_length=1)
    status: str = "To Watch"
    user_rating: int = 0
    added_at: str = ""


class UpdateDraft(CamelModel):
    """Update info for one title as returned by the model."""
    title: str
    latest_update_info: str = ""
    is_ongoing: bool = False

    @field_validator("latest_update_info", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)


class MediaUpdate(CamelModel):
    """Latest update info mapped back to a catalog item."""
    id: str
    latest_update_info: str
    is_ongoing: bool


class MediaSearchRequest(CamelModel):
    query: str
    type: MediaType | None = None

    @field_validator("type", mode="before")
    @classmethod
    def all_means_no_filter(cls, value: Any) -> Any:
        if value in (None, "", "All"):
            return None
        return value


class UpdateCheckRequest(CamelModel):
    items: list[MediaItem]


class CoverRequest(CamelModel):
    title: str
    release_date: str = ""
    type: MediaType = MediaType.OTHER


class CoverResponse(CamelModel):
    poster_url: str
