from pydantic import BaseModel


class SearchResult(BaseModel):
    """A single web search hit, uniform across providers."""
    title: str
    link: str
    snippet: str = ""
    source: str
    image: str | None = None
