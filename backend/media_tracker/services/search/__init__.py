"""Web search adapters behind a single dispatch entry point."""
from media_tracker.services.search.dispatcher import dispatch, get_adapter

__all__ = ["dispatch", "get_adapter"]
