"""Media query services."""
from media_tracker.services.media.service import MediaService

__all__ = ["MediaService"]
