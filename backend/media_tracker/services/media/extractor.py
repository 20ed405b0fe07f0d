"""Recovery of structured records from raw model output."""
import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from media_tracker.schemas.media import MediaDraft

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)
ARRAY_OF_OBJECTS_PATTERN = re.compile(r"\[\s*\{.*\}\s*\]", re.DOTALL)


def strip_fences(text: str) -> str:
    """Remove markdown code fences the model was told not to use."""
    return FENCE_PATTERN.sub("", text).strip()


def _as_records(data: Any) -> list[dict[str, Any]] | None:
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    if isinstance(data, dict):
        return [data]
    return None


def _loads(text: str) -> list[dict[str, Any]] | None:
    try:
        return _as_records(json.loads(text))
    except json.JSONDecodeError:
        return None


def _repair_truncated(text: str) -> list[dict[str, Any]] | None:
    """Close the array after the last complete object that still parses."""
    opener = "" if text.startswith("[") else "["
    position = text.rfind("}")
    while position > 0:
        records = _loads(opener + text[:position + 1] + "]")
        if records is not None:
            return records
        position = text.rfind("}", 0, position)
    return None


def extract_records(raw_text: str | None) -> list[dict[str, Any]]:
    """
    Recover a JSON array of objects from model output.

    Steps, each tried only if the previous failed: direct parse, the first
    bracket-scoped [{...}] span, truncation repair at an object boundary.
    Text that does not start with [ or { after fence stripping is prose and
    yields [] without further recovery.

    Args:
        raw_text: Raw model reply

    Returns:
        List of record dicts (possibly empty); never raises
    """
    if not raw_text:
        return []

    text = strip_fences(raw_text)
    if not text.startswith(("[", "{")):
        logger.info("Model reply is not JSON, ignoring")
        return []

    records = _loads(text)
    if records is not None:
        return records

    match = ARRAY_OF_OBJECTS_PATTERN.search(text)
    if match:
        records = _loads(match.group(0))
        if records is not None:
            logger.info("Recovered JSON array from surrounding text")
            return records

    records = _repair_truncated(text)
    if records is not None:
        logger.warning(f"Recovered {len(records)} record(s) from truncated JSON")
        return records

    logger.warning(f"Failed to parse model output as JSON: {text[:200]}")
    return []


def parse_drafts(raw_text: str | None) -> list[MediaDraft]:
    """Extract records and validate them, dropping the ones that don't fit."""
    drafts = []
    for record in extract_records(raw_text):
        try:
            drafts.append(MediaDraft.model_validate(record))
        except ValidationError as e:
            logger.debug(f"Skipping invalid record {record!r}: {e}")
    return drafts
