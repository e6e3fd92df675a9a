"""Lenient parsing of free-form model text into editorial suggestions.

The model is asked for JSON but may wrap it in prose or markdown fences,
truncate it, or ignore the instruction entirely. ``parse_suggestion`` never
raises. Anything it cannot read as a JSON object comes back as a
RawSuggestion carrying the original text.
"""

import json
import logging
from typing import Any, Optional

from models.suggestion import ContentSuggestion, RawSuggestion, StructuredSuggestion, ThumbnailMoment

logger = logging.getLogger(__name__)


def extract_json_object(text: str) -> Optional[dict]:
    """Return the object spanning the first '{' to the last '}', if it parses.

    Args:
        text: Raw model output

    Returns:
        Parsed dict, or None when there is no brace pair or the span is not a JSON object
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None

    try:
        parsed = json.loads(text[start : end + 1])
    # ValueError covers JSONDecodeError and oversized integer literals
    except (ValueError, RecursionError):
        return None

    return parsed if isinstance(parsed, dict) else None


def _clean(text: str) -> str:
    """Replace lone surrogates, which json.loads accepts but UTF-8 cannot encode."""
    return text.encode("utf-8", "replace").decode("utf-8")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return _clean(value)
    if isinstance(value, (int, float, bool)):
        return str(value)
    return None


def _as_text_list(value: Any) -> Optional[list[str]]:
    if isinstance(value, str):
        return [_clean(value)]
    if not isinstance(value, list):
        return None
    items = [_as_text(item) for item in value]
    return [item for item in items if item is not None]


def _as_thumbnails(value: Any) -> Optional[list[ThumbnailMoment]]:
    if not isinstance(value, list):
        return None
    moments = []
    for item in value:
        if not isinstance(item, dict):
            continue
        moments.append(
            ThumbnailMoment(
                timestamp=_as_text(item.get("timestamp")) or "",
                description=_as_text(item.get("description")) or "",
            )
        )
    return moments


def parse_suggestion(raw_text: Any) -> ContentSuggestion:
    """Turn model text into a structured suggestion, or fall back to raw.

    Args:
        raw_text: Text returned by the model

    Returns:
        StructuredSuggestion populated from whichever of summary/titles/
        descriptions/thumbnails are present, or RawSuggestion(raw_text)
    """
    raw_text = _clean(raw_text) if isinstance(raw_text, str) else ""

    data = extract_json_object(raw_text)
    if data is None:
        logger.warning(
            f"[ResponseParser] No JSON object in model response ({len(raw_text)} chars), returning raw text"
        )
        return RawSuggestion(text=raw_text)

    suggestion = StructuredSuggestion(
        summary=_as_text(data.get("summary")),
        titles=_as_text_list(data.get("titles")),
        descriptions=_as_text_list(data.get("descriptions")),
        thumbnails=_as_thumbnails(data.get("thumbnails")),
    )
    logger.info(
        f"[ResponseParser] Parsed JSON response: "
        f"{len(suggestion.titles or [])} titles, "
        f"{len(suggestion.descriptions or [])} descriptions, "
        f"{len(suggestion.thumbnails or [])} thumbnails"
    )
    return suggestion
