"""
Best-effort extraction of a JSON object embedded in free-form provider text.
"""

import json
import re
from typing import Any

from ..logging import get_logger

logger = get_logger(__name__)

_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: Any, *, source: str = "provider") -> dict[str, Any] | None:
    """Return the JSON object found in ``text``, or None when there is none.

    Accepts an already-decoded dict, a JSON string, or prose wrapping a JSON
    object (the widest ``{...}`` span is tried). Never raises; misses are logged.

    Args:
        text: Raw value from the provider response
        source: Label included in the miss log to identify the provider field
    """
    if text is None:
        return None
    if isinstance(text, dict):
        return text
    if not isinstance(text, str):
        logger.info("JSON extraction skipped non-text value", source=source, type=type(text).__name__)
        return None

    stripped = text.strip()
    if not stripped:
        return None

    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        parsed = None

    if isinstance(parsed, dict):
        return parsed

    match = _OBJECT_PATTERN.search(stripped)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed

    logger.info("JSON extraction found no object", source=source, length=len(stripped))
    return None


def first_string(data: dict[str, Any] | None, *paths: str) -> str | None:
    """Return the first non-empty string found at any of the dotted ``paths``.

    List segments are addressed by index, e.g. ``"resultUrls.0"``.
    """
    if not data:
        return None
    for path in paths:
        value: Any = data
        for part in path.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            elif isinstance(value, list) and part.isdigit() and int(part) < len(value):
                value = value[int(part)]
            else:
                value = None
            if value is None:
                break
        if isinstance(value, str) and value:
            return value
    return None
