"""
Extraction Response Cleaner
===========================

Isolates the JSON payload inside a text completion from the extraction API.

Steps:
    1. Trim whitespace
    2. Strip a surrounding code fence (optionally tagged, e.g. ```json)
    3. If the text still is not valid JSON, keep the slice between the first
       ``{`` and the last ``}`` (recovers an object wrapped in prose)

Step 3 only knows about braces: a top-level array wrapped in prose comes out
mis-sliced and fails to parse. A bare array that is already valid JSON is
left untouched.
"""

import json
import re
from typing import Any

from lekhapal.utils.errors import InvalidExtractionResponseError
from lekhapal.utils.logger import get_logger, preview

logger = get_logger(__name__)

_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\r?\n?")
_CLOSING_FENCE = re.compile(r"\r?\n?```\s*$")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```lang fence and a trailing ``` fence."""
    if not text.startswith("```"):
        return text
    text = _OPENING_FENCE.sub("", text, count=1)
    text = _CLOSING_FENCE.sub("", text, count=1)
    return text.strip()


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def clean_extraction_response(raw: str) -> str:
    """
    Reduce a model completion to the text believed to be JSON.

    Args:
        raw: Text completion

    Returns:
        Cleaned text (not guaranteed to parse)

    Example:
        >>> clean_extraction_response('```json\\n{"a":1}\\n```')
        '{"a":1}'
        >>> clean_extraction_response('Here is the result: {"a":1} thanks')
        '{"a":1}'
    """
    text = strip_code_fence((raw or "").strip())

    if _is_json(text):
        return text

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start : end + 1]
    return text


def parse_extraction_response(raw: str) -> Any:
    """
    Clean and decode a model completion.

    Args:
        raw: Text completion

    Returns:
        Decoded JSON value

    Raises:
        InvalidExtractionResponseError: Cleaned text is not JSON; details hold
            both the raw and the cleaned text
    """
    cleaned = clean_extraction_response(raw)
    try:
        return json.loads(cleaned)
    except ValueError as e:
        logger.warning(
            "Extraction response is not JSON",
            error=str(e),
            raw_length=len(raw or ""),
            cleaned_preview=preview(cleaned),
        )
        raise InvalidExtractionResponseError(
            message="Invalid JSON from extraction API",
            details={"raw": raw, "cleaned": cleaned, "error": str(e)},
        ) from e
