"""Permissive JSON extraction from generative model responses.

Models wrap JSON in markdown fences, prepend explanations, or append
commentary. These helpers locate the first brace- (or bracket-) delimited
value in the raw text and decode it. They never raise: callers get the
decoded value or None and substitute their own stage default.
"""

import json
import re
from typing import Any, Optional

import structlog

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")

def _get_logger():
    return structlog.get_logger().bind(component="json_extraction")


def _strip_code_fence(text: str) -> str:
    fence = _CODE_FENCE.search(text)
    if fence:
        return fence.group(1).strip()
    return text


def _decode(text: str, pattern: re.Pattern) -> Optional[Any]:
    """Decode the outermost match of pattern, then retry from its start.

    The greedy match spans first opener to last closer. When trailing prose
    contains a stray closer, raw_decode from the first opener still recovers
    the leading value.
    """
    match = pattern.search(text)
    if not match:
        return None

    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        pass

    try:
        value, _ = json.JSONDecoder().raw_decode(text[match.start():])
        return value
    except json.JSONDecodeError as e:
        _get_logger().debug("json_decode_failed", error=str(e), preview=text[:80])
        return None


def extract_json_object(response_text: Optional[str]) -> Optional[dict[str, Any]]:
    """Extract the first JSON object embedded in a model response.

    Args:
        response_text: Raw response text from the model.

    Returns:
        Parsed dict, or None if no object could be decoded.
    """
    if not response_text or not isinstance(response_text, str):
        return None

    parsed = _decode(_strip_code_fence(response_text.strip()), _OBJECT_PATTERN)
    if isinstance(parsed, dict):
        return parsed
    return None


def extract_json_array(response_text: Optional[str]) -> Optional[list[Any]]:
    """Extract the first JSON array embedded in a model response.

    A lone object is wrapped into a single-element list, since models
    sometimes drop the surrounding array for one result.

    Args:
        response_text: Raw response text from the model.

    Returns:
        Parsed list, or None if nothing could be decoded.
    """
    if not response_text or not isinstance(response_text, str):
        return None

    text = _strip_code_fence(response_text.strip())
    parsed = _decode(text, _ARRAY_PATTERN)
    if isinstance(parsed, list):
        return parsed

    obj = _decode(text, _OBJECT_PATTERN)
    if isinstance(obj, dict):
        return [obj]
    return None


__all__ = ["extract_json_object", "extract_json_array"]
