"""Fast JSON extraction from model output with multiple backends."""

from typing import Any
import json
import re

import msgspec
import orjson
from json_repair import repair_json

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def extract_json_text(text: str) -> str | None:
    """
    Locate the JSON payload inside free-form model output.

    Prefers the body of a markdown fence, then the outermost array, then the
    outermost object.

    Returns:
        The candidate JSON text, or None if nothing bracket-shaped was found
    """
    match = _FENCE.search(text)
    if match and match.group(1):
        text = match.group(1)

    text = text.strip()
    for opener, closer in (("[", "]"), ("{", "}")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start != -1 and end > start:
            # An array wrapped in an object ("{...[...]...}") is the object's job
            if opener == "[" and -1 < text.find("{") < start:
                continue
            return text[start:end + 1]
    return None


def extract_json(text: str, repair: bool = True) -> Any:
    """
    Extract and parse a JSON object or array from text.

    Args:
        text: Text containing JSON
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed dict or list

    Raises:
        JSONParseError: If parsing fails
    """
    json_str = extract_json_text(text)
    if json_str is None:
        raise JSONParseError("No JSON object or array found in text")

    # Try msgspec first (fastest)
    try:
        return msgspec.json.decode(json_str.encode("utf-8"))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e

    # Last resort: try json_repair
    try:
        repaired = repair_json(json_str)
        result = json.loads(repaired)
    except Exception as repair_error:
        raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error) from repair_error

    if not isinstance(result, (dict, list)) or not result:
        raise JSONParseError(f"Repaired JSON is unusable: {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using the fastest available library.

    Args:
        obj: Object to encode
        **kwargs: indent (pretty output goes through the stdlib)
    """
    indent = kwargs.get("indent", 0)

    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # Fallback for edge cases (e.g., integers outside 64-bit range)
            pass

    return json.dumps(obj, indent=indent if indent > 0 else None, default=str)


def validate_json_depth(obj: Any, max_depth: int = 20, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth.

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
