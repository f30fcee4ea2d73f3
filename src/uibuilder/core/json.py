"""JSON helpers: tolerant extraction of model output, fast canonical encoding."""

from typing import Any
import json

import msgspec
import orjson
from json_repair import repair_json


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def _strip_fences(text: str) -> str:
    """Return the body of the first markdown code fence, or the text unchanged."""
    if "```" not in text:
        return text

    if "```json" in text:
        start = text.find("```json") + 7
    else:
        start = text.find("```") + 3

    end = text.find("```", start)
    if end == -1:
        return text
    return text[start:end].strip()


def _ensure_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        raise JSONParseError(f"Expected JSON object, got {type(result).__name__}")
    return result


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Extract and parse a JSON object from free-form model output.

    Handles markdown fences and leading/trailing prose. Tries msgspec first,
    then the stdlib decoder, then json_repair when ``repair`` is set.

    Args:
        text: Text containing a JSON object
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed JSON object

    Raises:
        JSONParseError: If no object can be recovered
    """
    body = _strip_fences(text.strip())

    start = body.find("{")
    end = body.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise JSONParseError("No JSON object found in text")

    json_str = body[start : end + 1]

    try:
        return _ensure_object(msgspec.json.decode(json_str.encode("utf-8")))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e

    try:
        return _ensure_object(json.loads(json_str))
    except json.JSONDecodeError:
        pass

    try:
        repaired = repair_json(json_str)
        return _ensure_object(json.loads(repaired))
    except JSONParseError:
        raise
    except Exception as repair_error:
        raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error) from repair_error


def loads(data: str | bytes) -> Any:
    """Strict parse of a JSON document (no extraction, no repair)."""
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise JSONParseError(f"Invalid JSON: {e}", e) from e


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON.

    Compact output goes through orjson (same separators as JSON.stringify);
    indented output uses the stdlib encoder so the layout matches
    ``JSON.stringify(obj, null, indent)``.

    Args:
        obj: Object to encode
        **kwargs: ``indent`` for pretty output

    Returns:
        JSON string
    """
    indent = kwargs.get("indent", 0)

    if not indent:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except TypeError:
            # Integers outside 64-bit range and similar edge cases
            return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)

    return json.dumps(obj, indent=indent, ensure_ascii=False)


def canonical_json(obj: Any) -> str:
    """Key-sorted compact encoding, stable across runs (used for fingerprints)."""
    return orjson.dumps(obj, option=orjson.OPT_SORT_KEYS).decode("utf-8")


__all__ = ["JSONParseError", "extract_json", "loads", "safe_json_dumps", "canonical_json"]
