"""JSON extraction and encoding for model responses."""

from typing import Any
import json
import re

import msgspec
import orjson
from json_repair import repair_json


_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_decoder = msgspec.json.Decoder()
_encoder = msgspec.json.Encoder()


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def extract_json_object(text: str) -> str | None:
    """
    Locate the outermost JSON object in model output.

    Markdown fences are unwrapped first; anything before the first ``{`` and
    after the last ``}`` is dropped.

    Returns:
        The candidate JSON text, or None when no object is present
    """
    working = text.strip()
    fenced = _FENCE.search(working)
    if fenced:
        working = fenced.group(1).strip()

    start = working.find("{")
    end = working.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return working[start : end + 1]


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Extract and parse a JSON object from model output.

    Args:
        text: Raw model output
        repair: Attempt json_repair when strict decoding fails

    Returns:
        Parsed JSON dictionary

    Raises:
        JSONParseError: If no object can be recovered
    """
    candidate = extract_json_object(text)
    if candidate is None:
        raise JSONParseError("No JSON object found in text")

    try:
        result = _decoder.decode(candidate.encode("utf-8"))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e
        try:
            result = json.loads(repair_json(candidate))
        except (ValueError, TypeError) as repair_error:
            raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error) from repair_error

    if not isinstance(result, dict):
        raise JSONParseError(f"Expected dict, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, indent: int = 0) -> str:
    """
    Encode object to JSON.

    Compact output goes through orjson (msgspec as fallback); indented output
    uses orjson's two-space mode, or the stdlib for other widths.
    """
    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except TypeError:
            return _encoder.encode(obj).decode("utf-8")

    if indent == 2:
        try:
            return orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8")
        except TypeError:
            pass

    return json.dumps(obj, indent=indent)


def validate_json_size(data: str, max_size: int, name: str = "JSON") -> None:
    """
    Reject oversized payloads before decoding.

    Raises:
        JSONParseError: If the UTF-8 size exceeds the limit
    """
    size = len(data.encode("utf-8"))
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")
