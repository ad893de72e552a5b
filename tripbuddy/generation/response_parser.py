"""
Response parser for the generation pipeline.

Models wrap JSON in prose or markdown fences even in structured-output
mode, so extraction tries, in order: a direct parse, a fenced code
block, then a string-aware brace scan from the first ``{``.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from tripbuddy.shared.errors import (
    InvalidResponseObjectError,
    JsonParseError,
    NoJsonFoundError,
    UnbalancedJsonError,
)


logger = logging.getLogger(__name__)


CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonParseError(f"Failed to parse JSON: {e}") from e


def find_balanced_object(raw: str) -> str:
    """
    Slice the first balanced ``{...}`` span out of free text.

    Braces inside string literals are ignored and escaped quotes do not
    toggle string mode.

    Args:
        raw: Raw model output

    Returns:
        The JSON object text

    Raises:
        NoJsonFoundError: If there is no opening brace
        UnbalancedJsonError: If brace depth never returns to zero
    """
    start = raw.find("{")
    if start == -1:
        raise NoJsonFoundError()

    depth = 0
    in_string = False
    escape_next = False

    for i in range(start, len(raw)):
        char = raw[i]

        if escape_next:
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return raw[start : i + 1]

    raise UnbalancedJsonError()


def extract_json(raw: str) -> Any:
    """
    Recover a JSON value from raw model output.

    Args:
        raw: Raw model output

    Returns:
        The decoded JSON value

    Raises:
        NoJsonFoundError, UnbalancedJsonError, JsonParseError
    """
    content = raw.strip()

    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass

    match = CODE_BLOCK_PATTERN.search(content)
    if match:
        logger.debug("Extracting JSON from fenced code block")
        return _loads(match.group(1))

    return _loads(find_balanced_object(content))


def normalize_ui(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Treat an empty ``ui`` tag as absent."""
    ui: Optional[str] = payload.get("ui")
    if ui is None or (isinstance(ui, str) and not ui.strip()):
        payload = {k: v for k, v in payload.items() if k != "ui"}
    return payload


def parse_model_response(raw: str) -> Dict[str, Any]:
    """
    Extract and shape-check a model response.

    Args:
        raw: Raw model output

    Returns:
        The response object with ``ui`` normalized

    Raises:
        ParseError: If no JSON object can be recovered
    """
    data = extract_json(raw)
    if not isinstance(data, dict):
        raise InvalidResponseObjectError()
    return normalize_ui(data)
