"""Recover the JSON payload from a model reply."""

import json
import re
from collections.abc import Iterator
from typing import Any

from skillpath.core.errors import GenerationParseError
from skillpath.core.logging import get_logger

logger = get_logger(__name__)

_NOT_JSON = object()

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_CODE_FENCE = re.compile(r"```(?:json|javascript|js|text)?\s*\n(.*?)\n\s*```", re.DOTALL | re.IGNORECASE)


def _loads(text: str) -> Any:
    """json.loads with trailing commas removed."""
    try:
        return json.loads(_TRAILING_COMMA.sub(r"\1", text.strip()))
    except ValueError:
        return _NOT_JSON


def _balanced_span(text: str) -> str | None:
    """First complete ``{...}`` or ``[...]`` span, ignoring brackets inside strings."""
    start = next((i for i, char in enumerate(text) if char in "{["), None)
    if start is None:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            in_string = not in_string
        elif not in_string and char in "{[":
            depth += 1
        elif not in_string and char in "}]":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def _candidates(content: str) -> Iterator[tuple[str, str]]:
    yield "direct", content

    fence = _CODE_FENCE.search(content)
    if fence:
        yield "code_fence", fence.group(1)

    span = _balanced_span(content)
    if span:
        yield "substring", span


def extract_json(content: str | None) -> Any:
    """Parse the JSON document contained in ``content``.

    Clean JSON is parsed as is. Otherwise the first markdown code fence, then
    the first balanced JSON span in the text, is tried.

    Raises:
        GenerationParseError: if the reply is empty or holds no valid JSON.
    """
    if not content or not content.strip():
        raise GenerationParseError("Empty response from generation service")

    for strategy, candidate in _candidates(content):
        parsed = _loads(candidate)
        if parsed is not _NOT_JSON:
            logger.debug("Parsed generation reply", strategy=strategy)
            return parsed

    logger.error("Generation reply is not JSON", content_preview=content[:200])
    raise GenerationParseError()
