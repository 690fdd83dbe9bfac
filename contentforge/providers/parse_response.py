"""Parsing of AI provider responses into title/content pairs."""

import re
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from ..types import GeneratedContent


_FENCE_OPEN = re.compile(r'^```(?:json)?\s*\n?', re.MULTILINE)
_FENCE_CLOSE = re.compile(r'\n?```\s*$', re.MULTILINE)
_HEADING_MARKER = re.compile(r'^#+\s*')
_TAG = re.compile(r'<[^>]*>')

MAX_TITLE_LINE_LENGTH = 100
FALLBACK_TITLE_LENGTH = 60
DEFAULT_ERROR_MESSAGE = "API request failed"


def clean_json_content(text: str) -> str:
    """Remove markdown code fences (```json ... ```) around a JSON payload."""
    text = _FENCE_OPEN.sub('', text)
    text = _FENCE_CLOSE.sub('', text)
    return text.strip()


def convert_literal_newlines(text: str) -> str:
    """Turn literal backslash-n sequences into real newlines.

    Models sometimes double-escape newlines inside JSON strings.
    """
    return text.replace('\\n', '\n')


def parse_text_response(text: str) -> GeneratedContent:
    """Heuristic fallback when the response is not the expected JSON object.

    The title is the first non-empty line shorter than 100 characters among
    the first three lines, without markdown heading markers. When no line
    qualifies, the first 60 characters are used instead. The whole text is
    kept as content.
    """
    lines = text.strip().split('\n')
    title = ""

    for line in lines[:3]:
        line = line.strip()
        if line and len(line) < MAX_TITLE_LINE_LENGTH:
            title = _HEADING_MARKER.sub('', line)
            break

    if not title:
        title = text.strip()[:FALLBACK_TITLE_LENGTH]

    return GeneratedContent(title=_TAG.sub('', title).strip(), content=text)


def parse_content(text: Optional[str]) -> GeneratedContent:
    """Parse raw model output into a GeneratedContent.

    Args:
        text: Text returned by the model, possibly fenced JSON

    Returns:
        Parsed title and content; empty strings when the model returned nothing
    """
    if not text:
        return GeneratedContent(title="", content="")

    cleaned = clean_json_content(text)

    try:
        parsed = GeneratedContent.model_validate_json(cleaned)
    except PydanticValidationError:
        return parse_text_response(cleaned)

    return GeneratedContent(title=parsed.title, content=convert_literal_newlines(parsed.content))


def extract_error_message(body: Any, default: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Pull the human readable message out of a vendor error envelope.

    Handles both ``{"error": {"message": ...}}`` and an already unwrapped
    ``{"message": ...}`` body, as well as ``{"error": "..."}``.
    """
    if not isinstance(body, dict):
        return default

    error = body.get("error", body)
    if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
        return error["message"]
    if isinstance(error, str) and error:
        return error

    return default
