"""Conversion between block editor markup and classic HTML."""

import re
from enum import Enum
from typing import List, Union


class EditorType(str, Enum):
    """Target markup dialect for generated content."""

    BLOCK = "block"
    CLASSIC = "classic"


BLOCK_MARKER = "<!-- wp:"

_PARAGRAPH_SPLIT = re.compile(r'\n\s*\n')
_BLOCK_COMMENT = re.compile(r'<!-- /?wp:.*? -->')
_WHOLE_HEADING = re.compile(r'^<h([1-6])>(.*?)</h[1-6]>$')
_LEADING_HEADING = re.compile(r'^<h([1-6])>(.*?)</h[1-6]>')
_LEADING_TAG = re.compile(r'^<[^>]+>')
_TAG = re.compile(r'<[^>]*>')


def strip_tags(text: str) -> str:
    """Remove HTML tags, leaving text content."""
    return _TAG.sub('', text).strip()


def _paragraphs(content: str) -> List[str]:
    return [p.strip() for p in _PARAGRAPH_SPLIT.split(content.strip()) if p.strip()]


def format_for_block_editor(content: str) -> str:
    """Wrap plain HTML paragraphs and headings in block comment grammar.

    Content that already contains block markers is returned unchanged.
    """
    if BLOCK_MARKER in content:
        return content

    blocks = []
    for para in _paragraphs(content):
        match = _WHOLE_HEADING.match(para)
        if match:
            level, text = match.group(1), match.group(2)
        else:
            match = _LEADING_HEADING.match(para)
            if match:
                level, text = match.group(1), strip_tags(para)

        if match:
            blocks.append(
                f'<!-- wp:heading {{"level":{level}}} -->\n'
                f'<h{level}>{text}</h{level}>\n'
                f'<!-- /wp:heading -->'
            )
        else:
            blocks.append(f'<!-- wp:paragraph -->\n<p>{strip_tags(para)}</p>\n<!-- /wp:paragraph -->')

    return "\n\n".join(blocks)


def format_for_classic_editor(content: str) -> str:
    """Drop block comments and make sure every paragraph is wrapped in HTML."""
    if BLOCK_MARKER in content:
        content = _BLOCK_COMMENT.sub('', content)

    formatted = []
    for para in _paragraphs(content):
        if _LEADING_TAG.match(para):
            formatted.append(para)
        else:
            formatted.append(f"<p>{para}</p>")

    return "\n\n".join(formatted)


def format_content(content: str, editor_type: Union[EditorType, str]) -> str:
    """Format content for the given editor type."""
    # Anything other than the block editor gets classic HTML
    if editor_type == EditorType.BLOCK:
        return format_for_block_editor(content)
    return format_for_classic_editor(content)
