"""Message content decoding.

A message body in a session record is either a plain string or an array of
typed content blocks:

    "content": "hello"
    "content": [{"type": "text", "text": "hello"}, {"type": "image", ...}]

The shape is resolved once, at decode time, into PlainText or ContentBlocks.
extract_text() flattens either form into display text and never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

TEXT_BLOCK = "text"


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class ContentBlock:
    kind: str
    text: str = ""


@dataclass(frozen=True)
class ContentBlocks:
    blocks: tuple[ContentBlock, ...] = ()


MessageContent = Union[PlainText, ContentBlocks]


def _str_field(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def decode_content(value: Any) -> MessageContent | None:
    """Resolve a raw JSON content value into the tagged union.

    Returns None for shapes that carry no usable content (absent, numbers,
    bare objects).
    """
    if isinstance(value, str):
        return PlainText(value)
    if isinstance(value, list):
        return ContentBlocks(
            tuple(
                ContentBlock(kind=_str_field(item, "type"), text=_str_field(item, "text"))
                for item in value
                if isinstance(item, dict)
            )
        )
    return None


def extract_text(content: Any) -> str:
    """
    Flatten message content into display text.

    Args:
        content: PlainText, ContentBlocks, None, or a raw decoded JSON value

    Returns:
        The plain string unchanged, or the space-joined text of every
        "text" block in order. Anything else yields "".
    """
    if not isinstance(content, (PlainText, ContentBlocks)):
        content = decode_content(content)

    if isinstance(content, PlainText):
        return content.text
    if isinstance(content, ContentBlocks):
        return " ".join(
            block.text for block in content.blocks if block.kind == TEXT_BLOCK and block.text
        )
    return ""
