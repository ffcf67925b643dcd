# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Typed representations for a parsed email body.

A parsed body is an ordered sequence of blocks in top-to-bottom reading
order. ``Quote`` and ``QuotedMessage`` own a nested block sequence, so the
result is a tree. All blocks are frozen dataclasses: they are created once
by the parser and never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from mailnorm.config import DEFAULT_CONFIG, NormalizerConfig


@dataclass(frozen=True)
class Paragraph:
    """One or more soft-wrapped lines of prose."""

    text: str


@dataclass(frozen=True)
class SectionHeader:
    """A short line that ended in ``:``, stored without the colon."""

    text: str


@dataclass(frozen=True)
class Quote:
    """A ``>``-prefixed region, parsed recursively."""

    blocks: tuple[EmailBlock, ...]


@dataclass(frozen=True)
class QuotedMessage:
    """A quote merged with the attribution line that introduced it."""

    name: str
    initials: str
    blocks: tuple[EmailBlock, ...]


@dataclass(frozen=True)
class QuoteAttribution:
    """An ``On ... wrote:`` line whose sender could not be merged."""

    text: str


@dataclass(frozen=True)
class Signature:
    """Everything after a signature delimiter, to the end of the body."""

    lines: tuple[str, ...]


@dataclass(frozen=True)
class UnorderedList:
    items: tuple[str, ...]


@dataclass(frozen=True)
class OrderedList:
    items: tuple[str, ...]


@dataclass(frozen=True)
class Divider:
    """A horizontal rule or forwarded-message banner."""


@dataclass(frozen=True)
class Preformatted:
    """Indented text or a block of forwarded headers, kept verbatim."""

    text: str


EmailBlock = (
    Paragraph
    | SectionHeader
    | Quote
    | QuotedMessage
    | QuoteAttribution
    | Signature
    | UnorderedList
    | OrderedList
    | Divider
    | Preformatted
)


@dataclass(frozen=True)
class Attribution:
    """Sender recovered from a quote attribution line."""

    name: str
    initials: str


_TYPE_NAMES: dict[type, str] = {
    Paragraph: "paragraph",
    SectionHeader: "section-header",
    Quote: "quote",
    QuotedMessage: "quoted-message",
    QuoteAttribution: "quote-attribution",
    Signature: "signature",
    UnorderedList: "unordered-list",
    OrderedList: "ordered-list",
    Divider: "divider",
    Preformatted: "preformatted",
}


def block_type_name(block: EmailBlock) -> str:
    """Return the kebab-case discriminator used in serialized blocks."""
    return _TYPE_NAMES[type(block)]


def block_to_dict(block: EmailBlock) -> dict[str, Any]:
    """Serialize a block (and its children) into JSON-compatible dicts.

    Args:
        block: Block to serialize.

    Returns:
        Dict with a ``type`` key plus the block's fields. Nested block
        sequences are serialized recursively; tuples become lists.
    """
    result: dict[str, Any] = {"type": block_type_name(block)}
    match block:
        case Paragraph(text=text) | SectionHeader(text=text):
            result["text"] = text
        case QuoteAttribution(text=text) | Preformatted(text=text):
            result["text"] = text
        case Quote(blocks=children):
            result["blocks"] = blocks_to_dicts(children)
        case QuotedMessage(name=name, initials=initials, blocks=children):
            result["name"] = name
            result["initials"] = initials
            result["blocks"] = blocks_to_dicts(children)
        case Signature(lines=lines):
            result["lines"] = list(lines)
        case UnorderedList(items=items) | OrderedList(items=items):
            result["items"] = list(items)
        case Divider():
            pass
    return result


def blocks_to_dicts(blocks: Sequence[EmailBlock]) -> list[dict[str, Any]]:
    """Serialize a block sequence. See ``block_to_dict``."""
    return [block_to_dict(block) for block in blocks]


def preview_text(
    blocks: Sequence[EmailBlock], config: NormalizerConfig | None = None
) -> str:
    """Return the first non-blank paragraph, cut to the preview length.

    Used as the one-line summary of a collapsed quoted message. The
    length comes from ``config.preview_length``.
    """
    limit = (config or DEFAULT_CONFIG).preview_length
    for block in blocks:
        if isinstance(block, Paragraph) and block.text.strip():
            return block.text[:limit]
    return ""


def is_blank_paragraph(block: EmailBlock) -> bool:
    """Check whether *block* is a paragraph with only whitespace."""
    return isinstance(block, Paragraph) and not block.text.strip()
