# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Decide how a message body should be rendered.

Template-authored newsletters and marketing mail depend on their exact
layout and are rendered as-is in an isolated surface. Everything else is
restructured into blocks from its plain text.
"""

import logging
import re
from enum import Enum

from mailnorm.config import DEFAULT_CONFIG, NormalizerConfig


logger = logging.getLogger(__name__)


class Strategy(Enum):
    """Rendering strategy for a message body."""

    RICH_BLOCKS = "rich_blocks"
    ISOLATED_HTML = "isolated_html"


_TABLE_RE = re.compile(r"<table\b", re.IGNORECASE)
_LAYOUT_TABLE_RE = re.compile(
    r"<table\b[^>]*(?:width|bgcolor|cellpadding|cellspacing|align)\s*=",
    re.IGNORECASE,
)
_CENTER_RE = re.compile(r"<center\b", re.IGNORECASE)
_SIZED_IMG_RE = re.compile(
    r"<img\b[^>]+(?:width|height)\s*=\s*[\"']?\d{3,}", re.IGNORECASE
)
_FONT_COLOR_RE = re.compile(r"<font\b[^>]*color", re.IGNORECASE)
_BACKGROUND_STYLE_RE = re.compile(
    r"style\s*=\s*[\"'][^\"']*background(?:-color|-image)\s*:",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]*>")

# Any single marker is enough
_DESIGN_MARKERS = (
    _LAYOUT_TABLE_RE,
    _CENTER_RE,
    _SIZED_IMG_RE,
    _FONT_COLOR_RE,
    _BACKGROUND_STYLE_RE,
)


def is_designed_html(html: str) -> bool:
    """Check whether *html* is a visual template rather than prose.

    Two or more tables, a table with layout attributes, ``<center>``,
    an image sized with three or more digits, ``<font color>``, or an
    inline background colour/image each mark a designed email.
    """
    if len(_TABLE_RE.findall(html)) >= 2:
        return True
    return any(marker.search(html) for marker in _DESIGN_MARKERS)


def strip_tags(html: str) -> str:
    """Remove every tag from *html*, leaving the raw text between them."""
    return _TAG_RE.sub("", html)


def choose_strategy(
    body_html: str,
    body_text: str,
    config: NormalizerConfig | None = None,
) -> Strategy:
    """Choose between block rendering and isolated HTML rendering.

    Args:
        body_html: HTML body, possibly empty.
        body_text: Plain-text body, possibly empty.
        config: Thresholds to use. Defaults to ``DEFAULT_CONFIG``.

    Returns:
        ``RICH_BLOCKS`` when the body should be parsed into blocks,
        ``ISOLATED_HTML`` when the markup should be shown verbatim (or
        when both bodies are empty).
    """
    config = config or DEFAULT_CONFIG

    if not body_html:
        return Strategy.RICH_BLOCKS if body_text else Strategy.ISOLATED_HTML

    if is_designed_html(body_html):
        logger.debug("Designed HTML detected, rendering isolated")
        return Strategy.ISOLATED_HTML

    if len(body_text.strip()) > config.rich_text_min_length:
        return Strategy.RICH_BLOCKS

    if strip_tags(body_html).strip():
        return Strategy.RICH_BLOCKS
    return Strategy.ISOLATED_HTML
