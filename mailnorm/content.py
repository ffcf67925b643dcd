# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Entry point: turn a message's bodies into renderable content.

The rendering layer calls ``normalize_message`` once per displayed
message with the HTML and plain-text bodies delivered by the provider.
The result is either a block tree (``RichBlocks``) or markup to show
verbatim in a sandboxed surface (``IsolatedHtml``), plus the images and
files to show with it.

When the message is shown inside a thread (``trim_quotes=True``), quoted
history is removed from the HTML first and the plain text is re-derived
from the stripped HTML, so both rendering paths show only the new
content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mailnorm.blocks import EmailBlock
from mailnorm.classifier import Strategy, choose_strategy
from mailnorm.config import DEFAULT_CONFIG, NormalizerConfig
from mailnorm.html_quotes import strip_html_quotes
from mailnorm.html_to_text import html_to_text
from mailnorm.images import (
    AttachmentMeta,
    EmailImage,
    extract_images,
    partition_attachments,
)
from mailnorm.text_parser import parse_email_text
from mailnorm.trimmer import trim_quoted_blocks


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RichBlocks:
    """Render the body as a tree of typed blocks."""

    blocks: tuple[EmailBlock, ...]


@dataclass(frozen=True)
class IsolatedHtml:
    """Render this markup verbatim in a sandboxed surface."""

    html: str


RenderStrategy = RichBlocks | IsolatedHtml


@dataclass(frozen=True)
class NormalizedContent:
    """Everything the rendering layer needs for one message.

    Attributes:
        body: How to render the message body.
        inline_images: Images from the HTML to show in a gallery below
            block-rendered bodies. Empty for isolated HTML, which shows
            its images in place.
        image_attachments: Attachments that can be shown as images.
        files: All other attachments.
    """

    body: RenderStrategy
    inline_images: tuple[EmailImage, ...] = ()
    image_attachments: tuple[AttachmentMeta, ...] = ()
    files: tuple[AttachmentMeta, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to show ("No content")."""
        if self.inline_images or self.image_attachments or self.files:
            return False
        if isinstance(self.body, RichBlocks):
            return not self.body.blocks
        return not self.body.html.strip()


def normalize_message(
    body_html: str,
    body_text: str,
    *,
    trim_quotes: bool = False,
    attachments: list[AttachmentMeta] | None = None,
    config: NormalizerConfig | None = None,
) -> NormalizedContent:
    """Normalize one message for display.

    Args:
        body_html: HTML body, or empty string.
        body_text: Plain-text body, or empty string.
        trim_quotes: Remove quoted history, for messages shown inside a
            thread.
        attachments: Attachment metadata, if any.
        config: Thresholds to use. Defaults to ``DEFAULT_CONFIG``.

    Returns:
        The rendering decision with its blocks or markup, images and
        files. Never raises for any input strings.
    """
    config = config or DEFAULT_CONFIG
    html = body_html or ""
    text = body_text or ""

    if trim_quotes and html:
        html = strip_html_quotes(html)
        cleaned = html_to_text(html)
        if cleaned.strip():
            text = cleaned

    image_attachments, files = partition_attachments(attachments or [])

    strategy = choose_strategy(html, text, config)
    logger.debug(
        "Strategy %s (html=%d chars, text=%d chars, trim=%s)",
        strategy.value,
        len(html),
        len(text),
        trim_quotes,
    )

    if strategy is Strategy.ISOLATED_HTML:
        return NormalizedContent(
            body=IsolatedHtml(html=html),
            image_attachments=tuple(image_attachments),
            files=tuple(files),
        )

    if not text:
        text = html_to_text(html)

    blocks: list[EmailBlock] = []
    if text.strip():
        blocks = parse_email_text(text, config)
        if trim_quotes:
            blocks = trim_quoted_blocks(blocks)

    return NormalizedContent(
        body=RichBlocks(blocks=tuple(blocks)),
        inline_images=tuple(extract_images(html)),
        image_attachments=tuple(image_attachments),
        files=tuple(files),
    )
