# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Email content normalization.

Turns raw message bodies (plain text and/or HTML, as delivered by a mail
provider) into a renderable structure: either a tree of typed blocks
reconstructed from the plain text, or a decision to show designed HTML
verbatim in a sandboxed surface. Quoted history can be trimmed for
messages shown inside a thread. All functions are pure and never perform
I/O.
"""

from mailnorm.attribution import parse_attribution
from mailnorm.blocks import (
    Attribution,
    Divider,
    EmailBlock,
    OrderedList,
    Paragraph,
    Preformatted,
    Quote,
    QuoteAttribution,
    QuotedMessage,
    SectionHeader,
    Signature,
    UnorderedList,
    block_to_dict,
    blocks_to_dicts,
    preview_text,
)
from mailnorm.classifier import Strategy, choose_strategy, is_designed_html
from mailnorm.config import DEFAULT_CONFIG, ConfigError, NormalizerConfig
from mailnorm.content import (
    IsolatedHtml,
    NormalizedContent,
    RenderStrategy,
    RichBlocks,
    normalize_message,
)
from mailnorm.html_quotes import strip_html_quotes
from mailnorm.html_to_text import html_to_text
from mailnorm.images import AttachmentMeta, EmailImage, extract_images
from mailnorm.inline import split_inline
from mailnorm.reflow import reflow_lines
from mailnorm.sandbox import ColorScheme, build_frame_document
from mailnorm.text_parser import merge_attributions, parse_email_text
from mailnorm.trimmer import trim_quoted_blocks


__all__ = [
    # Blocks
    "Attribution",
    "Divider",
    "EmailBlock",
    "OrderedList",
    "Paragraph",
    "Preformatted",
    "Quote",
    "QuoteAttribution",
    "QuotedMessage",
    "SectionHeader",
    "Signature",
    "UnorderedList",
    "block_to_dict",
    "blocks_to_dicts",
    "preview_text",
    # Configuration
    "DEFAULT_CONFIG",
    "ConfigError",
    "NormalizerConfig",
    # Entry point
    "IsolatedHtml",
    "NormalizedContent",
    "RenderStrategy",
    "RichBlocks",
    "normalize_message",
    # Components
    "AttachmentMeta",
    "ColorScheme",
    "EmailImage",
    "Strategy",
    "build_frame_document",
    "choose_strategy",
    "extract_images",
    "html_to_text",
    "is_designed_html",
    "merge_attributions",
    "parse_attribution",
    "parse_email_text",
    "reflow_lines",
    "split_inline",
    "strip_html_quotes",
    "trim_quoted_blocks",
]
