# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Cut quoted history from a message shown inside a thread.

Each message in a thread view should only show its own new content. The
earlier messages are already on screen, so quotes, attributions and the
signature that follows them are dropped.
"""

import logging
from collections.abc import Sequence

from mailnorm.blocks import (
    Divider,
    EmailBlock,
    Quote,
    QuoteAttribution,
    QuotedMessage,
    Signature,
    is_blank_paragraph,
)


logger = logging.getLogger(__name__)

# Block types removed when trailing the message
_TRAILING_TYPES = (Quote, QuotedMessage, QuoteAttribution, Signature, Divider)


def _first_attribution_index(blocks: Sequence[EmailBlock]) -> int | None:
    for i, block in enumerate(blocks):
        if isinstance(block, (QuoteAttribution, QuotedMessage)):
            return i
    return None


def trim_quoted_blocks(blocks: Sequence[EmailBlock]) -> list[EmailBlock]:
    """Remove quoted history from a top-level block sequence.

    The first attribution (merged or not) cuts everything after it, which
    also handles clients that quote without ``>`` prefixes. Trailing
    quotes, signatures, dividers and blank paragraphs are then removed
    from what is left. A trailing quote is dropped even after an
    attribution cut, so trimming an already trimmed sequence changes
    nothing.

    Only the top-level sequence is sliced; blocks are never modified.

    Args:
        blocks: Parsed blocks of one message.

    Returns:
        New list with the quoted history removed.
    """
    cut = _first_attribution_index(blocks)
    result = list(blocks if cut is None else blocks[:cut])
    while result and (
        isinstance(result[-1], _TRAILING_TYPES)
        or is_blank_paragraph(result[-1])
    ):
        result.pop()

    if len(result) < len(blocks):
        logger.debug(
            "Trimmed %d of %d blocks", len(blocks) - len(result), len(blocks)
        )
    return result
