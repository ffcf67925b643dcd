# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Parse plain-text email bodies into a tree of typed blocks.

The parser makes a single forward scan over the lines. At each non-blank
line the rules below are tried in order and the first match wins:

1. Signature delimiter (``--`` or a mobile "Sent from my ..." line)
2. Forwarded-message banner, followed by its header lines
3. Divider (``---``, ``===``, ``___``, ``***``)
4. Quote attribution (``On ... wrote:``, possibly wrapped)
5. Quoted region (``>``-prefixed lines, parsed recursively)
6. Unordered / ordered list
7. Preformatted (indented by four or more spaces)
8. Paragraph, or section header when it is a short line ending in ``:``

Each rule is a function returning a ``RuleMatch`` (the blocks it produced
and how many lines it consumed) or None, so rules can be exercised on
their own. After the scan, attribution + quote pairs are merged into
``QuotedMessage`` blocks.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from mailnorm.attribution import (
    has_sender_or_timestamp,
    is_attribution_line,
    parse_attribution,
)
from mailnorm.blocks import (
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
)
from mailnorm.config import DEFAULT_CONFIG, NormalizerConfig
from mailnorm.reflow import reflow_lines


logger = logging.getLogger(__name__)


SIG_DELIM_RE = re.compile(r"^--\s*$")
MOBILE_SIG_RE = re.compile(
    r"^(Sent from my .+|Get Outlook for .+|Sent from .+ Mail|Sent via .+"
    r"|Envoyé de mon .+|Enviado desde mi .+)$",
    re.IGNORECASE,
)
QUOTE_RE = re.compile(r"^>")
FORWARDED_RE = re.compile(
    r"^-{3,}\s*Forwarded message\s*-{3,}$", re.IGNORECASE
)
FORWARDED_HEADER_RE = re.compile(
    r"^(From|To|Cc|Date|Subject|Sent):\s", re.IGNORECASE
)
DIVIDER_RE = re.compile(r"^[-=_*]{3,}\s*$")
UL_RE = re.compile(r"^\s*[-*•]\s+")
OL_RE = re.compile(r"^\s*\d+[.)]\s+")

_QUOTE_PREFIX_RE = re.compile(r"^>\s?")
_INDENTED_RE = re.compile(r"^\s{4,}")
_INDENTED_TEXT_RE = re.compile(r"^\s{4,}\S")
_CONTINUATION_RE = re.compile(r"^\s{2,}")
_ATTRIBUTION_START_RE = re.compile(r"^On\s")
_SENTENCE_END_RE = re.compile(r"[.!?]$")

# Extra lines an attribution may wrap onto
_ATTRIBUTION_MAX_WRAP = 2


@dataclass(frozen=True)
class RuleMatch:
    """Result of a rule that matched at the current line.

    Attributes:
        blocks: Blocks produced by the rule (may be empty).
        consumed: Number of lines consumed, at least one.
        stop: True when nothing after this point may be parsed.
    """

    blocks: tuple[EmailBlock, ...]
    consumed: int
    stop: bool = False


@dataclass(frozen=True)
class _Context:
    config: NormalizerConfig
    depth: int


def _is_blank(line: str) -> bool:
    return line.strip() == ""


def is_signature_start(line: str) -> bool:
    """Check whether *line* begins a signature."""
    return bool(SIG_DELIM_RE.match(line) or MOBILE_SIG_RE.match(line.strip()))


def strip_list_prefix(line: str) -> str:
    """Remove a leading bullet or ``N.``/``N)`` marker."""
    return OL_RE.sub("", UL_RE.sub("", line, count=1), count=1)


def is_section_header(text: str, max_length: int = 80) -> bool:
    """Detect short single lines ending with ``:`` that title a section."""
    trimmed = text.strip()
    if not trimmed.endswith(":"):
        return False
    if len(trimmed) > max_length or len(trimmed) < 3:
        return False
    if "\n" in trimmed:
        return False
    return not is_attribution_line(trimmed)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def match_signature(lines: list[str], i: int) -> RuleMatch | None:
    """Everything from a signature delimiter to the end of the body.

    A bare ``--`` delimiter is not part of the signature; a mobile
    signature line is. Trailing blank lines are dropped.
    """
    line = lines[i]
    if SIG_DELIM_RE.match(line):
        start = i + 1
    elif MOBILE_SIG_RE.match(line.strip()):
        start = i
    else:
        return None

    sig_lines = lines[start:]
    while sig_lines and _is_blank(sig_lines[-1]):
        sig_lines.pop()

    blocks: tuple[EmailBlock, ...] = ()
    if sig_lines:
        blocks = (Signature(lines=tuple(sig_lines)),)
    return RuleMatch(blocks=blocks, consumed=len(lines) - i, stop=True)


def match_forwarded(lines: list[str], i: int) -> RuleMatch | None:
    """A forwarded-message banner plus its contiguous header lines."""
    if not FORWARDED_RE.match(lines[i].strip()):
        return None

    j = i + 1
    while j < len(lines) and FORWARDED_HEADER_RE.match(lines[j]):
        j += 1

    blocks: list[EmailBlock] = [Divider()]
    if j > i + 1:
        blocks.append(Preformatted(text="\n".join(lines[i + 1 : j])))
    return RuleMatch(blocks=tuple(blocks), consumed=j - i)


def match_divider(lines: list[str], i: int) -> RuleMatch | None:
    if not DIVIDER_RE.match(lines[i]):
        return None
    return RuleMatch(blocks=(Divider(),), consumed=1)


def match_attribution(lines: list[str], i: int) -> RuleMatch | None:
    """An ``On ... wrote:`` line, joined across wrapped lines if needed."""
    first = lines[i].strip()
    if is_attribution_line(first):
        return RuleMatch(blocks=(QuoteAttribution(text=first),), consumed=1)

    # A first line ending a sentence is prose, not a wrapped attribution
    if not _ATTRIBUTION_START_RE.match(first) or _SENTENCE_END_RE.search(first):
        return None

    text = first
    last = min(len(lines), i + 1 + _ATTRIBUTION_MAX_WRAP)
    for j in range(i + 1, last):
        if _is_blank(lines[j]) or QUOTE_RE.match(lines[j]):
            return None
        text = f"{text} {lines[j].strip()}"
        if text.endswith("wrote:"):
            if not has_sender_or_timestamp(text):
                return None
            return RuleMatch(
                blocks=(QuoteAttribution(text=text),), consumed=j - i + 1
            )
    return None


def _match_quote(
    lines: list[str], i: int, context: _Context
) -> RuleMatch | None:
    if not QUOTE_RE.match(lines[i]):
        return None

    quote_lines: list[str] = []
    j = i
    while j < len(lines):
        if QUOTE_RE.match(lines[j]):
            quote_lines.append(lines[j])
        elif (
            _is_blank(lines[j])
            and j + 1 < len(lines)
            and QUOTE_RE.match(lines[j + 1])
        ):
            quote_lines.append("")
        else:
            break
        j += 1

    stripped = [
        "" if _is_blank(line) else _QUOTE_PREFIX_RE.sub("", line, count=1)
        for line in quote_lines
    ]

    if context.depth >= context.config.max_quote_depth:
        logger.debug(
            "Quote nesting exceeds %d levels, keeping it preformatted",
            context.config.max_quote_depth,
        )
        while stripped and _is_blank(stripped[-1]):
            stripped.pop()
        block: EmailBlock = Preformatted(text="\n".join(stripped))
    else:
        inner = _parse_lines(
            stripped, _Context(context.config, context.depth + 1)
        )
        block = Quote(blocks=tuple(inner))
    return RuleMatch(blocks=(block,), consumed=j - i)


def match_quote(
    lines: list[str],
    i: int,
    config: NormalizerConfig | None = None,
    depth: int = 0,
) -> RuleMatch | None:
    """Contiguous ``>`` lines, with one prefix level stripped and parsed.

    Blank lines inside the region are kept only when the next line is
    still quoted.
    """
    return _match_quote(lines, i, _Context(config or DEFAULT_CONFIG, depth))


def _match_list(
    lines: list[str],
    i: int,
    marker_re: re.Pattern[str],
    other_re: re.Pattern[str],
) -> tuple[tuple[str, ...], int] | None:
    if not marker_re.match(lines[i]):
        return None

    items: list[str] = []
    j = i
    while j < len(lines) and marker_re.match(lines[j]):
        item = strip_list_prefix(lines[j])
        j += 1
        # Indented follow-up lines continue the previous item
        while (
            j < len(lines)
            and not _is_blank(lines[j])
            and not marker_re.match(lines[j])
            and not other_re.match(lines[j])
            and _CONTINUATION_RE.match(lines[j])
        ):
            item = f"{item} {lines[j].strip()}"
            j += 1
        items.append(item)
    return tuple(items), j - i


def match_unordered_list(lines: list[str], i: int) -> RuleMatch | None:
    result = _match_list(lines, i, UL_RE, OL_RE)
    if result is None:
        return None
    items, consumed = result
    return RuleMatch(blocks=(UnorderedList(items=items),), consumed=consumed)


def match_ordered_list(lines: list[str], i: int) -> RuleMatch | None:
    result = _match_list(lines, i, OL_RE, UL_RE)
    if result is None:
        return None
    items, consumed = result
    return RuleMatch(blocks=(OrderedList(items=items),), consumed=consumed)


def match_preformatted(lines: list[str], i: int) -> RuleMatch | None:
    """A run of lines indented by four or more spaces.

    Blank lines are swallowed into the run; trailing ones are trimmed
    from the block but still consumed.
    """
    if not _INDENTED_TEXT_RE.match(lines[i]) or UL_RE.match(lines[i]):
        return None

    j = i
    while j < len(lines) and (
        _INDENTED_RE.match(lines[j]) or _is_blank(lines[j])
    ):
        j += 1

    code_lines = lines[i:j]
    while code_lines and _is_blank(code_lines[-1]):
        code_lines.pop()
    return RuleMatch(
        blocks=(Preformatted(text="\n".join(code_lines)),), consumed=j - i
    )


def _ends_paragraph(lines: list[str], j: int, collected: int) -> bool:
    """Check whether line *j* starts a construct other than prose."""
    line = lines[j]
    stripped = line.strip()
    if not stripped:
        return True
    if QUOTE_RE.match(line) or is_signature_start(line):
        return True
    if DIVIDER_RE.match(line) or FORWARDED_RE.match(stripped):
        return True
    if match_attribution(lines, j) is not None:
        return True
    return collected > 0 and bool(UL_RE.match(line) or OL_RE.match(line))


def match_paragraph(
    lines: list[str], i: int, config: NormalizerConfig | None = None
) -> RuleMatch | None:
    """Contiguous prose lines, reflowed; a short ``...:`` line is a header."""
    config = config or DEFAULT_CONFIG
    if _is_blank(lines[i]):
        return None

    j = i + 1
    while j < len(lines) and not _ends_paragraph(lines, j, j - i):
        j += 1

    text = reflow_lines(lines[i:j], config)
    if is_section_header(text, config.section_header_max_length):
        block: EmailBlock = SectionHeader(text=text.strip()[:-1])
    else:
        block = Paragraph(text=text)
    return RuleMatch(blocks=(block,), consumed=j - i)


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------


def _match_at(lines: list[str], i: int, context: _Context) -> RuleMatch | None:
    """Apply the rules in precedence order; the first match wins."""
    return (
        match_signature(lines, i)
        or match_forwarded(lines, i)
        or match_divider(lines, i)
        or match_attribution(lines, i)
        or _match_quote(lines, i, context)
        or match_unordered_list(lines, i)
        or match_ordered_list(lines, i)
        or match_preformatted(lines, i)
        or match_paragraph(lines, i, context.config)
    )


def _parse_lines(lines: list[str], context: _Context) -> list[EmailBlock]:
    blocks: list[EmailBlock] = []
    i = 0
    while i < len(lines):
        match = None if _is_blank(lines[i]) else _match_at(lines, i, context)
        if match is None:
            i += 1
            continue

        blocks.extend(match.blocks)
        i += match.consumed
        if match.stop:
            break

    return merge_attributions(blocks)


def merge_attributions(blocks: list[EmailBlock]) -> list[EmailBlock]:
    """Merge each attribution immediately followed by a quote.

    When the sender can be recovered from the attribution the pair
    becomes one ``QuotedMessage``; otherwise both blocks are kept.
    """
    result: list[EmailBlock] = []
    i = 0
    while i < len(blocks):
        block = blocks[i]
        following = blocks[i + 1] if i + 1 < len(blocks) else None
        if isinstance(block, QuoteAttribution) and isinstance(
            following, Quote
        ):
            parsed = parse_attribution(block.text)
            if parsed is not None:
                result.append(
                    QuotedMessage(
                        name=parsed.name,
                        initials=parsed.initials,
                        blocks=following.blocks,
                    )
                )
            else:
                result.extend((block, following))
            i += 2
            continue
        result.append(block)
        i += 1
    return result


def split_lines(text: str) -> list[str]:
    """Split text into lines, normalizing CRLF and CR line endings."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_email_text(
    text: str, config: NormalizerConfig | None = None
) -> list[EmailBlock]:
    """Parse a plain-text email body into blocks.

    Args:
        text: Raw plain-text body.
        config: Thresholds to use. Defaults to ``DEFAULT_CONFIG``.

    Returns:
        Blocks in reading order. Never raises; unrecognized content
        becomes paragraphs.
    """
    config = config or DEFAULT_CONFIG
    blocks = _parse_lines(split_lines(text), _Context(config, 0))
    logger.debug("Parsed %d top-level blocks", len(blocks))
    return blocks
