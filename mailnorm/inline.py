# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Split block text into plain text, links and e-mail addresses."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit


_INLINE_RE = re.compile(
    r"(https?://[^\s<>\"{}|\\^`\[\]]+(?:\([^\s)]*\))*"
    r"[^\s<>\"{}|\\^`\[\].,;:!?'\")\]]*)"
    r"|(\b[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}\b)"
)
_TRAILING_PUNCT_RE = re.compile(r"[.,;:!?)]+$")

_MAX_LABEL_LENGTH = 55
_TRUNCATED_LABEL_LENGTH = 52


@dataclass(frozen=True)
class TextSegment:
    text: str


@dataclass(frozen=True)
class LinkSegment:
    url: str
    label: str


@dataclass(frozen=True)
class EmailSegment:
    address: str


InlineSegment = TextSegment | LinkSegment | EmailSegment


def link_label(url: str) -> str:
    """Return a short display label for *url*.

    The label is the host without ``www.``, followed by the path (unless
    it is just ``/``) and the query string. Labels longer than 55 chars
    are cut to 52 and end in an ellipsis. URLs that cannot be parsed are
    returned unchanged.
    """
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError:
        return url
    if not host:
        return url

    label = host.removeprefix("www.")
    if parts.path and parts.path != "/":
        label += parts.path
    if parts.query:
        label += f"?{parts.query}"
    if len(label) > _MAX_LABEL_LENGTH:
        label = label[:_TRUNCATED_LABEL_LENGTH] + "…"
    return label


def _append_text(segments: list[InlineSegment], text: str) -> None:
    if not text:
        return
    if segments and isinstance(segments[-1], TextSegment):
        segments[-1] = TextSegment(segments[-1].text + text)
    else:
        segments.append(TextSegment(text))


def split_inline(text: str) -> list[InlineSegment]:
    """Split *text* into text, link and address segments.

    Trailing sentence punctuation after a URL belongs to the text, not
    the link: ``"see https://a.io/x."`` yields a link to
    ``https://a.io/x`` followed by the text ``"."``.

    Args:
        text: One paragraph line or list item.

    Returns:
        Segments in order; adjacent text is merged into one segment.
    """
    segments: list[InlineSegment] = []
    last = 0
    for match in _INLINE_RE.finditer(text):
        _append_text(segments, text[last : match.start()])

        url, address = match.group(1), match.group(2)
        if url:
            trailing = _TRAILING_PUNCT_RE.search(url)
            suffix = ""
            if trailing:
                suffix = trailing.group(0)
                url = url[: trailing.start()]
            segments.append(LinkSegment(url=url, label=link_label(url)))
            _append_text(segments, suffix)
        else:
            segments.append(EmailSegment(address=address))

        last = match.end()

    _append_text(segments, text[last:])
    return segments
