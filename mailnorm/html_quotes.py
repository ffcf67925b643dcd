# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Remove quoted reply containers from HTML email bodies.

Each mail client wraps the message being replied to in its own markup.
This module knows a fixed set of those signatures:

- Gmail: ``<div class="gmail_quote">``, ``<div class="gmail_attr">``,
  ``<blockquote class="gmail_quote">``
- Apple Mail: ``<blockquote type="cite">``, plus the preceding sibling
  when its text ends in ``wrote:`` (the attribution sits outside)
- Outlook: ``#appendonsend`` and everything after it; ``#divRplyFwdMsg``
  and everything after it, plus an ``<hr>`` right before it
- Yahoo / ProtonMail: ``.yahoo_quoted`` / ``.protonmail_quote``

Unknown clients are left alone: a visible quote is acceptable, deleting
the sender's own text is not. Nodes are collected first and removed
afterwards so the tree is never modified while it is being searched.
"""

import logging
import re

from bs4 import BeautifulSoup
from bs4.element import PageElement, Tag


logger = logging.getLogger(__name__)

# Quote containers removed on their own
_QUOTE_SELECTORS = (
    "div.gmail_quote",
    "div.gmail_attr",
    "blockquote.gmail_quote",
    ".yahoo_quoted",
    ".protonmail_quote",
)

# Apple Mail quote container; its attribution is the previous sibling
_CITE_SELECTOR = 'blockquote[type="cite" i]'

# Outlook separator markers; removed together with all following siblings
_OUTLOOK_APPEND_ID = "appendonsend"
_OUTLOOK_REPLY_ID = "divRplyFwdMsg"

_WROTE_RE = re.compile(r"wrote:\s*$", re.IGNORECASE)
_TRAILING_BR_RE = re.compile(r"(<br\s*/?>\s*)*$", re.IGNORECASE)


def _collect_quote_nodes(soup: BeautifulSoup) -> list[PageElement]:
    """Find every element that belongs to quoted history."""
    nodes: list[PageElement] = []

    for selector in _QUOTE_SELECTORS:
        nodes.extend(soup.select(selector))

    for cite in soup.select(_CITE_SELECTOR):
        prev = cite.find_previous_sibling()
        if isinstance(prev, Tag) and _WROTE_RE.search(prev.get_text()):
            nodes.append(prev)
        nodes.append(cite)

    append_on_send = soup.find(id=_OUTLOOK_APPEND_ID)
    if isinstance(append_on_send, Tag):
        nodes.append(append_on_send)
        nodes.extend(append_on_send.next_siblings)

    reply_header = soup.find(id=_OUTLOOK_REPLY_ID)
    if isinstance(reply_header, Tag):
        prev = reply_header.find_previous_sibling()
        if isinstance(prev, Tag) and prev.name == "hr":
            nodes.append(prev)
        nodes.append(reply_header)
        nodes.extend(reply_header.next_siblings)

    return nodes


def strip_html_quotes(html: str) -> str:
    """Remove known quoted-reply subtrees from an HTML body.

    Args:
        html: HTML body, either a fragment or a full document.

    Returns:
        The remaining markup (body contents for full documents) with
        trailing ``<br>`` runs and surrounding whitespace removed.
    """
    if not html or not html.strip():
        return ""

    soup = BeautifulSoup(html, "html.parser")
    nodes = _collect_quote_nodes(soup)

    # Nodes nested inside another removed node go with their ancestor
    marked = {id(node) for node in nodes}
    seen: set[int] = set()
    roots: list[PageElement] = []
    for node in nodes:
        if id(node) in seen:
            continue
        if any(id(parent) in marked for parent in node.parents):
            continue
        seen.add(id(node))
        roots.append(node)

    for node in roots:
        node.extract()

    if roots:
        logger.debug("Removed %d quoted HTML nodes", len(roots))

    container = soup.body if soup.body is not None else soup
    result = container.decode_contents().strip()
    return _TRAILING_BR_RE.sub("", result).strip()
