# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Lightweight HTML to text conversion for email bodies.

Produces plain text that the block parser can restructure, so the output
keeps the conventions the parser recognizes rather than markdown:

- Line breaks (<br>) → newline
- Paragraphs and headings (</p>, </h1>-</h6>) → blank line
- Divisions (</div>) → newline
- List items (<li>) → "• item" on its own line
- Links (<a href>) → "label ( url )", or just the URL when the label
  already is the URL or its host. A link missing its </a> ends at the
  next block tag.
- Script and style content → dropped
- HTML entities (named and numeric) → decoded characters

All other tags are removed and their text kept. Whitespace inside text
runs is preserved; runs of three or more newlines collapse to one blank
line.
"""

import re
from html.parser import HTMLParser
from urllib.parse import urlsplit


_HEADINGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
_BLOCK_TAGS = frozenset({"p", "div", "br", "li"}) | _HEADINGS
_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def html_to_text(html_content: str) -> str:
    """Convert an HTML email body to plain text.

    Args:
        html_content: HTML string to convert. Malformed markup is
            tolerated.

    Returns:
        Plain text with leading and trailing whitespace removed.
    """
    if not html_content:
        return ""

    parser = _HTMLToTextParser()
    parser.feed(html_content)
    parser.close()
    return parser.get_text()


def link_text(label: str, href: str) -> str:
    """Render a link as text.

    Args:
        label: Visible text of the anchor, tags already removed.
        href: Link target.

    Returns:
        The bare URL when the label is empty or just repeats the URL (with
        or without scheme) or its host, else ``"label ( url )"``.
    """
    label = label.strip()
    if not label:
        return href
    if label in (href, _SCHEME_RE.sub("", href), urlsplit(href).netloc):
        return href
    return f"{label} ( {href} )"


class _HTMLToTextParser(HTMLParser):
    """HTML parser that flattens an email body to parser-friendly text."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._output: list[str] = []
        self._skip_depth = 0

        # Anchor state: text collected while inside <a href>
        self._link_href: str | None = None
        self._link_text: list[str] = []

    def _flush_link(self) -> None:
        """Emit the open link, if any, and leave link state."""
        if self._link_href is None:
            return
        label = "".join(self._link_text)
        self._output.append(link_text(label, self._link_href))
        self._link_href = None
        self._link_text = []

    def handle_starttag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        """Handle opening HTML tags."""
        tag = tag.lower()

        if tag in ("script", "style"):
            self._skip_depth += 1
            return

        # Inline markup inside a link is dropped; block markup or another
        # anchor ends a link whose </a> is missing
        if self._link_href is not None:
            if tag not in _BLOCK_TAGS and tag != "a":
                return
            self._flush_link()

        if tag == "br":
            self._output.append("\n")
        elif tag == "li":
            self._output.append("• ")
        elif tag == "a":
            href = dict(attrs).get("href")
            if href:
                self._link_href = href
                self._link_text = []

    def handle_startendtag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        """Handle self-closing tags such as ``<br/>``.

        A self-closing ``<a/>`` has no label and never opens a link.
        """
        if tag.lower() in ("script", "style", "a"):
            return
        self.handle_starttag(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        """Handle closing HTML tags."""
        tag = tag.lower()

        if tag in ("script", "style"):
            self._skip_depth = max(0, self._skip_depth - 1)
            return

        if self._link_href is not None:
            if tag == "a":
                self._flush_link()
                return
            if tag not in _BLOCK_TAGS:
                return
            self._flush_link()

        if tag == "p" or tag in _HEADINGS:
            self._output.append("\n\n")
        elif tag in ("div", "li"):
            self._output.append("\n")

    def handle_data(self, data: str) -> None:
        """Handle text content."""
        if self._skip_depth:
            return

        data = data.replace("\xa0", " ")
        if self._link_href is not None:
            self._link_text.append(data)
        else:
            self._output.append(data)

    def close(self) -> None:
        """Flush buffered input and any link left open at end of input."""
        super().close()
        self._flush_link()

    def get_text(self) -> str:
        """Return the accumulated plain text output.

        Returns:
            Converted text with 3+ newlines collapsed to 2 and surrounding
            whitespace stripped.
        """
        text = "".join(self._output)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()
