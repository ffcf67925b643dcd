# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Standalone documents for rendering designed HTML in isolation.

Designed emails are shown verbatim inside a sandboxed frame. The frame
needs a complete document with base styles matching the viewer's colour
scheme. The scheme is always passed in by the caller.

Emails that declare a ``prefers-color-scheme: dark`` media query can
follow a dark viewer. Others were designed for a white background, so in
a dark viewer they are placed on a padded light card instead of being
recoloured.
"""

import re
from dataclasses import dataclass
from enum import Enum


class ColorScheme(Enum):
    """Colour scheme of the surrounding viewer."""

    LIGHT = "light"
    DARK = "dark"


_DARK_MEDIA_RE = re.compile(r"prefers-color-scheme\s*:\s*dark", re.IGNORECASE)


@dataclass(frozen=True)
class _Palette:
    scheme: str
    background: str
    padding: str
    text: str
    code_background: str
    inline_code_background: str
    rule: str
    heading: str


_LIGHT = _Palette(
    scheme="light",
    background="transparent",
    padding="0",
    text="#404040",
    code_background="#f9fafb",
    inline_code_background="#f3f4f6",
    rule="#e5e7eb",
    heading="#1a1a1a",
)

_DARK = _Palette(
    scheme="dark",
    background="transparent",
    padding="0",
    text="#d4d4d8",
    code_background="#18181b",
    inline_code_background="#18181b",
    rule="#27272a",
    heading="#e4e4e7",
)

_LIGHT_CARD = _Palette(
    scheme="light",
    background="#ffffff",
    padding="16px",
    text="#404040",
    code_background="#f9fafb",
    inline_code_background="#f3f4f6",
    rule="#e5e7eb",
    heading="#1a1a1a",
)

_DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html style="color-scheme:{p.scheme}">
<head><meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1"><base target="_blank" rel="noopener noreferrer">
<meta name="color-scheme" content="{p.scheme} light">
<meta name="supported-color-schemes" content="{p.scheme} light">
<style>
  :root{{color-scheme:{p.scheme}}}
  *{{box-sizing:border-box}}
  html,body{{margin:0;padding:{p.padding};overflow:hidden;font-family:-apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,"Helvetica Neue",Arial,sans-serif;font-size:14px;line-height:1.65;word-break:break-word;overflow-wrap:break-word;color:{p.text};background:{p.background}}}
  a{{color:#4f7be8;text-decoration:underline;text-decoration-color:rgba(79,123,232,0.3);text-underline-offset:2px}}
  a:hover{{text-decoration-color:rgba(79,123,232,0.7)}}
  img{{max-width:100%;height:auto;border-radius:4px}}
  blockquote{{margin:0.75em 0;padding-left:1em;border-left:2px solid #e0e0e0;color:#9ca3af}}
  pre{{white-space:pre-wrap;overflow-x:auto;background:{p.code_background};border-radius:6px;padding:12px;font-size:13px}}
  code{{background:{p.inline_code_background};border-radius:3px;padding:1px 4px;font-size:0.9em}}
  table{{border-collapse:collapse;max-width:100%}}
  hr{{border:none;border-top:1px solid {p.rule};margin:1em 0}}
  h1,h2,h3,h4,h5,h6{{color:{p.heading};line-height:1.35;margin:0.8em 0 0.4em}}
  p{{margin:0.5em 0}}
</style></head>
<body>{body}</body></html>"""


def supports_dark_mode(html: str) -> bool:
    """Check whether the email ships its own dark-mode styles."""
    return _DARK_MEDIA_RE.search(html) is not None


def needs_light_card(html: str, scheme: ColorScheme) -> bool:
    """Check whether the email must sit on a light card in this scheme."""
    return scheme is ColorScheme.DARK and not supports_dark_mode(html)


def build_frame_document(html: str, scheme: ColorScheme) -> str:
    """Wrap designed HTML into a complete document for a sandboxed frame.

    Args:
        html: Markup to show verbatim (already quote-stripped if needed).
        scheme: Colour scheme of the viewer.

    Returns:
        A standalone HTML document string.
    """
    if needs_light_card(html, scheme):
        palette = _LIGHT_CARD
    elif scheme is ColorScheme.DARK:
        palette = _DARK
    else:
        palette = _LIGHT
    return _DOCUMENT_TEMPLATE.format(p=palette, body=html)


def escape_html(text: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"`` for use in markup."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )
