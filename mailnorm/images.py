# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Inline images and attachments shown alongside a message body.

Inline ``<img>`` tags are collected so block-rendered messages can still
show their pictures. Tracking pixels, embedded ``cid:``/``data:`` sources
and hidden images are skipped. Attachments are split into images (shown
in a gallery) and other files (shown as a list).
"""

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.element import Tag


logger = logging.getLogger(__name__)

_TRACKING_PATTERNS = (
    re.compile(r"/track(ing)?/", re.IGNORECASE),
    re.compile(r"/open\b", re.IGNORECASE),
    re.compile(r"/pixel", re.IGNORECASE),
    re.compile(r"/beacon", re.IGNORECASE),
    re.compile(r"/wf/open", re.IGNORECASE),
    re.compile(r"[?&]utm_", re.IGNORECASE),
    re.compile(r"\.gif\?.*=[a-f0-9]{16,}", re.IGNORECASE),
)
_HIDDEN_STYLE_RE = re.compile(r"display\s*:\s*none", re.IGNORECASE)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_IMAGE_MIME_RE = re.compile(
    r"^image/(jpeg|jpg|png|gif|webp|bmp|svg|tiff)$", re.IGNORECASE
)

# Images with an explicit dimension below this are spacers or pixels
_MIN_DIMENSION = 5


@dataclass(frozen=True)
class EmailImage:
    """An image to show with a message."""

    src: str
    alt: str
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class AttachmentMeta:
    """Metadata of one attachment as delivered by the mail provider."""

    attachment_id: str
    filename: str
    mime_type: str
    size: int


def _dimension(value: str | None) -> int:
    """Parse a width/height attribute leniently (``"600px"`` → 600)."""
    if not value:
        return 0
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else 0


def is_tracking_url(src: str) -> bool:
    """Check whether *src* looks like an open-tracking beacon."""
    return any(pattern.search(src) for pattern in _TRACKING_PATTERNS)


def extract_images(html: str) -> list[EmailImage]:
    """Collect displayable inline images from an HTML body.

    Args:
        html: HTML body.

    Returns:
        Images in document order, without duplicates.
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    images: list[EmailImage] = []
    seen: set[str] = set()

    for img in soup.find_all("img"):
        if not isinstance(img, Tag):
            continue
        src = str(img.get("src") or "")
        if not src or src.startswith(("cid:", "data:")):
            continue

        width = _dimension(str(img.get("width") or ""))
        height = _dimension(str(img.get("height") or ""))
        if 0 < width < _MIN_DIMENSION or 0 < height < _MIN_DIMENSION:
            continue

        if _HIDDEN_STYLE_RE.search(str(img.get("style") or "")):
            continue
        if is_tracking_url(src) or src in seen:
            continue

        seen.add(src)
        images.append(
            EmailImage(
                src=src,
                alt=str(img.get("alt") or ""),
                width=width or None,
                height=height or None,
            )
        )

    logger.debug("Extracted %d inline images", len(images))
    return images


def is_image_mime(mime_type: str) -> bool:
    """Check whether an attachment can be shown as an image."""
    return _IMAGE_MIME_RE.match(mime_type) is not None


def partition_attachments(
    attachments: list[AttachmentMeta],
) -> tuple[list[AttachmentMeta], list[AttachmentMeta]]:
    """Split attachments into (images, other files), keeping order."""
    images: list[AttachmentMeta] = []
    files: list[AttachmentMeta] = []
    for attachment in attachments:
        if is_image_mime(attachment.mime_type):
            images.append(attachment)
        else:
            files.append(attachment)
    return images, files


def format_file_size(size: int) -> str:
    """Format a byte count as ``B``, whole ``KB`` or one-decimal ``MB``."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.0f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
