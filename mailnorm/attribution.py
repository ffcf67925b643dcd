# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Sender recovery from quote attribution lines.

Reply attributions have no delimiter between the date and the sender::

    On Tue, Feb 17, 2026 at 11:37 AM Niko Cunningham <niko@rumilabs.io> wrote:

The name is recovered by walking backwards from the ``<address>`` marker
and stopping at the first token that belongs to the date/time part.
"""

import logging
import re

from mailnorm.blocks import Attribution


logger = logging.getLogger(__name__)

# Attribution must end in "<address> wrote:" (colon optional)
_ADDRESS_WROTE_RE = re.compile(r"<([^>]+)>\s*wrote:?\s*$")

# Pattern for a bare "On ... wrote:" line
ATTRIBUTION_LINE_RE = re.compile(r"^On .+wrote:\s*$")

_NUMBER_RE = re.compile(r"^\d+$")
_TIME_RE = re.compile(r"^\d{1,2}:\d{2}")
_TOKEN_PUNCT_RE = re.compile(r"[,.:]")
_FALLBACK_SEPARATORS_RE = re.compile(r"[._-]")
_ANGLE_ADDRESS_RE = re.compile(r"<\s*[^<>\s]+@[^<>\s]+\s*>")

DATE_TOKENS = frozenset(
    {
        # Weekdays
        "Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun",
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
        "Saturday", "Sunday",
        # Months
        "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep",
        "Oct", "Nov", "Dec",
        "January", "February", "March", "April", "June", "July",
        "August", "September", "October", "November", "December",
        # Meridiem and connectives
        "AM", "PM", "am", "pm", "at", "On",
    }
)  # fmt: skip


def is_attribution_line(line: str) -> bool:
    """Check whether *line* (already stripped) starts a quote attribution."""
    return ATTRIBUTION_LINE_RE.match(line) is not None


def has_sender_or_timestamp(text: str) -> bool:
    """Check whether *text* carries an ``<address>`` or a numeric date/time."""
    if _ANGLE_ADDRESS_RE.search(text):
        return True
    for word in text.split():
        if _TIME_RE.match(word) or _NUMBER_RE.match(
            _TOKEN_PUNCT_RE.sub("", word)
        ):
            return True
    return False


def initials_for(name: str) -> str:
    """Return display initials for a name.

    First letters of the first and last word when there are at least two
    words, otherwise the first two characters. Always uppercased.
    """
    parts = name.split()
    if len(parts) >= 2:
        return (parts[0][0] + parts[-1][0]).upper()
    return name[:2].upper()


def _is_date_token(word: str) -> bool:
    """Check whether *word* belongs to the date/time part of the line."""
    if _TIME_RE.match(word):
        return True
    clean = _TOKEN_PUNCT_RE.sub("", word)
    if not clean:
        return True
    if _NUMBER_RE.match(clean):
        return True
    return clean in DATE_TOKENS


def parse_attribution(text: str) -> Attribution | None:
    """Extract the sender's display name and initials from an attribution.

    Args:
        text: Attribution text, possibly joined from several wrapped lines.

    Returns:
        Attribution with name and initials, or None when the text does not
        end in ``<address> wrote:``.
    """
    match = _ADDRESS_WROTE_RE.search(text)
    if match is None:
        return None

    # Lines wrapped at "<" are joined with a space inside the brackets
    address = match.group(1).strip()
    before = text[: match.start()].strip()
    words = before.split()

    name_start = len(words)
    for i in range(len(words) - 1, -1, -1):
        if _is_date_token(words[i]):
            break
        name_start = i

    name_words = words[name_start:]
    if not name_words:
        name = _FALLBACK_SEPARATORS_RE.sub(" ", address.split("@")[0])
        logger.debug("No name before address, using local part")
        return Attribution(name=name, initials=initials_for(name))

    name = " ".join(name_words)
    return Attribution(name=name, initials=initials_for(name))
