# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Undo fixed-width hard wrapping in plain-text paragraphs."""

import re

from mailnorm.config import DEFAULT_CONFIG, NormalizerConfig


_TERMINAL_PUNCT_RE = re.compile(r"[.!?:;]$")


def is_hard_wrapped(
    lines: list[str], config: NormalizerConfig | None = None
) -> bool:
    """Check whether *lines* look pre-broken at a fixed column.

    Every line except the last is a wrap candidate when its length falls
    in the configured range. The paragraph counts as hard-wrapped when
    candidates make up more than the configured ratio.
    """
    config = config or DEFAULT_CONFIG
    if len(lines) < 2:
        return False

    wrapped = sum(
        1
        for line in lines[:-1]
        if config.reflow_min_length <= len(line) <= config.reflow_max_length
    )
    return wrapped / (len(lines) - 1) > config.reflow_ratio


def reflow_lines(
    lines: list[str], config: NormalizerConfig | None = None
) -> str:
    """Join hard-wrapped lines back into flowing text.

    When the paragraph is not hard-wrapped the lines are joined with
    newlines unchanged. Otherwise a line is joined to the next one with a
    space unless it is outside the wrap length range, ends in terminal
    punctuation, or is followed by a blank line; those lines end an
    output line.

    Args:
        lines: Consecutive lines of one paragraph.
        config: Thresholds to use. Defaults to ``DEFAULT_CONFIG``.

    Returns:
        Reflowed text, output lines separated by ``\\n``.
    """
    config = config or DEFAULT_CONFIG
    if not is_hard_wrapped(lines, config):
        return "\n".join(lines)

    result: list[str] = []
    current = ""
    for i, line in enumerate(lines):
        current = f"{current} {line}" if current else line

        next_line = lines[i + 1] if i + 1 < len(lines) else None
        looks_wrapped = (
            config.reflow_min_length <= len(line) <= config.reflow_max_length
            and bool(next_line)
            and not _TERMINAL_PUNCT_RE.search(line.rstrip())
        )
        if not looks_wrapped:
            result.append(current)
            current = ""

    if current:
        result.append(current)
    return "\n".join(result)
