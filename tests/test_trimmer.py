# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for quoted history trimming."""

from mailnorm.blocks import (
    Divider,
    Paragraph,
    Quote,
    QuoteAttribution,
    QuotedMessage,
    Signature,
    UnorderedList,
)
from mailnorm.text_parser import parse_email_text
from mailnorm.trimmer import trim_quoted_blocks


def test_cuts_at_quoted_message() -> None:
    """Everything from the first quoted message on is removed."""
    blocks = [
        Paragraph("Hi,"),
        Paragraph("Can you review this?"),
        QuotedMessage(name="Bob Lee", initials="BL", blocks=()),
        Paragraph("after"),
    ]
    assert trim_quoted_blocks(blocks) == [
        Paragraph("Hi,"),
        Paragraph("Can you review this?"),
    ]


def test_cuts_at_unmerged_attribution() -> None:
    """A standalone attribution also starts the quoted history."""
    blocks = [
        Paragraph("Reply"),
        QuoteAttribution("On Monday Bob wrote:"),
        Paragraph("Unprefixed quoted text"),
    ]
    assert trim_quoted_blocks(blocks) == [Paragraph("Reply")]


def test_trailing_quote_without_attribution() -> None:
    """Trailing quotes, dividers and signatures are removed."""
    blocks = [
        Paragraph("Reply"),
        Quote(blocks=(Paragraph("older"),)),
        Divider(),
        Signature(lines=("Jane",)),
        Paragraph("  "),
    ]
    assert trim_quoted_blocks(blocks) == [Paragraph("Reply")]


def test_inline_quote_kept() -> None:
    """A quote between the sender's paragraphs is part of the reply."""
    blocks = [
        Paragraph("About this:"),
        Quote(blocks=(Paragraph("point"),)),
        Paragraph("I agree."),
    ]
    assert trim_quoted_blocks(blocks) == blocks


def test_trailing_quote_before_attribution() -> None:
    """A quote left at the end after the attribution cut is removed."""
    blocks = [
        Paragraph("Reply"),
        Quote(blocks=(Paragraph("bottom-posted"),)),
        QuoteAttribution("On Mon Bob <bob@co.com> wrote:"),
    ]
    assert trim_quoted_blocks(blocks) == [Paragraph("Reply")]


def test_no_quotes_unchanged() -> None:
    """Bodies without quoted history are returned as-is."""
    blocks = [Paragraph("Hello"), UnorderedList(items=("a", "b"))]
    assert trim_quoted_blocks(blocks) == blocks


def test_everything_quoted() -> None:
    """A body consisting only of a quote trims to nothing."""
    assert trim_quoted_blocks([Quote(blocks=(Paragraph("x"),))]) == []
    assert trim_quoted_blocks([]) == []


def test_idempotent() -> None:
    """Trimming twice gives the same result as trimming once."""
    samples = [
        "Hi\n\n> a\n\nOn Mon Bob <b@c.com> wrote:\n> b",
        "Hi\n\n---\n\n> old\n--\nJane",
        "> only quoted",
        "About this:\n> point\nI agree.\n\n> trailing",
    ]
    for text in samples:
        once = trim_quoted_blocks(parse_email_text(text))
        assert trim_quoted_blocks(once) == once


def test_does_not_modify_input() -> None:
    """The input sequence is left untouched."""
    blocks = [Paragraph("Reply"), Quote(blocks=(Paragraph("x"),))]
    trim_quoted_blocks(blocks)
    assert len(blocks) == 2
