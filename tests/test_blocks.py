# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for block types, serialization and previews."""

import dataclasses

import pytest

from mailnorm.blocks import (
    Divider,
    OrderedList,
    Paragraph,
    Preformatted,
    Quote,
    QuoteAttribution,
    QuotedMessage,
    SectionHeader,
    Signature,
    UnorderedList,
    block_to_dict,
    block_type_name,
    blocks_to_dicts,
    is_blank_paragraph,
    preview_text,
)
from mailnorm.config import NormalizerConfig


class TestBlockTypes:
    """Tests for the block dataclasses."""

    def test_blocks_are_frozen(self) -> None:
        """Blocks cannot be mutated after creation."""
        block = Paragraph(text="Hello")
        with pytest.raises(dataclasses.FrozenInstanceError):
            block.text = "Changed"  # type: ignore[misc]

    def test_equality_by_value(self) -> None:
        """Blocks with equal fields compare equal."""
        assert Quote(blocks=(Paragraph("a"),)) == Quote(
            blocks=(Paragraph("a"),)
        )
        assert Divider() == Divider()

    def test_type_names(self) -> None:
        """Each block has a kebab-case discriminator."""
        assert block_type_name(Paragraph("x")) == "paragraph"
        assert block_type_name(SectionHeader("x")) == "section-header"
        assert block_type_name(QuoteAttribution("x")) == "quote-attribution"
        assert block_type_name(OrderedList(items=())) == "ordered-list"
        assert block_type_name(Divider()) == "divider"


class TestBlockToDict:
    """Tests for block serialization."""

    def test_paragraph(self) -> None:
        """Paragraph serializes its text."""
        assert block_to_dict(Paragraph("Hi")) == {
            "type": "paragraph",
            "text": "Hi",
        }

    def test_divider_has_only_type(self) -> None:
        """Divider carries no fields."""
        assert block_to_dict(Divider()) == {"type": "divider"}

    def test_lists_become_json_lists(self) -> None:
        """Tuple fields are serialized as lists."""
        assert block_to_dict(UnorderedList(items=("a", "b"))) == {
            "type": "unordered-list",
            "items": ["a", "b"],
        }
        assert block_to_dict(Signature(lines=("Jane",))) == {
            "type": "signature",
            "lines": ["Jane"],
        }

    def test_nested_quote(self) -> None:
        """Children of quotes are serialized recursively."""
        tree = QuotedMessage(
            name="Bob Lee",
            initials="BL",
            blocks=(
                Paragraph("Sure."),
                Quote(blocks=(Preformatted("code"),)),
            ),
        )
        assert block_to_dict(tree) == {
            "type": "quoted-message",
            "name": "Bob Lee",
            "initials": "BL",
            "blocks": [
                {"type": "paragraph", "text": "Sure."},
                {
                    "type": "quote",
                    "blocks": [{"type": "preformatted", "text": "code"}],
                },
            ],
        }

    def test_blocks_to_dicts(self) -> None:
        """A sequence serializes in order."""
        result = blocks_to_dicts([SectionHeader("Agenda"), Divider()])
        assert [item["type"] for item in result] == [
            "section-header",
            "divider",
        ]


class TestPreviewText:
    """Tests for collapsed quote previews."""

    def test_first_non_blank_paragraph(self) -> None:
        """Preview skips non-paragraph and blank paragraph blocks."""
        blocks = [
            SectionHeader("Notes"),
            Paragraph("   "),
            Paragraph("Sounds good to me."),
            Paragraph("Later text."),
        ]
        assert preview_text(blocks) == "Sounds good to me."

    def test_default_length(self) -> None:
        """Without a config, previews are cut at 120 characters."""
        assert preview_text([Paragraph("x" * 200)]) == "x" * 120

    def test_length_from_config(self) -> None:
        """The preview length comes from the config."""
        config = NormalizerConfig(preview_length=10)
        assert preview_text([Paragraph("x" * 200)], config) == "x" * 10

    def test_empty_when_no_paragraph(self) -> None:
        """No paragraph yields an empty preview."""
        assert preview_text([Divider(), UnorderedList(items=("a",))]) == ""


def test_is_blank_paragraph() -> None:
    """Only whitespace-only paragraphs count as blank."""
    assert is_blank_paragraph(Paragraph(" \n "))
    assert not is_blank_paragraph(Paragraph("x"))
    assert not is_blank_paragraph(Divider())
