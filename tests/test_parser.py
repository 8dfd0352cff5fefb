"""Tests for md2html.parser — markup lines to block events."""

from __future__ import annotations

from typing import List

import pytest

from md2html.errors import ParseError
from md2html.models import (
    BlockEvent,
    BlockKind,
    BlockStyle,
    CodeBlockPayload,
    Event,
    HeadingPayload,
    ListItemPayload,
    StyleUpdateEvent,
)
from md2html.parser import MarkdownParser


def parse(source: str) -> List[Event]:
    return list(MarkdownParser(BlockStyle()).parse(source.splitlines(keepends=True)))


def blocks(source: str) -> List[BlockEvent]:
    return [event for event in parse(source) if isinstance(event, BlockEvent) and event.kind is not BlockKind.BLANK_LINE]


class TestBlocks:
    def test_heading_levels(self) -> None:
        events = blocks("# One\n### Three ###\n")
        assert [event.payload for event in events] == [
            HeadingPayload(level=1, text="One"),
            HeadingPayload(level=3, text="Three"),
        ]

    def test_hash_without_space_is_paragraph(self) -> None:
        (event,) = blocks("#hashtag\n")
        assert event.kind is BlockKind.PARAGRAPH

    def test_paragraph_lines_are_joined(self) -> None:
        (event,) = blocks("first line\nsecond line\n")
        assert event.payload.text == "first line second line"

    def test_fenced_code_keeps_lines_and_info(self) -> None:
        (event,) = blocks("```python\nx = 1\n\n    y = 2\n```\n")
        assert event.payload == CodeBlockPayload(lines=["x = 1", "", "    y = 2"], info="python")

    def test_indented_code(self) -> None:
        (event,) = blocks("    print('hi')\n    return\n")
        assert event.kind is BlockKind.CODE_BLOCK
        assert event.payload.lines == ["print('hi')", "return"]

    def test_list_items(self) -> None:
        events = blocks("- a\n  * b\n3. c\n")
        payloads = [event.payload for event in events]
        assert all(isinstance(payload, ListItemPayload) for payload in payloads)
        assert [(p.indent, p.ordered, p.text) for p in payloads] == [("", False, "a"), ("  ", False, "b"), ("", True, "c")]

    def test_deeply_indented_list_item_after_list_is_not_code(self) -> None:
        events = blocks("- a\n    - b\n")
        assert [event.kind for event in events] == [BlockKind.LIST_ITEM, BlockKind.LIST_ITEM]

    def test_blockquote_depth(self) -> None:
        events = blocks("> outer\n>> inner\n")
        assert [(event.payload.depth, event.payload.text) for event in events] == [(1, "outer"), (2, "inner")]

    def test_horizontal_rule(self) -> None:
        (event,) = blocks("* * *\n")
        assert event.kind is BlockKind.HORIZONTAL_RULE

    def test_bold_line_is_not_a_list(self) -> None:
        (event,) = blocks("**bold** start\n")
        assert event.kind is BlockKind.PARAGRAPH


class TestStyleAttributes:
    def test_attribute_line_inside_paragraph(self) -> None:
        (event,) = blocks("Centered text\n{: .center}\n")
        assert event.style.align == "center"

    def test_attribute_line_before_block(self) -> None:
        (event,) = blocks("{: align=right margin-left=2}\nText\n")
        assert event.style == BlockStyle(align="right", margin_left=2, margin_right=0)

    def test_attribute_line_after_heading_emits_update(self) -> None:
        events = parse("# Title\n{: .text-center}\n")
        assert isinstance(events[-1], StyleUpdateEvent)
        assert events[-1].spec.align == "center"

    def test_trailing_heading_attribute(self) -> None:
        (event,) = blocks("## Title {: .right}\n")
        assert event.payload.text == "Title"
        assert event.style.align == "right"


class TestErrors:
    def test_unterminated_fence_reports_opening_line(self) -> None:
        with pytest.raises(ParseError) as excinfo:
            parse("intro\n\n```\nbody\n")
        assert excinfo.value.line_number == 3
        assert "unterminated" in str(excinfo.value)

    def test_info_string_does_not_close_fence(self) -> None:
        with pytest.raises(ParseError):
            parse("```\ncode\n```python\n")
