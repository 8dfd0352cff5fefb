from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from .errors import ParseError
from .models import (
    BlockEvent,
    BlockKind,
    BlockQuotePayload,
    BlockStyle,
    CodeBlockPayload,
    Event,
    HeadingPayload,
    ListItemPayload,
    ParagraphPayload,
    StyleSpec,
    StyleUpdateEvent,
)
from .plugins import register_parser


logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
ORDERED_LIST_PATTERN = re.compile(r"^(\s*)(\d+\.)(\s+)(.*)$")
UNORDERED_LIST_PATTERN = re.compile(r"^(\s*)([*+-])(\s+)(.*)$")
BLOCKQUOTE_PATTERN = re.compile(r"^\s{0,3}>(.*)$")
HORIZONTAL_RULE_PATTERN = re.compile(r"^\s*([-*_])(?:\s*\1){2,}\s*$")
FENCE_PATTERN = re.compile(r"^\s*```\s*(?P<info>[^`\s]*)\s*$")
MMD_ATTR_LINE_RE = re.compile(r"^\{\s*:(.+)\}\s*$")
MMD_ATTR_TAIL_RE = re.compile(r"(.*?)\s*\{\s*:(.+?)\}\s*$")


class MarkdownParser:
    """Turn markup lines into a stream of block events.

    Blank lines, fenced and indented code, ATX headings, blockquotes, list
    items and horizontal rules each produce one event; any other run of lines
    becomes a paragraph. ``{: ...}`` attribute lines restyle the previous
    stylable block, or the next one when nothing stylable precedes them.
    """

    def __init__(self, base_style: BlockStyle, *, line_offset: int = 0) -> None:
        self._base_style = base_style
        self._line_offset = line_offset
        self._pending_block_style_spec: Optional[StyleSpec] = None
        self._paragraph_style_spec: Optional[StyleSpec] = None
        self._last_stylable_block: bool = False

    def parse(self, lines: Iterable[str]) -> Iterator[Event]:
        self._reset_state()
        fence_start: Optional[int] = None
        fence_info = ""
        code_lines: List[str] = []
        indented_code_lines: List[str] = []
        current_paragraph: List[str] = []
        after_list_item = False

        for line_number, raw_line in enumerate(lines, start=1 + self._line_offset):
            line = raw_line.rstrip("\r\n")
            in_list, after_list_item = after_list_item, False

            if fence_start is not None:
                closing = FENCE_PATTERN.match(line)
                if closing and not closing.group("info"):
                    yield self._flush_code_block(code_lines, fence_info)
                    fence_start = None
                else:
                    code_lines.append(line)
                continue

            if indented_code_lines:
                if line.startswith("    "):
                    indented_code_lines.append(line[4:])
                    continue
                yield self._flush_code_block(indented_code_lines)

            stripped = line.strip()
            attr_match = MMD_ATTR_LINE_RE.match(stripped)
            if attr_match:
                spec = self._parse_style_spec_from_tokens(attr_match.group(1))
                if spec:
                    if current_paragraph:
                        self._paragraph_style_spec = self._merge_specs(self._paragraph_style_spec, spec)
                    elif self._last_stylable_block:
                        yield StyleUpdateEvent(spec)
                    else:
                        self._pending_block_style_spec = self._merge_specs(self._pending_block_style_spec, spec)
                continue

            fence_match = FENCE_PATTERN.match(line)
            if fence_match:
                yield from self._flush_paragraph(current_paragraph)
                fence_start = line_number
                fence_info = fence_match.group("info")
                code_lines = []
                continue

            if line.startswith("    ") and not current_paragraph and stripped and not in_list:
                indented_code_lines = [line[4:]]
                continue

            heading_match = HEADING_PATTERN.match(line)
            if heading_match:
                yield from self._flush_paragraph(current_paragraph)
                level = len(heading_match.group(1))
                heading_text, inline_spec = self._extract_trailing_attr(heading_match.group(2).strip())
                combined_spec = self._merge_specs(self._pending_block_style_spec, inline_spec)
                self._pending_block_style_spec = None
                self._last_stylable_block = True
                yield BlockEvent(
                    kind=BlockKind.HEADING,
                    payload=HeadingPayload(level=level, text=heading_text),
                    style=self._combine_styles(self._base_style, combined_spec),
                )
                continue

            if HORIZONTAL_RULE_PATTERN.match(line):
                yield from self._flush_paragraph(current_paragraph)
                self._last_stylable_block = False
                yield BlockEvent(
                    kind=BlockKind.HORIZONTAL_RULE,
                    payload=None,
                    style=self._clone_style(),
                )
                continue

            if BLOCKQUOTE_PATTERN.match(line):
                yield from self._flush_paragraph(current_paragraph)
                yield self._parse_blockquote(line)
                continue

            list_event = self._parse_list_line(line)
            if list_event is not None:
                yield from self._flush_paragraph(current_paragraph)
                after_list_item = True
                yield list_event
                continue

            if not stripped:
                yield from self._flush_paragraph(current_paragraph)
                yield BlockEvent(
                    kind=BlockKind.BLANK_LINE,
                    payload=None,
                    style=self._clone_style(),
                )
                continue

            current_paragraph.append(line)

        if fence_start is not None:
            raise ParseError("unterminated code fence", line_number=fence_start)
        yield from self._flush_paragraph(current_paragraph)
        if indented_code_lines:
            yield self._flush_code_block(indented_code_lines)

    def _reset_state(self) -> None:
        self._paragraph_style_spec = None
        self._pending_block_style_spec = None
        self._last_stylable_block = False

    def _flush_paragraph(self, paragraph_lines: List[str]) -> Iterator[BlockEvent]:
        if not paragraph_lines:
            return
        text = " ".join(line.strip() for line in paragraph_lines)
        combined_spec = self._merge_specs(self._pending_block_style_spec, self._paragraph_style_spec)
        paragraph_lines.clear()
        self._paragraph_style_spec = None
        self._pending_block_style_spec = None
        self._last_stylable_block = True
        yield BlockEvent(
            kind=BlockKind.PARAGRAPH,
            payload=ParagraphPayload(text=text),
            style=self._combine_styles(self._base_style, combined_spec),
        )

    def _flush_code_block(self, code_lines: List[str], info: str = "") -> BlockEvent:
        lines = code_lines.copy()
        code_lines.clear()
        self._last_stylable_block = False
        return BlockEvent(
            kind=BlockKind.CODE_BLOCK,
            payload=CodeBlockPayload(lines=lines, info=info),
            style=self._clone_style(),
        )

    def _parse_blockquote(self, line: str) -> BlockEvent:
        content = line
        depth = 0
        while content.lstrip().startswith(">"):
            depth += 1
            content = content.lstrip()[1:]
        self._last_stylable_block = False
        return BlockEvent(
            kind=BlockKind.BLOCKQUOTE,
            payload=BlockQuotePayload(depth=max(1, depth), text=content.strip()),
            style=self._clone_style(),
        )

    def _parse_list_line(self, line: str) -> Optional[BlockEvent]:
        ordered = ORDERED_LIST_PATTERN.match(line)
        unordered = UNORDERED_LIST_PATTERN.match(line)
        if ordered:
            indent, marker, _spacing, rest = ordered.groups()
            ordered_flag = True
        elif unordered:
            indent, marker, _spacing, rest = unordered.groups()
            ordered_flag = False
        else:
            return None
        self._last_stylable_block = False
        return BlockEvent(
            kind=BlockKind.LIST_ITEM,
            payload=ListItemPayload(
                indent=indent,
                marker=marker,
                text=rest.strip(),
                ordered=ordered_flag,
            ),
            style=self._clone_style(),
        )

    def _clone_style(self) -> BlockStyle:
        return self._combine_styles(self._base_style, None)

    def _combine_styles(self, base: BlockStyle, spec: Optional[StyleSpec]) -> BlockStyle:
        if spec is None:
            return BlockStyle(
                align=base.align,
                margin_left=base.margin_left,
                margin_right=base.margin_right,
            )
        return BlockStyle(
            align=spec.align or base.align,
            margin_left=spec.margin_left if spec.margin_left is not None else base.margin_left,
            margin_right=spec.margin_right if spec.margin_right is not None else base.margin_right,
        )

    def _merge_specs(self, first: Optional[StyleSpec], second: Optional[StyleSpec]) -> Optional[StyleSpec]:
        if first is None:
            return second
        if second is None:
            return first
        return StyleSpec(
            align=second.align or first.align,
            margin_left=second.margin_left if second.margin_left is not None else first.margin_left,
            margin_right=second.margin_right if second.margin_right is not None else first.margin_right,
        )

    def _parse_style_spec_from_tokens(self, token_str: str) -> Optional[StyleSpec]:
        spec = StyleSpec()
        changed = False
        for token in re.split(r"\s+", token_str.strip()):
            if not token:
                continue
            if token.startswith("."):
                align = self._class_to_align(token[1:])
                if align:
                    spec.align = align
                    changed = True
                continue
            if "=" in token:
                key, value = token.split("=", 1)
                key = key.strip().lower().lstrip(".")
                value = value.strip().strip("\"'")
                if key in {"align", "text-align"}:
                    align = self._normalize_align(value)
                    if align:
                        spec.align = align
                        changed = True
                elif key in {"margin", "margin-left", "margin-right"}:
                    parsed = self._parse_space_value(value)
                    if parsed is None:
                        logger.debug("Ignoring non-numeric %s value %r", key, value)
                        continue
                    if key in {"margin", "margin-left"}:
                        spec.margin_left = parsed
                    if key in {"margin", "margin-right"}:
                        spec.margin_right = parsed
                    changed = True
                continue
            align = self._normalize_align(token)
            if align:
                spec.align = align
                changed = True
        return spec if changed else None

    def _parse_space_value(self, value: str) -> Optional[int]:
        match = re.match(r"(-?\d+(?:\.\d+)?)", value.strip())
        if not match:
            return None
        return max(0, int(round(float(match.group(1)))))

    def _normalize_align(self, value: str) -> Optional[str]:
        mapping = {
            "centre": "center",
            "center": "center",
            "left": "left",
            "right": "right",
        }
        return mapping.get(value.strip().lower())

    def _class_to_align(self, class_name: str) -> Optional[str]:
        name = class_name.strip().lower()
        for prefix in ("text-", "align-"):
            if name.startswith(prefix):
                name = name[len(prefix) :]
                break
        return self._normalize_align(name)

    def _extract_trailing_attr(self, text: str) -> Tuple[str, Optional[StyleSpec]]:
        match = MMD_ATTR_TAIL_RE.match(text)
        if not match:
            return text, None
        return match.group(1).rstrip(), self._parse_style_spec_from_tokens(match.group(2))


def _markdown_parser_factory(*, base_style: BlockStyle, line_offset: int = 0, **_: Any) -> MarkdownParser:
    return MarkdownParser(base_style, line_offset=line_offset)


register_parser("markdown", _markdown_parser_factory)
