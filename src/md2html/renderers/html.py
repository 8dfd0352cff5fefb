from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import pyphen
from pyfiglet import Figlet, FontNotFound

from ..errors import ConfigurationError
from ..html_builder import Element, Html, Node, Text, element, page, text_content
from ..models import (
    BlockEvent,
    BlockKind,
    BlockQuotePayload,
    BlockStyle,
    CodeBlockPayload,
    Event,
    FrontMatter,
    HeadingPayload,
    ListItemPayload,
    ParagraphPayload,
    StyleSpec,
)
from ..plugins import register_converter


logger = logging.getLogger(__name__)

INLINE_RE = re.compile(
    r"(?P<code>`+)(?P<code_body>.+?)(?P=code)"
    r"|!\[(?P<image_alt>[^\]]*)\]\((?P<image_target>[^)]+)\)"
    r"|\[(?P<link_text>[^\]]+)\]\((?P<link_target>[^)]+)\)"
    r"|\*\*(?P<strong_star>.+?)\*\*"
    r"|__(?P<strong_under>.+?)__"
    r"|~~(?P<strike>.+?)~~"
    r"|(?<!\*)\*(?![\s*])(?P<em_star>.+?)(?<![\s*])\*(?!\*)"
    r"|(?<![\w_])_(?![\s_])(?P<em_under>.+?)(?<![\s_])_(?![\w_])"
)
HYPHENATE_WORD_RE = re.compile(r"[A-Za-zÀ-ÖØ-öø-ÿ'’]{5,}")
SOFT_HYPHEN = "\u00ad"


@dataclass
class BlockRecord:
    index: int
    render: Callable[[BlockStyle], Element]
    style: BlockStyle


@dataclass
class ListFrame:
    ordered: bool
    indent: int
    start: Optional[int] = None
    items: List[List[Node]] = field(default_factory=list)


class HtmlConverter:
    """Build an :class:`Html` page from parser events."""

    def __init__(self, title: str, frontmatter: FrontMatter, *, figlet_width: int = 80, **_: Any) -> None:
        self.title = title
        self.frontmatter = frontmatter
        self.figlet_width = max(20, figlet_width)
        self.body: List[Node] = []
        self._lists: List[ListFrame] = []
        self._quote_lines: List[Tuple[int, str]] = []
        self._last_stylable_block: Optional[BlockRecord] = None
        self._figlets: Dict[Tuple[str, str], Figlet] = {}
        self.hyphenator: Optional[pyphen.Pyphen] = None
        if frontmatter.hyphenate:
            try:
                self.hyphenator = pyphen.Pyphen(lang=frontmatter.hyphen_lang)
            except KeyError as exc:
                raise ConfigurationError(
                    f"No hyphenation dictionary for language '{frontmatter.hyphen_lang}'."
                ) from exc
        self._handlers: Dict[BlockKind, Callable[[Any, BlockStyle], None]] = {
            BlockKind.PARAGRAPH: self._render_paragraph,
            BlockKind.HEADING: self._render_heading,
            BlockKind.CODE_BLOCK: self._render_code_block,
            BlockKind.BLOCKQUOTE: self._render_blockquote,
            BlockKind.LIST_ITEM: self._render_list_item,
            BlockKind.HORIZONTAL_RULE: self._render_horizontal_rule,
            BlockKind.BLANK_LINE: self._render_blank_line,
        }

    def handle_event(self, event: Event) -> None:
        if isinstance(event, BlockEvent):
            if event.kind is not BlockKind.LIST_ITEM and event.kind is not BlockKind.BLANK_LINE:
                self._close_lists()
            if event.kind is not BlockKind.BLOCKQUOTE:
                self._close_quote()
            self._handlers[event.kind](event.payload, event.style)
        else:
            self._apply_style_to_last_block(event.spec)

    def finalize(self) -> Html:
        self._close_lists()
        self._close_quote()
        return page(
            self.title,
            self.body,
            lang=self.frontmatter.lang,
            stylesheet=self.frontmatter.stylesheet,
        )

    # Block handlers ----------------------------------------------------
    def _render_paragraph(self, payload: ParagraphPayload, style: BlockStyle) -> None:
        children = self._process_inline(payload.text, hyphenate=True)
        self._emit_block(lambda target: element("p", *children, style=_css(target)), style, stylable=True)

    def _render_heading(self, payload: HeadingPayload, style: BlockStyle) -> None:
        level = max(1, min(6, payload.level))
        children = self._process_inline(payload.text)

        def render_heading(target: BlockStyle) -> Element:
            if self.frontmatter.figlet_headings and level <= 3:
                banner = self._render_figlet_heading(level, text_content(element("span", *children)), target)
                if banner is not None:
                    return banner
            return element(f"h{level}", *children, style=_css(target))

        self._emit_block(render_heading, style, stylable=True)

    def _render_code_block(self, payload: CodeBlockPayload, style: BlockStyle) -> None:
        language = f"language-{payload.info}" if payload.info else None
        code = element("code", "\n".join(payload.lines), class_=language)
        self._emit_block(lambda target: element("pre", code, style=_css(target)), style)

    def _render_blockquote(self, payload: BlockQuotePayload, _style: BlockStyle) -> None:
        self._quote_lines.append((payload.depth, payload.text))

    def _render_list_item(self, payload: ListItemPayload, _style: BlockStyle) -> None:
        indent = len(payload.indent.replace("\t", "    "))
        while self._lists and self._lists[-1].indent > indent:
            self._close_innermost_list()
        top = self._lists[-1] if self._lists else None
        if top is not None and top.indent == indent and top.ordered != payload.ordered:
            self._close_innermost_list()
            top = self._lists[-1] if self._lists else None
        if top is None or top.indent < indent:
            start = int(payload.marker.rstrip(".")) if payload.ordered else None
            self._lists.append(ListFrame(ordered=payload.ordered, indent=indent, start=start))
        self._lists[-1].items.append(self._process_inline(payload.text, hyphenate=True))
        self._last_stylable_block = None

    def _render_horizontal_rule(self, _payload: object, style: BlockStyle) -> None:
        self._emit_block(lambda target: element("hr", style=_css(target)), style)

    def _render_blank_line(self, *_: object) -> None:
        # Blank lines only separate blocks; an open list stays open across them.
        return

    # Structure helpers -------------------------------------------------
    def _emit_block(self, render: Callable[[BlockStyle], Element], style: BlockStyle, *, stylable: bool = False) -> None:
        self.body.append(render(style))
        if stylable:
            self._last_stylable_block = BlockRecord(index=len(self.body) - 1, render=render, style=style)
        else:
            self._last_stylable_block = None

    def _apply_style_to_last_block(self, spec: StyleSpec) -> None:
        record = self._last_stylable_block
        if record is None:
            return
        new_style = dataclasses.replace(
            record.style,
            align=spec.align or record.style.align,
            margin_left=spec.margin_left if spec.margin_left is not None else record.style.margin_left,
            margin_right=spec.margin_right if spec.margin_right is not None else record.style.margin_right,
        )
        self.body[record.index] = record.render(new_style)
        record.style = new_style

    def _close_innermost_list(self) -> None:
        frame = self._lists.pop()
        items = [element("li", *children) for children in frame.items]
        start = str(frame.start) if frame.ordered and frame.start not in (None, 1) else None
        built = element("ol" if frame.ordered else "ul", *items, start=start)
        if self._lists and self._lists[-1].items:
            self._lists[-1].items[-1].append(built)
        elif self._lists:
            self._lists[-1].items.append([built])
        else:
            self.body.append(built)

    def _close_lists(self) -> None:
        while self._lists:
            self._close_innermost_list()

    def _close_quote(self) -> None:
        if not self._quote_lines:
            return
        lines = self._quote_lines
        self._quote_lines = []
        self.body.append(self._build_quote(lines, depth=1))
        self._last_stylable_block = None

    def _build_quote(self, lines: List[Tuple[int, str]], depth: int) -> Element:
        children: List[Node] = []
        paragraph: List[str] = []
        nested: List[Tuple[int, str]] = []

        def flush_paragraph() -> None:
            if paragraph:
                children.append(element("p", *self._process_inline(" ".join(paragraph), hyphenate=True)))
                paragraph.clear()

        def flush_nested() -> None:
            if nested:
                children.append(self._build_quote(list(nested), depth + 1))
                nested.clear()

        for line_depth, content in lines:
            if line_depth > depth:
                flush_paragraph()
                nested.append((line_depth, content))
                continue
            flush_nested()
            if content:
                paragraph.append(content)
            else:
                flush_paragraph()
        flush_paragraph()
        flush_nested()
        return element("blockquote", *children)

    # Inline markup -----------------------------------------------------
    def _process_inline(self, source: str, *, hyphenate: bool = False) -> List[Node]:
        nodes: List[Node] = []
        last = 0
        for match in INLINE_RE.finditer(source):
            if match.start() > last:
                nodes.append(self._text(source[last : match.start()], hyphenate))
            nodes.append(self._inline_match(match, hyphenate))
            last = match.end()
        if last < len(source):
            nodes.append(self._text(source[last:], hyphenate))
        return nodes

    def _inline_match(self, match: "re.Match[str]", hyphenate: bool) -> Node:
        groups = match.groupdict()
        if groups["code"] is not None:
            return element("code", groups["code_body"].strip())
        if groups["image_target"] is not None:
            url, title = _split_link_target(groups["image_target"])
            return element("img", src=url, alt=groups["image_alt"], title=title)
        if groups["link_target"] is not None:
            url, title = _split_link_target(groups["link_target"])
            return element("a", *self._process_inline(groups["link_text"], hyphenate=hyphenate), href=url, title=title)
        for name, tag in (
            ("strong_star", "strong"),
            ("strong_under", "strong"),
            ("strike", "del"),
            ("em_star", "em"),
            ("em_under", "em"),
        ):
            if groups[name] is not None:
                return element(tag, *self._process_inline(groups[name], hyphenate=hyphenate))
        return Text(match.group(0))

    def _text(self, value: str, hyphenate: bool) -> Text:
        if hyphenate and self.hyphenator is not None:
            value = HYPHENATE_WORD_RE.sub(self._hyphenate_word, value)
        return Text(value)

    def _hyphenate_word(self, match: "re.Match[str]") -> str:
        assert self.hyphenator is not None
        return self.hyphenator.inserted(match.group(0), hyphen=SOFT_HYPHEN)

    # Figlet headings ---------------------------------------------------
    def _render_figlet_heading(self, level: int, heading: str, style: BlockStyle) -> Optional[Element]:
        if not heading.strip():
            return None
        font_name = getattr(self.frontmatter, f"h{level}_font", "standard")
        justify = _figlet_justify(style.align)
        figlet = self._figlets.get((font_name, justify))
        if figlet is None:
            try:
                figlet = Figlet(font=font_name, width=self.figlet_width, justify=justify)
            except FontNotFound as exc:
                if self.frontmatter.figlet_fallback:
                    logger.warning("Figlet font %r not found; using a plain heading.", font_name)
                    return None
                raise ConfigurationError(f"Figlet font '{font_name}' was not found.") from exc
            self._figlets[(font_name, justify)] = figlet
        banner = "\n".join(line.rstrip() for line in figlet.renderText(heading).rstrip("\n").splitlines())
        return element(
            "pre",
            banner,
            class_="figlet",
            role="heading",
            aria_level=str(level),
            aria_label=heading,
            style=_css(style),
        )


def _css(style: BlockStyle) -> Optional[str]:
    declarations = []
    if style.align and style.align != "left":
        declarations.append(f"text-align: {style.align}")
    if style.margin_left:
        declarations.append(f"margin-left: {style.margin_left}em")
    if style.margin_right:
        declarations.append(f"margin-right: {style.margin_right}em")
    return "; ".join(declarations) or None


def _figlet_justify(align: str) -> str:
    if align in {"center", "right"}:
        return align
    return "left"


def _split_link_target(value: str) -> Tuple[str, Optional[str]]:
    value = value.strip()
    if " " not in value:
        return value, None
    url, remainder = value.split(" ", 1)
    remainder = remainder.strip()
    if len(remainder) >= 2 and remainder[0] == remainder[-1] and remainder[0] in {'"', "'"}:
        return url, remainder[1:-1]
    return url, remainder or None


def _html_converter_factory(*, title: str, frontmatter: FrontMatter, **options: Any) -> HtmlConverter:
    return HtmlConverter(title, frontmatter, figlet_width=int(options.get("figlet_width", 80)))


register_converter("html", _html_converter_factory)
