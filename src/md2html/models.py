from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union


class BlockKind(Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    CODE_BLOCK = "code_block"
    BLOCKQUOTE = "blockquote"
    LIST_ITEM = "list_item"
    HORIZONTAL_RULE = "horizontal_rule"
    BLANK_LINE = "blank_line"


@dataclass
class BlockStyle:
    align: str = "left"
    margin_left: int = 0
    margin_right: int = 0


@dataclass
class StyleSpec:
    align: Optional[str] = None
    margin_left: Optional[int] = None
    margin_right: Optional[int] = None


@dataclass
class FrontMatter:
    lang: str = "en"
    stylesheet: Optional[str] = None
    hyphenate: bool = False
    hyphen_lang: str = "en_US"
    figlet_headings: bool = False
    h1_font: str = "standard"
    h2_font: str = "standard"
    h3_font: str = "standard"
    figlet_fallback: bool = False


@dataclass
class ParagraphPayload:
    text: str


@dataclass
class HeadingPayload:
    level: int
    text: str


@dataclass
class CodeBlockPayload:
    lines: List[str]
    info: str = ""


@dataclass
class BlockQuotePayload:
    depth: int
    text: str


@dataclass
class ListItemPayload:
    indent: str
    marker: str
    text: str
    ordered: bool


@dataclass
class BlockEvent:
    kind: BlockKind
    payload: object
    style: BlockStyle


@dataclass
class StyleUpdateEvent:
    spec: StyleSpec


Event = Union[BlockEvent, StyleUpdateEvent]


@dataclass(frozen=True)
class Document:
    """Parsed markup: the document's frontmatter and its block events in source order."""

    frontmatter: FrontMatter = field(default_factory=FrontMatter)
    events: Tuple[Event, ...] = ()
