"""A small immutable HTML tree and its text renderer.

Build nodes with :func:`text` and :func:`element`, wrap them into a page with
:func:`page`, and turn the page into text with :func:`render`. Nothing here
touches the filesystem or the console.
"""
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union


VOID_ELEMENTS = frozenset({"br", "hr", "img", "link", "meta"})
BLOCK_ELEMENTS = frozenset(
    {
        "blockquote",
        "div",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "li",
        "ol",
        "p",
        "pre",
        "ul",
    }
)
INDENT = "  "


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Element:
    tag: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    children: Tuple["Node", ...] = ()

    @property
    def is_block(self) -> bool:
        return self.tag in BLOCK_ELEMENTS


Node = Union[Text, Element]


@dataclass(frozen=True)
class Html:
    title: str
    body: Tuple[Node, ...] = ()
    lang: str = "en"
    stylesheet: Optional[str] = None


def element(tag: str, *children: Union[Node, str], **attributes: Optional[str]) -> Element:
    """Create an element; ``class_`` style keywords lose their trailing underscore.

    Attributes whose value is ``None`` are left out so callers can pass
    optional values straight through.
    """
    attrs = tuple(
        (name.rstrip("_").replace("_", "-"), value)
        for name, value in attributes.items()
        if value is not None
    )
    nodes = tuple(Text(child) if isinstance(child, str) else child for child in children)
    return Element(tag=tag, attributes=attrs, children=nodes)


def page(title: str, body: Iterable[Node], *, lang: str = "en", stylesheet: Optional[str] = None) -> Html:
    return Html(title=title, body=tuple(body), lang=lang, stylesheet=stylesheet)


def text_content(node: Node) -> str:
    if isinstance(node, Text):
        return node.value
    return "".join(text_content(child) for child in node.children)


def escape_text(value: str) -> str:
    return html.escape(value, quote=False)


def escape_attribute(value: str) -> str:
    return html.escape(value, quote=True)


def render(document: Html) -> str:
    lines: List[str] = [
        "<!DOCTYPE html>",
        f'<html lang="{escape_attribute(document.lang)}">',
        "<head>",
        f"{INDENT}<meta charset=\"utf-8\">",
        f"{INDENT}<title>{escape_text(document.title)}</title>",
    ]
    if document.stylesheet:
        lines.append(f'{INDENT}<link rel="stylesheet" href="{escape_attribute(document.stylesheet)}">')
    lines.extend(["</head>", "<body>"])
    for node in document.body:
        lines.extend(_render_block(node, depth=1))
    lines.extend(["</body>", "</html>"])
    return "\n".join(lines) + "\n"


def _open_tag(node: Element) -> str:
    attrs = "".join(f' {name}="{escape_attribute(value)}"' for name, value in node.attributes)
    return f"<{node.tag}{attrs}>"


def _render_inline(node: Node) -> str:
    if isinstance(node, Text):
        return escape_text(node.value)
    if node.tag in VOID_ELEMENTS:
        return _open_tag(node)
    inner = "".join(_render_inline(child) for child in node.children)
    return f"{_open_tag(node)}{inner}</{node.tag}>"


def _render_block(node: Node, depth: int) -> List[str]:
    prefix = INDENT * depth
    if isinstance(node, Text) or not any(
        isinstance(child, Element) and child.is_block for child in node.children
    ):
        return [prefix + _render_inline(node)]

    # Mixed content: leading inline children share the opening line, blocks
    # go one per line beneath it.
    head = [_open_tag(node)]
    lines: List[str] = []
    children = list(node.children)
    while children and not (isinstance(children[0], Element) and children[0].is_block):
        head.append(_render_inline(children.pop(0)))
    lines.append(prefix + "".join(head))
    for child in children:
        lines.extend(_render_block(child, depth + 1))
    lines.append(f"{prefix}</{node.tag}>")
    return lines
