"""The pure markup-to-HTML transformation.

``process(title, source)`` is ``render(convert(title, parse(source)))``. None
of these functions accepts a stream, a console or a path, and none performs
I/O, so every step can be exercised with in-memory strings.
"""
from __future__ import annotations

from . import parser as _parser  # noqa: F401  # registers the "markdown" parser
from .conversion import parse_frontmatter, run_pipeline, split_lines
from .html_builder import Html
from .html_builder import render as render_html
from .models import BlockStyle, Document
from .plugins import get_converter_factory, get_parser_factory
from .renderers import html as _html_renderer  # noqa: F401  # registers the "html" converter


DEFAULT_PARSER = "markdown"
DEFAULT_CONVERTER = "html"


def parse(source: str, *, parser_name: str = DEFAULT_PARSER) -> Document:
    """Parse ``source`` into a :class:`Document`.

    Raises :class:`~md2html.errors.ParseError` for malformed markup.
    """
    lines = split_lines(source)
    frontmatter, body = parse_frontmatter(lines)
    parser = get_parser_factory(parser_name)(
        base_style=BlockStyle(),
        line_offset=len(lines) - len(body),
    )
    return Document(frontmatter=frontmatter, events=tuple(parser.parse(body)))


def convert(title: str, document: Document, *, converter_name: str = DEFAULT_CONVERTER) -> Html:
    converter = get_converter_factory(converter_name)(title=title, frontmatter=document.frontmatter)
    return run_pipeline(document.events, converter=converter)


def render(html: Html) -> str:
    return render_html(html)


def process(title: str, source: str) -> str:
    return render(convert(title, parse(source)))
