from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple, TypeVar

from ..models import BlockStyle, Event, FrontMatter


FRONTMATTER_PATTERN = re.compile(r"^---\s*$")

ConverterOutput = TypeVar("ConverterOutput", covariant=True)


class Parser(Protocol):
    def parse(self, lines: Iterable[str]) -> Iterator[Event]:
        ...


class Converter(Protocol[ConverterOutput]):
    def handle_event(self, event: Event) -> None:
        ...

    def finalize(self) -> ConverterOutput:
        ...


class ParserFactory(Protocol):
    def __call__(self, *, base_style: BlockStyle, **kwargs: Any) -> Parser:
        ...


class ConverterFactory(Protocol[ConverterOutput]):
    def __call__(self, *, title: str, frontmatter: FrontMatter, **kwargs: Any) -> Converter[ConverterOutput]:
        ...


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in {"true", "yes", "1", "on"}:
        return True
    if lowered in {"false", "no", "0", "off"}:
        return False
    return default


def _parse_str(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    stripped = value.strip().strip("\"'").strip()
    return stripped or default


def split_lines(text: str) -> List[str]:
    return text.splitlines(keepends=True)


def parse_frontmatter(lines: List[str]) -> Tuple[FrontMatter, List[str]]:
    """Split a leading ``---`` block of ``key: value`` pairs off ``lines``.

    An opening delimiter without a closing one is not frontmatter; the lines
    are returned untouched with the default configuration.
    """
    if not lines or not FRONTMATTER_PATTERN.match(lines[0]):
        return FrontMatter(), lines
    frontmatter: Dict[str, str] = {}
    idx = 1
    while idx < len(lines):
        if FRONTMATTER_PATTERN.match(lines[idx]):
            break
        if ":" in lines[idx]:
            key, value = lines[idx].split(":", 1)
            frontmatter[key.strip().lower()] = value.strip()
        idx += 1
    if idx >= len(lines):
        return FrontMatter(), lines
    remaining = lines[idx + 1 :]
    stylesheet = frontmatter.get("stylesheet")
    fm = FrontMatter(
        lang=_parse_str(frontmatter.get("lang"), "en"),
        stylesheet=_parse_str(stylesheet, "") or None,
        hyphenate=_parse_bool(frontmatter.get("hyphenate"), False),
        hyphen_lang=_parse_str(frontmatter.get("hyphen_lang"), "en_US"),
        figlet_headings=_parse_bool(frontmatter.get("figlet_headings"), False),
        h1_font=_parse_str(frontmatter.get("h1_font"), "standard"),
        h2_font=_parse_str(frontmatter.get("h2_font"), "standard"),
        h3_font=_parse_str(frontmatter.get("h3_font"), "standard"),
        figlet_fallback=_parse_bool(frontmatter.get("figlet_fallback"), False),
    )
    return fm, remaining


def run_pipeline(events: Iterable[Event], *, converter: Converter[ConverterOutput]) -> ConverterOutput:
    for event in events:
        converter.handle_event(event)
    return converter.finalize()
