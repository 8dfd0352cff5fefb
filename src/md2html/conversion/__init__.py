"""Conversion pipeline helpers."""

from .core import (
    Converter,
    ConverterFactory,
    Parser,
    ParserFactory,
    parse_frontmatter,
    run_pipeline,
    split_lines,
)

__all__ = [
    "Converter",
    "ConverterFactory",
    "Parser",
    "ParserFactory",
    "parse_frontmatter",
    "run_pipeline",
    "split_lines",
]
