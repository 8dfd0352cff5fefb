"""Convert a lightweight markup language into HTML pages."""

from .errors import ConfigurationError, Md2HtmlError, NoResponseError, ParseError
from .pipeline import convert, parse, process, render

__all__ = [
    "ConfigurationError",
    "Md2HtmlError",
    "NoResponseError",
    "ParseError",
    "convert",
    "parse",
    "process",
    "render",
]
