from __future__ import annotations

from typing import Optional


class Md2HtmlError(Exception):
    """Base class for errors raised by md2html."""


class ParseError(Md2HtmlError, ValueError):
    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"{self.line_number}: {self.message}"


class ConfigurationError(Md2HtmlError, ValueError):
    """A frontmatter value could not be honoured."""


class NoResponseError(Md2HtmlError, EOFError):
    """The console closed while a confirmation was pending."""
