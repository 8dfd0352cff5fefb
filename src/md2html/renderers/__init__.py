"""Bundled converter implementations."""

from .html import HtmlConverter

__all__ = ["HtmlConverter"]
