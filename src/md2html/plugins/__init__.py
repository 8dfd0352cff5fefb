from __future__ import annotations

from typing import Any

from ..conversion.core import ConverterFactory, ParserFactory
from .registry import PluginRegistry


parser_plugins = PluginRegistry[ParserFactory]("parser")
converter_plugins = PluginRegistry[ConverterFactory[Any]]("converter")


def register_parser(name: str, factory: ParserFactory) -> None:
    parser_plugins.register(name, factory)


def register_converter(name: str, factory: ConverterFactory[Any]) -> None:
    converter_plugins.register(name, factory)


def get_parser_factory(name: str) -> ParserFactory:
    return parser_plugins.get(name)


def get_converter_factory(name: str) -> ConverterFactory[Any]:
    return converter_plugins.get(name)


def available_parsers() -> list[str]:
    return parser_plugins.names()


def available_converters() -> list[str]:
    return converter_plugins.names()


__all__ = [
    "PluginRegistry",
    "available_converters",
    "available_parsers",
    "converter_plugins",
    "get_converter_factory",
    "get_parser_factory",
    "parser_plugins",
    "register_converter",
    "register_parser",
]
