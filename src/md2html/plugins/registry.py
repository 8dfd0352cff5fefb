from __future__ import annotations

from typing import Dict, Generic, List, TypeVar


T = TypeVar("T")


class PluginRegistry(Generic[T]):
    """Named factories of one kind (parsers or converters)."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._factories: Dict[str, T] = {}

    def register(self, name: str, factory: T) -> None:
        if name in self._factories:
            raise ValueError(f"{self.kind.capitalize()} '{name}' is already registered.")
        self._factories[name] = factory

    def get(self, name: str) -> T:
        try:
            return self._factories[name]
        except KeyError as exc:
            known = ", ".join(self.names()) or "none"
            raise KeyError(f"{self.kind.capitalize()} '{name}' is not registered (known: {known}).") from exc

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def names(self) -> List[str]:
        return sorted(self._factories.keys())
