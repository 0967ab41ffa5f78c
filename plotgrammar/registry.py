"""Name-based registries for geoms, stats and positions."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from plotgrammar.exceptions import UnknownExtension

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_name(name: str, category: str) -> str:
    """Canonical registry key: ``GeomPoint``, ``geom_point`` and ``point`` all map to ``point``."""
    snake = _CAMEL_BOUNDARY.sub("_", name.strip()).lower().replace("-", "_")
    prefix = f"{category}_"
    if snake.startswith(prefix):
        snake = snake[len(prefix) :]
    return snake


class Registry(Generic[T]):
    """Mapping from extension name to capability instance for one category."""

    def __init__(self, category: str, base: type[T], validate: Callable[[T], None] | None = None) -> None:
        self.category = category
        self.base = base
        self._validate = validate
        self._entries: dict[str, T] = {}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name, self.category) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def register(self, name: str, capability: T | type[T]) -> T:
        """Register ``capability`` (an instance or a class to instantiate) under ``name``."""
        instance = capability() if isinstance(capability, type) else capability
        if not isinstance(instance, self.base):
            raise TypeError(f"{self.category} '{name}' must be a {self.base.__name__}, got {type(instance).__name__}")
        if self._validate is not None:
            self._validate(instance)
        key = normalize_name(name, self.category)
        if key in self._entries:
            LOGGER.debug("[registry] replacing %s '%s'", self.category, key)
        self._entries[key] = instance
        return instance

    def add(self, name: str) -> Callable[[type[T]], type[T]]:
        """Class decorator registering an instance of the decorated class under ``name``."""

        def decorator(cls: type[T]) -> type[T]:
            self.register(name, cls)
            return cls

        return decorator

    def get(self, name: str) -> T:
        """Return the capability registered under ``name``."""
        try:
            return self._entries[normalize_name(name, self.category)]
        except KeyError as exc:
            raise UnknownExtension(self.category, name) from exc

    def resolve(self, value: str | T | type[T]) -> T:
        """Resolve a name, capability class or capability instance to an instance."""
        if isinstance(value, str):
            return self.get(value)
        if isinstance(value, type) and issubclass(value, self.base):  # type: ignore[arg-type]
            return value()
        if isinstance(value, self.base):
            return value
        raise UnknownExtension(self.category, repr(value))

    def names(self) -> list[str]:
        """Registered names in sorted order."""
        return sorted(self._entries)


__all__ = ["Registry", "normalize_name"]
