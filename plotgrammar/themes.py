"""Themes: non-data appearance settings with complete/incomplete merge rules.

A *complete* theme defines every element; an *incomplete* theme holds partial
overrides. Adding themes follows these rules:

* incomplete + incomplete: union of elements, the right operand wins;
* incomplete + complete: the complete theme, with the incomplete operand's
  non-null elements laid over it;
* complete + incomplete: the left theme with the right operand's non-null
  elements laid over it (still complete);
* complete + complete: the right operand replaces the left.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from plotgrammar.exceptions import ConfigValidationError

DEFAULT_ELEMENTS: dict[str, Any] = {
    "background": "#EBEBEB",
    "panel_background": "#EBEBEB",
    "grid_colour": "#FFFFFF",
    "font_family": "sans-serif",
    "font_size": 11,
    "title": None,
    "width": 700,
    "height": 500,
    "legend_position": "right",
}


@dataclass(frozen=True)
class Theme:
    """Immutable set of theme elements."""

    elements: Mapping[str, Any] = field(default_factory=dict)
    complete: bool = False

    def __post_init__(self) -> None:
        unknown = sorted(set(self.elements) - set(DEFAULT_ELEMENTS))
        if unknown:
            raise ConfigValidationError(f"Unknown theme elements: {', '.join(unknown)}")
        object.__setattr__(self, "elements", MappingProxyType(dict(self.elements)))

    def get(self, name: str, default: Any = None) -> Any:
        """Element value, or ``default`` when unset."""
        value = self.elements.get(name)
        return default if value is None else value

    def __add__(self, other: Theme) -> Theme:
        return add_theme(self, other)


def theme(**elements: Any) -> Theme:
    """An incomplete theme overriding ``elements``."""
    return Theme(elements=elements, complete=False)


def theme_default(**overrides: Any) -> Theme:
    """The complete default theme."""
    return Theme(elements={**DEFAULT_ELEMENTS, **overrides}, complete=True)


def _overlay(base: Mapping[str, Any], top: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    merged.update({name: value for name, value in top.items() if value is not None})
    return merged


def add_theme(left: Theme, right: Theme) -> Theme:
    """Combine two themes according to the module-level merge rules."""
    if not isinstance(right, Theme):
        raise ConfigValidationError(f"Can't add a {type(right).__name__} to a theme")
    if right.complete and left.complete:
        return right
    if right.complete:
        return Theme(elements=_overlay(right.elements, left.elements), complete=True)
    if left.complete:
        return Theme(elements=_overlay(left.elements, right.elements), complete=True)
    return Theme(elements={**left.elements, **right.elements}, complete=False)


__all__ = ["DEFAULT_ELEMENTS", "Theme", "add_theme", "theme", "theme_default"]
