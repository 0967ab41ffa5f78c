"""Drawable records produced by geoms and consumed by rendering backends."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np


class Drawable:
    """Base class of every drawable record."""

    def walk(self) -> Iterator[Primitive]:
        """Yield the primitives contained in this drawable, depth first."""
        return iter(())

    @property
    def is_null(self) -> bool:
        """Whether this drawable draws nothing."""
        return False


@dataclass(frozen=True)
class NullDrawable(Drawable):
    """Placeholder keeping a panel's slot when a layer has nothing to draw."""

    @property
    def is_null(self) -> bool:
        return True


@dataclass(frozen=True)
class Primitive(Drawable):
    """One graphical primitive in [0, 1] panel coordinates.

    ``kind`` is one of ``points``, ``polyline``, ``rects``, ``text``, ``curves``
    or a legend key kind. ``coords`` holds equal-length arrays and ``style``
    holds per-element arrays or scalars (colour, size, alpha, ...).
    """

    kind: str
    coords: Mapping[str, np.ndarray] = field(default_factory=dict)
    style: Mapping[str, Any] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)

    def walk(self) -> Iterator[Primitive]:
        yield self

    def __len__(self) -> int:
        lengths = [len(values) for values in self.coords.values()]
        return max(lengths) if lengths else 0


@dataclass(frozen=True)
class CompositeDrawable(Drawable):
    """An ordered collection of drawables, e.g. one child per group."""

    children: tuple[Drawable, ...] = ()
    name: str = ""

    def walk(self) -> Iterator[Primitive]:
        for child in self.children:
            yield from child.walk()

    @property
    def is_null(self) -> bool:
        return all(child.is_null for child in self.children)


__all__ = ["CompositeDrawable", "Drawable", "NullDrawable", "Primitive"]
