"""The immutable plot handed to :func:`plotgrammar.build.build`."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from plotgrammar.aesthetics import Aes
from plotgrammar.coords import Coord, CoordCartesian
from plotgrammar.exceptions import InvalidMapping
from plotgrammar.facets import Facet, FacetNull
from plotgrammar.frames import fortify
from plotgrammar.layer import Layer
from plotgrammar.scales import Scale
from plotgrammar.themes import Theme, add_theme, theme_default


@dataclass(frozen=True, eq=False)
class Plot:  # pylint: disable=too-many-instance-attributes
    """Default data and mapping plus the layers, facet, coord, scales and theme of one plot.

    ``env`` is the fallback scope for aesthetic expressions that name neither a
    column nor a built-in function.
    """

    data: pd.DataFrame | None = None
    mapping: Aes = field(default_factory=Aes)
    layers: tuple[Layer, ...] = ()
    facet: Facet = field(default_factory=FacetNull)
    coord: Coord = field(default_factory=CoordCartesian)
    scales: tuple[Scale, ...] = ()
    env: Mapping[str, Any] = field(default_factory=dict)
    theme: Theme = field(default_factory=theme_default)

    def __post_init__(self) -> None:
        if not isinstance(self.mapping, Aes):
            raise InvalidMapping("Mapping must be created by `aes()`")
        object.__setattr__(self, "data", fortify(self.data))
        object.__setattr__(self, "layers", tuple(self.layers))
        object.__setattr__(self, "scales", tuple(self.scales))

    def add_layer(self, *layers: Layer) -> Plot:
        """A new plot with ``layers`` appended."""
        return dataclasses.replace(self, layers=(*self.layers, *layers))

    def add_scale(self, *scales: Scale) -> Plot:
        """A new plot with ``scales`` added; later scales replace earlier ones for an aesthetic."""
        return dataclasses.replace(self, scales=(*self.scales, *scales))

    def with_theme(self, other: Theme) -> Plot:
        """A new plot whose theme is the current theme plus ``other``."""
        return dataclasses.replace(self, theme=add_theme(self.theme, other))

    def with_facet(self, facet: Facet) -> Plot:
        """A new plot using ``facet``."""
        return dataclasses.replace(self, facet=facet)


__all__ = ["Plot"]
