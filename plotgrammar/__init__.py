"""plotgrammar: a layered grammar-of-graphics build pipeline."""

from plotgrammar import geoms, positions, stats
from plotgrammar.aesthetics import Aes, aes, after_stat, const
from plotgrammar.build import BuiltPlot, build, draw
from plotgrammar.coords import Coord, CoordCartesian
from plotgrammar.facets import Facet, FacetNull, FacetWrap
from plotgrammar.layer import Layer, layer
from plotgrammar.logger import PLOTGRAMMAR_LOGGER
from plotgrammar.plot import Plot
from plotgrammar.scales import ContinuousScale, DiscreteScale
from plotgrammar.themes import Theme, theme, theme_default

__all__ = [
    "PLOTGRAMMAR_LOGGER",
    "Aes",
    "BuiltPlot",
    "ContinuousScale",
    "Coord",
    "CoordCartesian",
    "DiscreteScale",
    "Facet",
    "FacetNull",
    "FacetWrap",
    "Layer",
    "Plot",
    "Theme",
    "aes",
    "after_stat",
    "build",
    "const",
    "draw",
    "geoms",
    "layer",
    "positions",
    "stats",
    "theme",
    "theme_default",
]
