"""Geoms; importing this package registers the built-in ones."""

from plotgrammar.geoms.base import GEOMS, Geom
from plotgrammar.geoms.curve import GeomCurve
from plotgrammar.geoms.path import GeomLine, GeomPath
from plotgrammar.geoms.point import GeomPoint
from plotgrammar.geoms.rect import GeomBar, GeomRect
from plotgrammar.geoms.text import GeomText

__all__ = ["GEOMS", "Geom", "GeomBar", "GeomCurve", "GeomLine", "GeomPath", "GeomPoint", "GeomRect", "GeomText"]
