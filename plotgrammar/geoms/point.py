"""Points, the geom of scatterplots."""

from __future__ import annotations

import pandas as pd

from plotgrammar.coords import Coord
from plotgrammar.drawables import Drawable, Primitive
from plotgrammar.geoms.base import GEOMS, Geom, column_or_scalar
from plotgrammar.geoms.keys import draw_key_point
from plotgrammar.panel import PanelRanges

POINT_STYLE = ("colour", "fill", "size", "shape", "alpha", "stroke")


@GEOMS.add("point")
class GeomPoint(Geom):
    """One marker per row."""

    name = "point"
    required_aes = ("x", "y")
    non_missing_aes = ("size", "shape", "colour")
    default_aes = {"shape": 19, "colour": "black", "size": 1.5, "fill": None, "alpha": None, "stroke": 0.5}
    draw_key = staticmethod(draw_key_point)

    def draw_panel(  # type: ignore[override]
        self, data: pd.DataFrame, panel_ranges: PanelRanges, coord: Coord, na_rm: bool = False
    ) -> Drawable:
        return Primitive(
            "points",
            coords={"x": data["x"].to_numpy(), "y": data["y"].to_numpy()},
            style={name: column_or_scalar(data, name) for name in POINT_STYLE if name in data.columns},
        )
