"""Text labels."""

from __future__ import annotations

import pandas as pd

from plotgrammar.coords import Coord
from plotgrammar.drawables import Drawable, Primitive
from plotgrammar.geoms.base import GEOMS, Geom, column_or_scalar
from plotgrammar.geoms.keys import draw_key_text
from plotgrammar.panel import PanelRanges

TEXT_STYLE = ("label", "colour", "size", "angle", "hjust", "vjust", "alpha", "family", "fontface")


@GEOMS.add("text")
class GeomText(Geom):
    """A text label at each (x, y)."""

    name = "text"
    required_aes = ("x", "y", "label")
    default_aes = {
        "colour": "black",
        "size": 3.88,
        "angle": 0,
        "hjust": 0.5,
        "vjust": 0.5,
        "alpha": None,
        "family": "",
        "fontface": 1,
    }
    draw_key = staticmethod(draw_key_text)

    def draw_panel(  # type: ignore[override]
        self, data: pd.DataFrame, panel_ranges: PanelRanges, coord: Coord, check_overlap: bool = False
    ) -> Drawable:
        if check_overlap:
            data = data.drop_duplicates(subset=["x", "y"], keep="first")
        return Primitive(
            "text",
            coords={"x": data["x"].to_numpy(), "y": data["y"].to_numpy()},
            style={name: column_or_scalar(data, name) for name in TEXT_STYLE if name in data.columns},
            params={"check_overlap": check_overlap},
        )
