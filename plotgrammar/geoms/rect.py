"""Rectangles and bars."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from plotgrammar.aesthetics import check_required_aesthetics
from plotgrammar.coords import Coord
from plotgrammar.drawables import Drawable, Primitive
from plotgrammar.frames import resolution
from plotgrammar.geoms.base import GEOMS, Geom, column_or_scalar
from plotgrammar.geoms.keys import draw_key_rect
from plotgrammar.panel import PanelRanges

RECT_STYLE = ("colour", "fill", "size", "linetype", "alpha")


@GEOMS.add("rect")
class GeomRect(Geom):
    """Axis-aligned rectangles given by their corners."""

    name = "rect"
    required_aes = ("xmin", "xmax", "ymin", "ymax")
    default_aes = {"colour": None, "fill": "grey35", "size": 0.5, "linetype": 1, "alpha": None}
    draw_key = staticmethod(draw_key_rect)

    def draw_panel(  # type: ignore[override]
        self, data: pd.DataFrame, panel_ranges: PanelRanges, coord: Coord, linejoin: str = "mitre"
    ) -> Drawable:
        return Primitive(
            "rects",
            coords={name: data[name].to_numpy() for name in ("xmin", "xmax", "ymin", "ymax")},
            style={name: column_or_scalar(data, name) for name in RECT_STYLE if name in data.columns},
            params={"linejoin": linejoin},
        )


@GEOMS.add("bar")
class GeomBar(GeomRect):
    """Bars from the x axis to y; ``setup_data`` expands x, y and width to corners."""

    name = "bar"
    required_aes = ("x", "y")
    extra_params = ("na_rm", "width")

    def setup_data(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:
        check_required_aesthetics(self.required_aes, [*data.columns, *params], self.label)
        x = data["x"].to_numpy(dtype=float)
        y = data["y"].to_numpy(dtype=float)
        if "width" in data.columns:
            width = data["width"].to_numpy(dtype=float)
        elif params.get("width") is not None:
            width = np.full(len(data), float(params["width"]))
        else:
            width = np.full(len(data), resolution(x, zero=False) * 0.9)
        result = data.drop(columns=["width"], errors="ignore")
        return result.assign(
            ymin=np.minimum(y, 0.0),
            ymax=np.maximum(y, 0.0),
            xmin=x - width / 2,
            xmax=x + width / 2,
        )
