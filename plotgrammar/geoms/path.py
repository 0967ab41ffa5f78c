"""Connected observations: paths in data order and lines in x order."""

from __future__ import annotations

from typing import Any

import pandas as pd

from plotgrammar.coords import Coord
from plotgrammar.drawables import Drawable, NullDrawable, Primitive
from plotgrammar.frames import GROUP, PANEL
from plotgrammar.geoms.base import GEOMS, Geom, first_value
from plotgrammar.geoms.keys import draw_key_path
from plotgrammar.panel import PanelRanges

LINE_STYLE = ("colour", "size", "linetype", "alpha")


@GEOMS.add("path")
class GeomPath(Geom):
    """One polyline per group, connecting rows in the order they appear."""

    name = "path"
    required_aes = ("x", "y")
    default_aes = {"colour": "black", "size": 0.5, "linetype": 1, "alpha": None}
    draw_key = staticmethod(draw_key_path)

    def draw_group(  # type: ignore[override]
        self,
        data: pd.DataFrame,
        panel_ranges: PanelRanges,
        coord: Coord,
        lineend: str = "butt",
        linejoin: str = "round",
        arrow: Any = None,
    ) -> Drawable:
        if len(data) < 2:
            return NullDrawable()
        return Primitive(
            "polyline",
            coords={"x": data["x"].to_numpy(), "y": data["y"].to_numpy()},
            style={name: first_value(data, name) for name in LINE_STYLE if name in data.columns},
            params={"lineend": lineend, "linejoin": linejoin, "arrow": arrow},
        )


@GEOMS.add("line")
class GeomLine(GeomPath):
    """A path whose rows are ordered by x within each group."""

    name = "line"

    def setup_data(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:
        keys = [column for column in (PANEL, GROUP, "x") if column in data.columns]
        return data.sort_values(keys, kind="stable").reset_index(drop=True)
