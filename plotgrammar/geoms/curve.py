"""Curved segments between (x, y) and (xend, yend)."""

from __future__ import annotations

import warnings
from typing import Any

import pandas as pd

from plotgrammar.coords import Coord
from plotgrammar.drawables import Drawable, NullDrawable, Primitive
from plotgrammar.exceptions import NonLinearCoordWarning
from plotgrammar.frames import remove_missing
from plotgrammar.geoms.base import GEOMS, Geom, column_or_scalar
from plotgrammar.geoms.keys import draw_key_path
from plotgrammar.panel import PanelRanges

CURVE_STYLE = ("colour", "size", "linetype", "alpha")


@GEOMS.add("curve")
class GeomCurve(Geom):
    """Curves bent by ``curvature`` (0 is straight, negative bends left).

    ``angle`` skews the control points and ``ncp`` sets how many control points
    the renderer may use to approximate the curve.
    """

    name = "curve"
    required_aes = ("x", "y", "xend", "yend")
    default_aes = {"colour": "black", "size": 0.5, "linetype": 1, "alpha": None}
    draw_key = staticmethod(draw_key_path)

    def draw_panel(  # type: ignore[override]
        self,
        data: pd.DataFrame,
        panel_ranges: PanelRanges,
        coord: Coord,
        curvature: float = 0.5,
        angle: float = 90,
        ncp: int = 5,
        arrow: Any = None,
        lineend: str = "butt",
        na_rm: bool = False,
    ) -> Drawable:
        data = remove_missing(
            data,
            ("x", "y", "xend", "yend", "linetype", "size", "shape"),
            na_rm=na_rm,
            name=self.label,
        )
        if data.empty:
            return NullDrawable()
        if not coord.is_linear():
            warnings.warn(f"{self.label} is not implemented for non-linear coordinates", NonLinearCoordWarning, stacklevel=2)
        return Primitive(
            "curves",
            coords={name: data[name].to_numpy() for name in ("x", "y", "xend", "yend")},
            style={name: column_or_scalar(data, name) for name in CURVE_STYLE if name in data.columns},
            params={"curvature": curvature, "angle": angle, "ncp": ncp, "arrow": arrow, "lineend": lineend},
        )
