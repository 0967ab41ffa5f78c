"""Stack overlapping objects on top of each other."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.frames import GROUP
from plotgrammar.panel import PanelRanges
from plotgrammar.positions.base import POSITIONS, Position


@POSITIONS.add("stack")
class PositionStack(Position):
    """Stack groups sharing an x position; positive and negative values stack apart.

    The first group ends up on top unless ``reverse`` is set. ``vjust`` places
    ``y`` within each stacked interval (1 = top, 0 = bottom).
    """

    name = "stack"
    required_aes = ("x",)
    fill = False

    def __init__(self, vjust: float = 1.0, reverse: bool = False) -> None:
        self.vjust = vjust
        self.reverse = reverse

    def setup_params(self, data: pd.DataFrame) -> dict[str, Any]:
        if "ymax" in data.columns:
            var = "ymax"
        elif "y" in data.columns:
            var = "y"
        else:
            raise ConfigValidationError(f"{self.label} requires either a y or a ymax aesthetic.")
        return {"var": var, "vjust": self.vjust, "reverse": self.reverse, "fill": self.fill}

    def setup_data(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:
        data = super().setup_data(data, params)
        if params["var"] == "y" and "ymax" not in data.columns:
            data = data.assign(ymin=0.0, ymax=data["y"].to_numpy(dtype=float))
        elif "ymin" not in data.columns:
            data = data.assign(ymin=0.0)
        return data

    def compute_panel(self, data: pd.DataFrame, params: dict[str, Any], scales: PanelRanges) -> pd.DataFrame:
        result = data.copy()
        heights = (data["ymax"] - data["ymin"]).to_numpy(dtype=float)
        order = data[GROUP].to_numpy() if GROUP in data.columns else np.zeros(len(data))
        ymin = np.zeros(len(data))
        ymax = np.zeros(len(data))
        for _, rows in data.groupby("x", sort=False).indices.items():
            # higher group ids go to the bottom so the first group is drawn on top
            ranked = rows[np.argsort(order[rows], kind="stable")]
            if not params["reverse"]:
                ranked = ranked[::-1]
            for negative in (False, True):
                selected = [row for row in ranked if (heights[row] < 0) == negative]
                values = heights[selected]
                tops = np.cumsum(values)
                bottoms = tops - values
                if params["fill"] and len(selected):
                    total = abs(values.sum())
                    if total:
                        tops, bottoms = tops / total, bottoms / total
                ymax[selected] = tops
                ymin[selected] = bottoms
        result["ymin"] = np.minimum(ymin, ymax)
        result["ymax"] = np.maximum(ymin, ymax)
        if "y" in result.columns:
            result["y"] = ymin + params["vjust"] * (ymax - ymin)
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}(vjust={self.vjust!r}, reverse={self.reverse!r})"


@POSITIONS.add("fill")
class PositionFill(PositionStack):
    """Stack and rescale each stack to unit height."""

    name = "fill"
    fill = True
