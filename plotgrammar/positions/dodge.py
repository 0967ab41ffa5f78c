"""Dodge overlapping objects side to side."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from plotgrammar.frames import GROUP
from plotgrammar.panel import PanelRanges
from plotgrammar.positions.base import POSITIONS, Position


@POSITIONS.add("dodge")
class PositionDodge(Position):
    """Place the groups sharing an x slot next to each other within ``width``."""

    name = "dodge"
    required_aes = ("x",)

    def __init__(self, width: float | None = None) -> None:
        self.width = width

    def setup_params(self, data: pd.DataFrame) -> dict[str, Any]:
        if self.width is not None:
            width = self.width
        elif "xmin" in data.columns and "xmax" in data.columns:
            width = float((data["xmax"] - data["xmin"]).max())
        elif "width" in data.columns:
            width = float(data["width"].max())
        else:
            width = 0.9
        groups = data.groupby([col for col in ("PANEL", "x") if col in data.columns])[GROUP].nunique()
        return {"width": width, "n": int(groups.max()) if len(groups) else 1}

    def setup_data(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:
        data = super().setup_data(data, params)
        if "xmin" not in data.columns or "xmax" not in data.columns:
            x = data["x"].to_numpy(dtype=float)
            data = data.assign(xmin=x - params["width"] / 2, xmax=x + params["width"] / 2)
        return data

    def compute_panel(self, data: pd.DataFrame, params: dict[str, Any], scales: PanelRanges) -> pd.DataFrame:
        result = data.copy()
        n = params["n"]
        xmin = data["xmin"].to_numpy(dtype=float).copy()
        xmax = data["xmax"].to_numpy(dtype=float).copy()
        groups = data[GROUP].to_numpy()
        for _, rows in data.groupby("xmin", sort=False).indices.items():
            slot_groups = np.unique(groups[rows])
            slot = {group: index for index, group in enumerate(slot_groups)}
            for row in rows:
                span = (xmax[row] - xmin[row]) / n
                xmin[row] = xmin[row] + slot[groups[row]] * span
                xmax[row] = xmin[row] + span
        result["xmin"] = xmin
        result["xmax"] = xmax
        result["x"] = (xmin + xmax) / 2
        return result

    def __repr__(self) -> str:
        return f"PositionDodge(width={self.width!r})"
