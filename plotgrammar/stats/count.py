"""Count the rows at each distinct x position."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from plotgrammar.aesthetics import aes
from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.frames import resolution
from plotgrammar.panel import PanelRanges
from plotgrammar.stats.base import STATS, Stat


@STATS.add("count")
class StatCount(Stat):
    """Number of cases at each x, weighted by the ``weight`` aesthetic when present.

    Produces ``count``, ``prop`` (share of the group total) and ``width``.
    """

    name = "count"
    required_aes = ("x",)
    default_aes = aes(y="after_stat(count)")

    def setup_params(self, data: pd.DataFrame, params: dict[str, Any]) -> dict[str, Any]:
        if "y" in data.columns:
            raise ConfigValidationError(f"{self.label} must not be used with a y aesthetic.")
        return dict(params)

    def compute_group(  # type: ignore[override]
        self, data: pd.DataFrame, scales: PanelRanges, width: float | None = None
    ) -> pd.DataFrame:
        x = data["x"].to_numpy(dtype=float)
        weight = data["weight"].to_numpy(dtype=float) if "weight" in data.columns else np.ones(len(data))
        totals = pd.Series(weight).groupby(x, sort=True).sum()
        count = totals.to_numpy(dtype=float)
        return pd.DataFrame(
            {
                "count": count,
                "prop": count / count.sum() if count.sum() else count,
                "x": totals.index.to_numpy(dtype=float),
                "width": width if width is not None else resolution(x, zero=False) * 0.9,
            }
        )
