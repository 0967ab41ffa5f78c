"""Random jitter to reduce overplotting."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from plotgrammar.frames import resolution
from plotgrammar.panel import PanelContext, PanelRanges
from plotgrammar.positions.base import POSITIONS, Position
from plotgrammar.scales import X_AESTHETICS, Y_AESTHETICS


@POSITIONS.add("jitter")
class PositionJitter(Position):
    """Add uniform noise of up to ``width``/``height`` to x and y.

    Defaults to 40% of the data resolution. Without an explicit ``seed`` one is
    drawn once in ``setup_params`` so every panel of a build shares it.
    """

    name = "jitter"
    required_aes = ("x", "y")

    def __init__(self, width: float | None = None, height: float | None = None, seed: int | None = None) -> None:
        self.width = width
        self.height = height
        self.seed = seed

    def setup_params(self, data: pd.DataFrame) -> dict[str, Any]:
        seed = self.seed
        if seed is None:
            seed = int(np.random.default_rng().integers(0, 2**31 - 1))
        return {
            "width": self.width if self.width is not None else resolution(data["x"], zero=False) * 0.4,
            "height": self.height if self.height is not None else resolution(data["y"], zero=False) * 0.4,
            "seed": seed,
        }

    def compute_layer(self, data: pd.DataFrame, params: dict[str, Any], panel: PanelContext) -> pd.DataFrame:
        # one generator for the whole layer keeps results independent of panel count
        rng = np.random.default_rng(params["seed"])
        result = data.copy()
        x_noise = rng.uniform(-params["width"], params["width"], len(data))
        y_noise = rng.uniform(-params["height"], params["height"], len(data))
        for columns, noise in ((X_AESTHETICS, x_noise), (Y_AESTHETICS, y_noise)):
            for column in columns:
                if column in result.columns:
                    result[column] = result[column].to_numpy(dtype=float) + noise
        return result

    def compute_panel(self, data: pd.DataFrame, params: dict[str, Any], scales: PanelRanges) -> pd.DataFrame:
        return data

    def __repr__(self) -> str:
        return f"PositionJitter(width={self.width!r}, height={self.height!r}, seed={self.seed!r})"
