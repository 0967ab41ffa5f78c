"""Coordinate systems used when drawing.

Geoms never see raw data coordinates: the draw dispatcher hands them frames
passed through :meth:`Coord.transform`.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from plotgrammar.panel import PanelRanges
from plotgrammar.scales import X_AESTHETICS, Y_AESTHETICS


class Coord:
    """Base coordinate system."""

    def transform(self, data: pd.DataFrame, panel_ranges: PanelRanges) -> pd.DataFrame:
        """Return a copy of ``data`` in drawing coordinates."""
        raise NotImplementedError

    def is_linear(self) -> bool:
        """Whether straight lines stay straight under this coordinate system."""
        return False


class CoordCartesian(Coord):
    """Linear coordinates: x and y rescaled to [0, 1] of the panel ranges."""

    def transform(self, data: pd.DataFrame, panel_ranges: PanelRanges) -> pd.DataFrame:
        result = data.copy()
        for columns, extent in ((X_AESTHETICS, panel_ranges.x_range), (Y_AESTHETICS, panel_ranges.y_range)):
            for column in columns:
                if column in result.columns:
                    result[column] = _rescale(result[column], extent)
        return result

    def is_linear(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "CoordCartesian()"


def _rescale(values: pd.Series, extent: tuple[float, float]) -> np.ndarray:
    low, high = extent
    numeric = pd.to_numeric(values, errors="coerce").to_numpy(dtype=float)
    if high == low:
        return np.full(numeric.shape, 0.5)
    return (numeric - low) / (high - low)


__all__ = ["Coord", "CoordCartesian"]
