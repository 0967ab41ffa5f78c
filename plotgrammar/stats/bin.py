"""Histogram binning of a continuous x."""

from __future__ import annotations

import logging
import math
import warnings
from typing import Any

import numpy as np
import pandas as pd

from plotgrammar.aesthetics import aes
from plotgrammar.exceptions import ConfigValidationError, PlotGrammarWarning
from plotgrammar.panel import PanelRanges
from plotgrammar.stats.base import STATS, Stat

LOGGER = logging.getLogger(__name__)

DEFAULT_BINS = 30


@STATS.add("bin")
class StatBin(Stat):
    """Divide the x range into bins and count the cases in each.

    Produces ``count``, ``density``, ``ncount``, ``ndensity``, ``width`` and the
    bin edges ``xmin``/``xmax``; ``x`` becomes the bin centre.
    """

    name = "bin"
    required_aes = ("x",)
    default_aes = aes(y="after_stat(count)")

    def setup_params(self, data: pd.DataFrame, params: dict[str, Any]) -> dict[str, Any]:
        params = dict(params)
        if "y" in data.columns:
            raise ConfigValidationError(f"{self.label} must not be used with a y aesthetic.")
        if params.get("center") is not None and params.get("boundary") is not None:
            raise ConfigValidationError(f"{self.label}: only one of `boundary` and `center` may be specified.")
        if params.get("closed", "right") not in ("left", "right"):
            raise ConfigValidationError(f"{self.label}: `closed` must be 'left' or 'right'.")
        if params.get("binwidth") is None and params.get("bins") is None:
            warnings.warn(
                f"{self.label} using `bins = {DEFAULT_BINS}`. Pick better value with `binwidth`.",
                PlotGrammarWarning,
                stacklevel=2,
            )
            params["bins"] = DEFAULT_BINS
        return params

    def compute_group(  # type: ignore[override]
        self,
        data: pd.DataFrame,
        scales: PanelRanges,
        binwidth: float | None = None,
        bins: int | None = None,
        center: float | None = None,
        boundary: float | None = None,
        closed: str = "right",
    ) -> pd.DataFrame:
        x = data["x"].to_numpy(dtype=float)
        extent = scales.x_domain or (float(np.nanmin(x)), float(np.nanmax(x)))
        breaks = bin_breaks(extent, binwidth=binwidth, bins=bins, center=center, boundary=boundary)
        weight = data["weight"].to_numpy(dtype=float) if "weight" in data.columns else np.ones(len(data))
        binned = pd.cut(x, bins=breaks, right=closed == "right", include_lowest=True)
        count = pd.Series(weight).groupby(binned, observed=False).sum().to_numpy(dtype=float)
        widths = np.diff(breaks)
        total = count.sum()
        density = count / widths / total if total else np.zeros_like(count)
        return pd.DataFrame(
            {
                "count": count,
                "x": (breaks[:-1] + breaks[1:]) / 2,
                "xmin": breaks[:-1],
                "xmax": breaks[1:],
                "width": widths,
                "density": density,
                "ncount": count / count.max() if count.max() else count,
                "ndensity": density / density.max() if density.max() else density,
            }
        )


def bin_breaks(
    extent: tuple[float, float],
    *,
    binwidth: float | None = None,
    bins: int | None = None,
    center: float | None = None,
    boundary: float | None = None,
) -> np.ndarray:
    """Bin edges covering ``extent`` for either a bin width or a bin count."""
    low, high = extent
    if binwidth is None:
        bins = int(bins if bins is not None else DEFAULT_BINS)
        if bins < 1:
            raise ConfigValidationError("`bins` must be at least 1")
        if high == low:
            binwidth = 0.1
        elif bins == 1:
            binwidth = high - low
            boundary = low
        else:
            binwidth = (high - low) / (bins - 1)
            if center is None and boundary is None:
                boundary = binwidth / 2
    if binwidth <= 0:
        raise ConfigValidationError("`binwidth` must be positive")
    if center is None and boundary is None:
        boundary = binwidth / 2
    if boundary is None:
        boundary = center - binwidth / 2  # type: ignore[operator]
    shift = math.floor((low - boundary) / binwidth)
    origin = boundary + shift * binwidth
    edges = origin + binwidth * np.arange(0, math.floor((high - origin) / binwidth + 1e-8) + 2)
    if edges[-2] >= high and len(edges) > 2:
        edges = edges[:-1]
    LOGGER.debug("[stat_bin] %d bins of width %s over %s", len(edges) - 1, binwidth, extent)
    return edges
