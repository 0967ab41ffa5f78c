"""Facets: panel layout and the ``PANEL`` column."""

from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd

from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.frames import PANEL

ROW = "ROW"
COL = "COL"


class Facet:
    """Base facet: decides how many panels exist and which rows land in each."""

    def compute_layout(self, data: Sequence[pd.DataFrame | None]) -> pd.DataFrame:
        """Return the layout frame with ``PANEL``, ``ROW`` and ``COL`` columns."""
        raise NotImplementedError

    def map_data(self, data: pd.DataFrame, layout: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of ``data`` with a ``PANEL`` column."""
        raise NotImplementedError


class FacetNull(Facet):
    """A single panel holding every row."""

    def compute_layout(self, data: Sequence[pd.DataFrame | None]) -> pd.DataFrame:
        return pd.DataFrame({PANEL: [1], ROW: [1], COL: [1]})

    def map_data(self, data: pd.DataFrame, layout: pd.DataFrame) -> pd.DataFrame:
        result = data.copy()
        result[PANEL] = pd.Series(1, index=result.index, dtype="int64")
        return result

    def __repr__(self) -> str:
        return "FacetNull()"


class FacetWrap(Facet):
    """One panel per distinct combination of ``facets``, wrapped into a grid."""

    def __init__(self, facets: Sequence[str] | str, ncol: int | None = None, nrow: int | None = None) -> None:
        self.facets = [facets] if isinstance(facets, str) else list(facets)
        if not self.facets:
            raise ConfigValidationError("FacetWrap requires at least one faceting variable")
        if ncol is not None and ncol <= 0:
            raise ConfigValidationError(f"FacetWrap.ncol must be positive, got {ncol}")
        if nrow is not None and nrow <= 0:
            raise ConfigValidationError(f"FacetWrap.nrow must be positive, got {nrow}")
        self.ncol = ncol
        self.nrow = nrow

    def compute_layout(self, data: Sequence[pd.DataFrame | None]) -> pd.DataFrame:
        frames = [frame[self.facets] for frame in data if frame is not None and all(v in frame.columns for v in self.facets)]
        if not frames:
            raise ConfigValidationError(f"No layer has all faceting variables {self.facets}")
        combos = pd.concat(frames, ignore_index=True).drop_duplicates()
        combos = combos.sort_values(self.facets, na_position="last", kind="stable").reset_index(drop=True)
        count = len(combos)
        ncol, nrow = self._dimensions(count)
        layout = combos.copy()
        layout.insert(0, PANEL, range(1, count + 1))
        layout[ROW] = [index // ncol + 1 for index in range(count)]
        layout[COL] = [index % ncol + 1 for index in range(count)]
        if layout[ROW].max() > nrow:
            raise ConfigValidationError(f"{count} panels do not fit a {nrow}x{ncol} grid")
        return layout

    def _dimensions(self, count: int) -> tuple[int, int]:
        if self.ncol is None and self.nrow is None:
            ncol = max(1, math.ceil(math.sqrt(count)))
            return ncol, max(1, math.ceil(count / ncol))
        if self.ncol is None:
            nrow = self.nrow or 1
            return max(1, math.ceil(count / nrow)), nrow
        return self.ncol, self.nrow or max(1, math.ceil(count / self.ncol))

    def map_data(self, data: pd.DataFrame, layout: pd.DataFrame) -> pd.DataFrame:
        present = [variable for variable in self.facets if variable in data.columns]
        if present and len(present) != len(self.facets):
            missing = [variable for variable in self.facets if variable not in data.columns]
            raise ConfigValidationError(f"Layer data is missing faceting variables {missing}")
        if not present:
            # layers without the faceting variables are repeated in every panel
            repeated = [data.assign(**{PANEL: panel}) for panel in layout[PANEL]]
            return pd.concat(repeated, ignore_index=True) if repeated else data.assign(**{PANEL: 1})
        keys = layout[[PANEL, *self.facets]]
        merged = data.reset_index(drop=True).merge(keys, on=self.facets, how="left", sort=False)
        merged = merged.dropna(subset=[PANEL])
        merged[PANEL] = merged[PANEL].astype("int64")
        return merged

    def __repr__(self) -> str:
        return f"FacetWrap(facets={self.facets!r}, ncol={self.ncol!r}, nrow={self.nrow!r})"


__all__ = ["COL", "Facet", "FacetNull", "FacetWrap", "ROW"]
