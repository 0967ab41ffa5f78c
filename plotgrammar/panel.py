"""The panel/scale context shared by every layer of one build."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from plotgrammar.frames import PANEL
from plotgrammar.scales import ScaleSet


@dataclass(frozen=True)
class PanelRanges:
    """Expanded x and y extents of one panel, in transformed scale space."""

    x_range: tuple[float, float]
    y_range: tuple[float, float]
    x_domain: tuple[float, float] | None = None
    y_domain: tuple[float, float] | None = None


class PanelContext:
    """Facet layout plus the plot's scales.

    This is the one mutable object of a build. It is mutated only by default
    scale registration during aesthetic evaluation and by scale training; layers
    are processed in declaration order so training is deterministic.
    """

    def __init__(self, layout: pd.DataFrame, scales: ScaleSet | None = None, env: Mapping[str, Any] | None = None) -> None:
        self.layout = layout.reset_index(drop=True)
        self.scales = scales if scales is not None else ScaleSet()
        self.env: dict[str, Any] = dict(env or {})

    @property
    def panel_ids(self) -> list[int]:
        """Panel identifiers in layout order."""
        return [int(panel) for panel in self.layout[PANEL]]

    @property
    def n_panels(self) -> int:
        """Number of panels known from the layout."""
        return len(self.layout)

    def ranges(self, panel_id: int | None = None) -> PanelRanges:  # pylint: disable=unused-argument
        """Ranges of ``panel_id``; position scales are shared by all panels."""
        x_scale = self.scales.get("x")
        y_scale = self.scales.get("y")
        return PanelRanges(
            x_range=x_scale.dimension() if x_scale is not None else (0.0, 1.0),
            y_range=y_scale.dimension() if y_scale is not None else (0.0, 1.0),
            x_domain=x_scale.extent() if x_scale is not None else None,
            y_domain=y_scale.extent() if y_scale is not None else None,
        )

    def transform(self, data: pd.DataFrame, panel_id: int | None = None) -> pd.DataFrame:  # pylint: disable=unused-argument
        """Apply pending scale transformations to ``data``."""
        return self.scales.transform_df(data)

    def train_position(self, layer_data: Sequence[pd.DataFrame]) -> None:
        """Train the x and y scales on every layer's data, in layer order."""
        position = self.scales.position_scales()
        for data in layer_data:
            self.scales.train_df(data, position)

    def map_position(self, layer_data: Sequence[pd.DataFrame]) -> list[pd.DataFrame]:
        """Map discrete position values to their numeric slots."""
        position = self.scales.position_scales()
        return [self.scales.map_df(data, position) for data in layer_data]

    def reset_scales(self) -> None:
        """Forget trained position ranges before retraining on adjusted data."""
        self.scales.reset_position()

    def __repr__(self) -> str:
        return f"PanelContext(n_panels={self.n_panels}, scales={self.scales.input()})"


__all__ = ["PanelContext", "PanelRanges"]
