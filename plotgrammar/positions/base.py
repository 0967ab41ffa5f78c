"""Position adjustment base class and registry.

Positions reconcile overlapping geometry after the statistic has run. They
work per panel across all groups and only move positional aesthetics: row
count, column set and row order are preserved.
"""

from __future__ import annotations

from typing import Any, ClassVar

import pandas as pd

from plotgrammar.aesthetics import check_required_aesthetics
from plotgrammar.frames import PANEL, split_frame
from plotgrammar.panel import PanelContext, PanelRanges
from plotgrammar.registry import Registry


class Position:
    """Base position adjustment."""

    name: ClassVar[str] = ""
    required_aes: ClassVar[tuple[str, ...]] = ()

    @property
    def label(self) -> str:
        """Name used in messages, e.g. ``position_stack``."""
        return f"position_{self.name or type(self).__name__.lower()}"

    def setup_params(self, data: pd.DataFrame) -> dict[str, Any]:  # pylint: disable=unused-argument
        """Derive adjustment parameters from the data."""
        return {}

    def setup_data(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:  # pylint: disable=unused-argument
        """Check required aesthetics and add any columns the adjustment needs."""
        check_required_aesthetics(self.required_aes, data.columns, self.label)
        return data

    def compute_layer(self, data: pd.DataFrame, params: dict[str, Any], panel: PanelContext) -> pd.DataFrame:
        """Adjust every panel of ``data`` independently."""
        pieces = [
            self.compute_panel(panel_data, params, panel.ranges(int(panel_id)))
            for panel_id, panel_data in split_frame(data, PANEL)
        ]
        if not pieces:
            return data
        # restore the incoming row order
        return pd.concat(pieces).loc[data.index]

    def compute_panel(self, data: pd.DataFrame, params: dict[str, Any], scales: PanelRanges) -> pd.DataFrame:
        """Adjust the rows of one panel; the index must be preserved."""
        raise NotImplementedError(f"{type(self).__name__} must implement compute_panel")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


POSITIONS: Registry[Position] = Registry("position", Position)

__all__ = ["POSITIONS", "Position"]
