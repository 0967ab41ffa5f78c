"""Remove duplicate rows."""

from __future__ import annotations

import pandas as pd

from plotgrammar.panel import PanelRanges
from plotgrammar.stats.base import STATS, Stat


@STATS.add("unique")
class StatUnique(Stat):
    """Keep the first occurrence of each distinct row within a panel."""

    name = "unique"

    def compute_panel(self, data: pd.DataFrame, scales: PanelRanges) -> pd.DataFrame:  # type: ignore[override]
        return data.drop_duplicates().reset_index(drop=True)
