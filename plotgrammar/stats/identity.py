"""Identity statistic: leaves the data unchanged."""

from __future__ import annotations

from typing import Any

import pandas as pd

from plotgrammar.panel import PanelContext
from plotgrammar.stats.base import STATS, Stat


@STATS.add("identity")
class StatIdentity(Stat):
    """Pass data through untouched."""

    name = "identity"

    def compute_layer(self, data: pd.DataFrame, params: dict[str, Any], panel: PanelContext) -> pd.DataFrame:
        return data
