"""Identity position: no adjustment."""

from __future__ import annotations

from typing import Any

import pandas as pd

from plotgrammar.panel import PanelContext
from plotgrammar.positions.base import POSITIONS, Position


@POSITIONS.add("identity")
class PositionIdentity(Position):
    """Leave positions untouched."""

    name = "identity"

    def compute_layer(self, data: pd.DataFrame, params: dict[str, Any], panel: PanelContext) -> pd.DataFrame:
        return data
