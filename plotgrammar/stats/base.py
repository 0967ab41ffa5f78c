"""Statistic base class and registry.

A statistic transforms layer data before it is drawn. The default
``compute_layer`` splits the data by panel, ``compute_panel`` splits each panel
by group and ``compute_group`` does the actual work, so most statistics only
implement ``compute_group``. Parameters a statistic accepts are read from the
signature of whichever of ``compute_panel``/``compute_group`` it overrides.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, ClassVar

import pandas as pd

from plotgrammar.aesthetics import Aes, check_required_aesthetics
from plotgrammar.exceptions import EmptyGroupResult
from plotgrammar.frames import GROUP, PANEL, constant_columns, empty_frame, is_empty, remove_missing, split_frame
from plotgrammar.introspection import overrides, select_params, signature_params, unique
from plotgrammar.panel import PanelContext, PanelRanges
from plotgrammar.registry import Registry

LOGGER = logging.getLogger(__name__)


class Stat:
    """Base statistic; subclasses override ``compute_group`` or ``compute_panel``."""

    name: ClassVar[str] = ""
    required_aes: ClassVar[tuple[str, ...]] = ()
    non_missing_aes: ClassVar[tuple[str, ...]] = ()
    default_aes: ClassVar[Aes] = Aes()
    extra_params: ClassVar[tuple[str, ...]] = ("na_rm",)
    retransform: ClassVar[bool] = True

    @property
    def label(self) -> str:
        """Name used in messages, e.g. ``stat_bin``."""
        return f"stat_{self.name or type(self).__name__.lower()}"

    def parameters(self) -> list[str]:
        """Parameter names this statistic accepts."""
        if overrides(type(self), Stat, "compute_panel"):
            names = signature_params(self.compute_panel, skip=2)
        else:
            names = signature_params(self.compute_group, skip=2)
        return unique([*names, *self.extra_params])

    def setup_params(self, data: pd.DataFrame, params: dict[str, Any]) -> dict[str, Any]:  # pylint: disable=unused-argument
        """Derive final parameters from the data; must not mutate ``params``."""
        return dict(params)

    def setup_data(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:  # pylint: disable=unused-argument
        """Structural pre-processing; the row count must not change."""
        return data

    def compute_layer(self, data: pd.DataFrame, params: dict[str, Any], panel: PanelContext) -> pd.DataFrame:
        """Compute the statistic for every panel of ``data``."""
        check_required_aesthetics(self.required_aes, data.columns, self.label)
        data = remove_missing(
            data,
            [*self.required_aes, *self.non_missing_aes],
            na_rm=bool(params.get("na_rm", False)),
            name=self.label,
        )
        panel_params = select_params(self.compute_panel, params, skip=2)
        results = []
        for panel_id, panel_data in split_frame(data, PANEL):
            result = self.compute_panel(panel_data, panel.ranges(int(panel_id)), **panel_params)
            if not is_empty(result):
                results.append(result)
        if not results:
            return empty_frame()
        return pd.concat(results, ignore_index=True)

    def compute_panel(self, data: pd.DataFrame, scales: PanelRanges, **params: Any) -> pd.DataFrame:
        """Compute the statistic for each group of one panel and stack the results."""
        group_params = select_params(self.compute_group, params, skip=2)
        results = []
        for group_id, group_data in split_frame(data, GROUP):
            new = self.compute_group(group_data, scales, **group_params)
            if is_empty(new):
                warnings.warn(
                    f"{self.label}: group {group_id} in panel {group_data[PANEL].iloc[0]} produced no rows; dropping it.",
                    EmptyGroupResult,
                    stacklevel=2,
                )
                continue
            carried = constant_columns(group_data, exclude=new.columns)
            new = new.reset_index(drop=True)
            for column, value in carried.items():
                new[column] = pd.Series([value] * len(new), dtype=group_data[column].dtype)
            results.append(new)
        if not results:
            return empty_frame()
        return pd.concat(results, ignore_index=True)

    def compute_group(self, data: pd.DataFrame, scales: PanelRanges, **params: Any) -> pd.DataFrame:
        """Compute the statistic for one group."""
        raise NotImplementedError(f"{type(self).__name__} must implement compute_group or compute_panel")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


STATS: Registry[Stat] = Registry("stat", Stat)

__all__ = ["STATS", "Stat"]
