"""Geom base class, draw dispatch and registry.

A geom turns finished layer data into drawables. Concrete geoms override
exactly one of ``draw_panel`` (all rows of a panel at once) or ``draw_group``
(one call per group); the registry rejects geoms that override both or
neither. Drawing parameters are read from the overridden method's signature.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

import numpy as np
import pandas as pd

from plotgrammar.coords import Coord
from plotgrammar.drawables import CompositeDrawable, Drawable, NullDrawable
from plotgrammar.exceptions import InvalidExtension
from plotgrammar.frames import GROUP, PANEL, is_empty, remove_missing, split_frame
from plotgrammar.geoms.keys import draw_key_point
from plotgrammar.introspection import overrides, select_params, signature_params, unique
from plotgrammar.panel import PanelContext, PanelRanges
from plotgrammar.registry import Registry

LOGGER = logging.getLogger(__name__)


class Geom:
    """Base geometry."""

    name: ClassVar[str] = ""
    required_aes: ClassVar[tuple[str, ...]] = ()
    non_missing_aes: ClassVar[tuple[str, ...]] = ()
    default_aes: ClassVar[dict[str, Any]] = {}
    extra_params: ClassVar[tuple[str, ...]] = ("na_rm",)
    draw_key = staticmethod(draw_key_point)

    @property
    def label(self) -> str:
        """Name used in messages, e.g. ``geom_point``."""
        return f"geom_{self.name or type(self).__name__.lower()}"

    @classmethod
    def draws_groups(cls) -> bool:
        """Whether drawing happens once per group rather than once per panel."""
        return overrides(cls, Geom, "draw_group") and not overrides(cls, Geom, "draw_panel")

    def parameters(self) -> list[str]:
        """Non-aesthetic parameters this geom accepts."""
        method = self.draw_group if self.draws_groups() else self.draw_panel
        return unique([*signature_params(method, skip=3), *self.extra_params])

    def aesthetics(self) -> list[str]:
        """Every aesthetic this geom understands."""
        return unique([*self.required_aes, *self.default_aes, "group"])

    def setup_data(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:  # pylint: disable=unused-argument
        """Geom-specific structural normalization; may add columns."""
        return data

    def use_defaults(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:
        """Fill default aesthetics that are absent, then apply fixed aesthetic values."""
        result = data.copy()
        for name, value in self.default_aes.items():
            if name not in result.columns and name not in params:
                result[name] = np.nan if value is None else value
        for name in self.aesthetics():
            if name in params:
                result[name] = params[name]
        return result

    def handle_na(self, data: pd.DataFrame, params: dict[str, Any]) -> pd.DataFrame:
        """Drop rows missing a required aesthetic."""
        return remove_missing(
            data,
            [*self.required_aes, *self.non_missing_aes],
            na_rm=bool(params.get("na_rm", False)),
            name=self.label,
        )

    def draw_layer(self, data: pd.DataFrame, params: dict[str, Any], panel: PanelContext, coord: Coord) -> list[Drawable]:
        """Draw every panel; panels without rows get a ``NullDrawable``."""
        if is_empty(data):
            return [NullDrawable() for _ in panel.panel_ids]
        data = self.handle_na(data, params)
        panel_params = select_params(self.draw_panel, params, skip=3)
        drawables: list[Drawable] = []
        for panel_id in panel.panel_ids:
            panel_data = data.loc[data[PANEL] == panel_id]
            if panel_data.empty:
                drawables.append(NullDrawable())
                continue
            ranges = panel.ranges(panel_id)
            transformed = coord.transform(panel_data.reset_index(drop=True), ranges)
            drawables.append(self.draw_panel(transformed, ranges, coord, **panel_params))
        return drawables

    def draw_panel(self, data: pd.DataFrame, panel_ranges: PanelRanges, coord: Coord, **params: Any) -> Drawable:
        """Draw one panel by drawing each of its groups."""
        group_params = select_params(self.draw_group, params, skip=3)
        children = tuple(
            self.draw_group(group_data.reset_index(drop=True), panel_ranges, coord, **group_params)
            for _, group_data in split_frame(data, GROUP)
        )
        return CompositeDrawable(children, name=self.label)

    def draw_group(self, data: pd.DataFrame, panel_ranges: PanelRanges, coord: Coord, **params: Any) -> Drawable:
        """Draw one group of one panel."""
        raise NotImplementedError(f"{type(self).__name__} must implement draw_group or draw_panel")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


def check_draw_granularity(geom: Geom) -> None:
    """Reject geoms that override both or neither of ``draw_panel`` and ``draw_group``."""
    cls = type(geom)
    if overrides(cls, Geom, "draw_panel") == overrides(cls, Geom, "draw_group"):
        raise InvalidExtension(f"{cls.__name__} must override exactly one of draw_panel and draw_group")


def column_or_scalar(data: pd.DataFrame, name: str) -> Any:
    """Column values as an array, or None when the column is absent."""
    return data[name].to_numpy() if name in data.columns else None


def first_value(data: pd.DataFrame, name: str) -> Any:
    """Value of ``name`` in the first row, for per-group constant styles."""
    return data[name].iloc[0] if name in data.columns and len(data) else None


GEOMS: Registry[Geom] = Registry("geom", Geom, validate=check_draw_granularity)

__all__ = ["GEOMS", "Geom", "check_draw_granularity", "column_or_scalar", "first_value"]
