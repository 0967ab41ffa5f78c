"""Layers: data + mapping + geom + stat + position, and the per-layer build stages.

A :class:`Layer` is immutable. Each stage method is a function of its inputs
returning a new frame; the only side effects are default scale registration
on the shared :class:`~plotgrammar.panel.PanelContext` during aesthetic mapping.

Stage order during a build::

    compute_aesthetics -> compute_statistic -> map_statistic
        -> compute_geom_1 -> compute_position -> compute_geom_2 -> draw_geom
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from plotgrammar.aesthetics import (
    Aes,
    as_aes_expr,
    check_aesthetics,
    check_required_aesthetics,
    const,
    defaults,
    evaluate_aesthetic,
    rename_aes,
    strip_dots,
)
from plotgrammar.coords import Coord
from plotgrammar.drawables import Drawable, NullDrawable, Primitive
from plotgrammar.exceptions import (
    DeprecatedParameter,
    InvalidExtension,
    InvalidMapping,
    InvalidShowLegend,
    MissingComponent,
    UnknownParameter,
)
from plotgrammar.frames import PANEL, cunion, empty_frame, fortify, is_empty
from plotgrammar.geoms import GEOMS, Geom
from plotgrammar.grouping import add_group
from plotgrammar.panel import PanelContext
from plotgrammar.positions import POSITIONS, Position
from plotgrammar.stats import STATS, Stat

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Layer:  # pylint: disable=too-many-instance-attributes
    """One geom/stat/position unit of a plot."""

    geom: Geom
    stat: Stat
    position: Position
    mapping: Aes | None = None
    data: pd.DataFrame | None = None
    aes_params: Mapping[str, Any] = field(default_factory=dict)
    geom_params: Mapping[str, Any] = field(default_factory=dict)
    stat_params: Mapping[str, Any] = field(default_factory=dict)
    subset: Any = None
    inherit_aes: bool = True
    show_legend: bool | None = None

    def layer_data(self, plot_data: pd.DataFrame | None) -> pd.DataFrame:
        """The layer's own data, or the plot's data when the layer has none."""
        data = self.data if self.data is not None else plot_data
        return data.copy() if data is not None else empty_frame()

    def effective_mapping(self, plot_mapping: Mapping[str, Any] | None) -> Aes:
        """Layer mapping, merged over the plot mapping when ``inherit_aes`` is set."""
        if self.inherit_aes:
            return defaults(self.mapping, plot_mapping)
        return Aes(self.mapping or {})

    def compute_aesthetics(
        self, data: pd.DataFrame, plot_mapping: Mapping[str, Any] | None, panel: PanelContext
    ) -> pd.DataFrame:
        """Evaluate the non-calculated aesthetics into a new frame with ``PANEL`` and ``GROUP``."""
        aesthetics = Aes(
            (name, expr)
            for name, expr in self.effective_mapping(plot_mapping).items()
            if name not in self.aes_params and not expr.calculated
        )
        fixed_group = self.geom_params.get("group", self.aes_params.get("group"))
        if fixed_group is not None:
            aesthetics["group"] = const(fixed_group)

        if self.subset is not None:
            data = self._apply_subset(data, panel.env)

        evaled = {name: evaluate_aesthetic(name, expr, data, panel.env) for name, expr in aesthetics.items()}
        panel.scales.add_defaults(evaled)

        n = len(data)
        if n == 0 and evaled:
            n = max(len(values) for values in evaled.values())
        check_aesthetics(evaled, n)

        frame = pd.DataFrame({name: _broadcast(values, n) for name, values in evaled.items()}, index=pd.RangeIndex(n))
        if PANEL in data.columns and len(data) > 0:
            frame[PANEL] = data[PANEL].to_numpy()
        else:
            frame[PANEL] = pd.Series(1, index=frame.index, dtype="int64")
        return add_group(frame)

    def _apply_subset(self, data: pd.DataFrame, env: Mapping[str, Any]) -> pd.DataFrame:
        predicates = self.subset if isinstance(self.subset, list | tuple) else [self.subset]
        include = np.ones(len(data), dtype=bool)
        for predicate in predicates:
            values = evaluate_aesthetic("subset", as_aes_expr(predicate), data, env)
            mask = pd.Series(_broadcast(values, len(data))).fillna(False).astype(bool).to_numpy()
            include &= mask
        LOGGER.debug("[layer] subset keeps %d of %d rows", int(include.sum()), len(data))
        return data.loc[include]

    def compute_statistic(self, data: pd.DataFrame, panel: PanelContext) -> pd.DataFrame:
        """Run the layer's statistic over all panels."""
        if is_empty(data):
            return empty_frame()
        params = self.stat.setup_params(data, dict(self.stat_params))
        prepared = self.stat.setup_data(data, params)
        if len(prepared) != len(data):
            raise InvalidExtension(f"{self.stat.label}.setup_data changed the number of rows")
        return self.stat.compute_layer(prepared, params, panel)

    def map_statistic(
        self, data: pd.DataFrame, plot_mapping: Mapping[str, Any] | None, panel: PanelContext
    ) -> pd.DataFrame:
        """Evaluate calculated aesthetics against statistic output and merge them in."""
        if is_empty(data):
            return empty_frame()
        aesthetics = self.mapping or Aes()
        if self.inherit_aes:
            aesthetics = defaults(aesthetics, plot_mapping)
        aesthetics = defaults(aesthetics, self.stat.default_aes)
        new = strip_dots(Aes((name, expr) for name, expr in aesthetics.items() if expr.calculated))
        if not new:
            return data

        evaled = {name: evaluate_aesthetic(name, expr, data) for name, expr in new.items()}
        check_aesthetics(evaled, len(data))
        stat_data = pd.DataFrame({name: _broadcast(values, len(data)) for name, values in evaled.items()})

        panel.scales.add_defaults(evaled)
        if self.stat.retransform:
            stat_data = panel.transform(stat_data)
        return cunion(stat_data, data)

    def compute_geom_1(self, data: pd.DataFrame) -> pd.DataFrame:
        """Geom data setup and required-aesthetic validation."""
        if is_empty(data):
            return empty_frame()
        data = self.geom.setup_data(data, {**self.geom_params, **self.aes_params})
        check_required_aesthetics(self.geom.required_aes, [*data.columns, *self.aes_params], self.geom.label)
        return data

    def compute_position(self, data: pd.DataFrame, panel: PanelContext) -> pd.DataFrame:
        """Apply the position adjustment, panel by panel."""
        if is_empty(data):
            return empty_frame()
        data = data.reset_index(drop=True)
        params = self.position.setup_params(data)
        data = self.position.setup_data(data, params)
        return self.position.compute_layer(data, params, panel)

    def compute_geom_2(self, data: pd.DataFrame) -> pd.DataFrame:
        """Fill default aesthetics and apply fixed aesthetic values."""
        if is_empty(data):
            return empty_frame()
        return self.geom.use_defaults(data, dict(self.aes_params))

    def draw_geom(self, data: pd.DataFrame, panel: PanelContext, coord: Coord) -> list[Drawable]:
        """Draw the layer: exactly one drawable per panel."""
        if is_empty(data):
            return [NullDrawable() for _ in range(max(panel.n_panels, 1))]
        return self.geom.draw_layer(data, dict(self.geom_params), panel, coord)

    def draw_key(self, data: Mapping[str, Any] | None = None) -> Primitive:
        """Legend key glyph for one set of aesthetic values."""
        values = {name: value for name, value in self.geom.default_aes.items() if value is not None}
        values.update(data or {})
        values.update(self.aes_params)
        return self.geom.draw_key(values, dict(self.geom_params))

    def describe(self) -> str:
        """Human-readable summary of the layer."""
        lines = []
        if self.mapping:
            lines.append("mapping: " + ", ".join(f"{name} = {expr!r}" for name, expr in self.mapping.items()))
        lines.append(f"{self.geom.label}: {_format_params(self.geom_params)}")
        lines.append(f"{self.stat.label}: {_format_params(self.stat_params)}")
        lines.append(self.position.label)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


def layer(  # pylint: disable=too-many-arguments
    geom: str | Geom | type[Geom] | None = None,
    stat: str | Stat | type[Stat] | None = None,
    data: Any = None,
    mapping: Aes | None = None,
    position: str | Position | type[Position] | None = None,
    params: Mapping[str, Any] | None = None,
    inherit_aes: bool = True,
    subset: Any = None,
    show_legend: Any = None,
) -> Layer:
    """Create a layer.

    ``geom``, ``stat`` and ``position`` are registered names or capability
    objects. ``params`` is split between fixed aesthetic values, geom
    parameters and stat parameters; a key none of them recognises is an error.

    Raises:
        MissingComponent: geom, stat or position is missing.
        UnknownExtension: a name is not registered.
        UnknownParameter: ``params`` holds unrecognised keys.
        InvalidMapping: ``mapping`` was not created by ``aes()``.
    """
    for component, value in (("geom", geom), ("stat", stat), ("position", position)):
        if value is None:
            raise MissingComponent(f"Attempted to create layer with no {component}.")

    params = dict(params or {})
    if "show_guide" in params:
        warnings.warn("`show_guide` has been deprecated. Please use `show_legend` instead.", DeprecatedParameter, stacklevel=2)
        show_legend = params.pop("show_guide")
    if show_legend is not None and not isinstance(show_legend, bool | np.bool_):
        warnings.warn("`show_legend` must be a single logical value.", InvalidShowLegend, stacklevel=2)
        show_legend = False

    if mapping is not None and not isinstance(mapping, Aes):
        raise InvalidMapping("Mapping must be created by `aes()`")

    geom_obj = GEOMS.resolve(geom)  # type: ignore[arg-type]
    stat_obj = STATS.resolve(stat)  # type: ignore[arg-type]
    position_obj = POSITIONS.resolve(position)  # type: ignore[arg-type]

    params = rename_aes(params)
    geom_aesthetics = set(geom_obj.aesthetics())
    geom_parameters = set(geom_obj.parameters())
    stat_parameters = set(stat_obj.parameters())
    extra = [name for name in params if name not in geom_aesthetics | geom_parameters | stat_parameters]
    if extra:
        raise UnknownParameter(extra)

    return Layer(
        geom=geom_obj,
        stat=stat_obj,
        position=position_obj,
        mapping=mapping,
        data=fortify(data),
        aes_params={name: value for name, value in params.items() if name in geom_aesthetics},
        geom_params={name: value for name, value in params.items() if name in geom_parameters},
        stat_params={name: value for name, value in params.items() if name in stat_parameters},
        subset=subset,
        inherit_aes=inherit_aes,
        show_legend=None if show_legend is None else bool(show_legend),
    )


def _broadcast(values: Any, n: int) -> Any:
    if len(values) == 1 and n != 1:
        return values.repeat(n)
    return values


def _format_params(params: Mapping[str, Any]) -> str:
    return ", ".join(f"{name} = {value!r}" for name, value in params.items())


__all__ = ["Layer", "layer"]
