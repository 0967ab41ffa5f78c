"""Build a plot: run every layer through the pipeline and draw the result.

``build`` is fail-fast: any exception aborts the whole build. Non-fatal
conditions are raised as :class:`~plotgrammar.exceptions.PlotGrammarWarning`
subclasses; they are recorded, logged and returned with the built plot.
"""

from __future__ import annotations

import copy
import logging
import warnings
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import pandas as pd

from plotgrammar.drawables import Drawable
from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.layer import Layer
from plotgrammar.panel import PanelContext
from plotgrammar.plot import Plot
from plotgrammar.scales import ScaleSet

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class BuiltPlot:
    """Per-layer finished data plus the trained panel context.

    Unpacks as ``layer_data, panel = build(plot)``.
    """

    plot: Plot
    layer_data: list[pd.DataFrame]
    panel: PanelContext
    warnings: list[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[object]:
        yield self.layer_data
        yield self.panel


def build(plot: Plot) -> BuiltPlot:
    """Compute the finished data of every layer of ``plot``."""
    if not plot.layers:
        raise ConfigValidationError("Plot must include at least one layer to build.")
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        layer_data, panel = _run_pipeline(plot)
    messages = []
    for record in caught:
        LOGGER.warning("[build] %s", record.message)
        messages.append(str(record.message))
    return BuiltPlot(plot=plot, layer_data=layer_data, panel=panel, warnings=messages)


def _run_pipeline(plot: Plot) -> tuple[list[pd.DataFrame], PanelContext]:
    layers = plot.layers
    data = [layer.layer_data(plot.data) for layer in layers]

    # scales are trained during the build, so each build gets its own copies
    scales = ScaleSet(copy.deepcopy(scale) for scale in plot.scales)
    layout = plot.facet.compute_layout([plot.data, *data])
    panel = PanelContext(layout, scales, env=plot.env)
    data = [plot.facet.map_data(layer_frame, layout) for layer_frame in data]

    data = _by_layer(layers, data, "compute_aesthetics", lambda l, d: l.compute_aesthetics(d, plot.mapping, panel))
    data = [panel.transform(layer_frame) for layer_frame in data]

    panel.train_position(data)
    data = panel.map_position(data)

    data = _by_layer(layers, data, "compute_statistic", lambda l, d: l.compute_statistic(d, panel))
    data = _by_layer(layers, data, "map_statistic", lambda l, d: l.map_statistic(d, plot.mapping, panel))
    scales.add_missing(("x", "y"))

    data = _by_layer(layers, data, "compute_geom_1", lambda l, d: l.compute_geom_1(d))
    data = _by_layer(layers, data, "compute_position", lambda l, d: l.compute_position(d, panel))

    panel.reset_scales()
    panel.train_position(data)
    data = panel.map_position(data)

    non_position = scales.non_position_scales()
    if non_position:
        for layer_frame in data:
            scales.train_df(layer_frame, non_position)
        data = [scales.map_df(layer_frame, non_position) for layer_frame in data]

    data = _by_layer(layers, data, "compute_geom_2", lambda l, d: l.compute_geom_2(d))
    return data, panel


def _by_layer(
    layers: tuple[Layer, ...],
    data: list[pd.DataFrame],
    step: str,
    fn: Callable[[Layer, pd.DataFrame], pd.DataFrame],
) -> list[pd.DataFrame]:
    results = []
    for index, (layer, layer_frame) in enumerate(zip(layers, data, strict=True)):
        try:
            results.append(fn(layer, layer_frame))
        except Exception:
            LOGGER.error("[build] %s failed in layer %d (%s)", step, index + 1, layer.geom.label)
            raise
        LOGGER.debug("[build] %s: layer %d -> %d rows", step, index + 1, len(results[-1]))
    return results


def draw(built: BuiltPlot) -> list[list[Drawable]]:
    """Draw every layer: ``result[layer][panel]`` is that layer's drawable for one panel."""
    return [
        layer.draw_geom(layer_frame, built.panel, built.plot.coord)
        for layer, layer_frame in zip(built.plot.layers, built.layer_data, strict=True)
    ]


__all__ = ["BuiltPlot", "build", "draw"]
