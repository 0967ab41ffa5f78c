"""Plotly sink for built plots.

Drawables arrive in [0, 1] panel coordinates, so every subplot uses fixed unit
axes. Each panel of the facet layout becomes one subplot at its ``ROW``/``COL``.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from typing import Any

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from plotgrammar.build import BuiltPlot, draw
from plotgrammar.drawables import Drawable, Primitive
from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.facets import COL, ROW
from plotgrammar.frames import PANEL

LOGGER = logging.getLogger(__name__)

_GREY_PATTERN = re.compile(r"^gr[ae]y(\d{1,3})$")

POINT_SIZE_SCALE = 4.0
LINE_WIDTH_SCALE = 2.0
TEXT_SIZE_SCALE = 3.0

SHAPE_SYMBOLS = {
    0: "square-open",
    1: "circle-open",
    2: "triangle-up-open",
    3: "cross-thin-open",
    4: "x-thin-open",
    7: "square-x-open",
    8: "asterisk-open",
    15: "square",
    16: "circle",
    17: "triangle-up",
    18: "diamond",
    19: "circle",
    21: "circle",
    22: "square",
    23: "diamond",
    24: "triangle-up",
}

LINETYPE_DASHES = {1: "solid", 2: "dash", 3: "dot", 4: "dashdot", 5: "longdash", 6: "longdashdot"}


def render_plotly(built: BuiltPlot, drawables: Sequence[Sequence[Drawable]] | None = None) -> go.Figure:
    """Render a built plot into a Plotly figure, one subplot per panel."""
    if drawables is None:
        drawables = draw(built)
    layout = built.panel.layout
    if len(drawables) != len(built.layer_data):
        raise ConfigValidationError(f"Expected drawables for {len(built.layer_data)} layers, got {len(drawables)}")

    n_rows = int(layout[ROW].max())
    n_cols = int(layout[COL].max())
    facet_columns = [column for column in layout.columns if column not in (PANEL, ROW, COL)]
    titles = [""] * (n_rows * n_cols)
    for _, panel_row in layout.iterrows():
        index = (int(panel_row[ROW]) - 1) * n_cols + int(panel_row[COL]) - 1
        titles[index] = ", ".join(str(panel_row[column]) for column in facet_columns)

    figure = make_subplots(
        rows=n_rows,
        cols=n_cols,
        subplot_titles=titles if facet_columns else None,
        horizontal_spacing=0.05,
        vertical_spacing=0.08,
    )
    for layer_drawables in drawables:
        for panel_index, drawable in enumerate(layer_drawables):
            panel_row = layout.iloc[panel_index]
            row, col = int(panel_row[ROW]), int(panel_row[COL])
            for primitive in drawable.walk():
                for trace in primitive_traces(primitive):
                    figure.add_trace(trace, row=row, col=col)

    figure.update_xaxes(range=[0, 1], showticklabels=False, showgrid=False, zeroline=False)
    figure.update_yaxes(range=[0, 1], showticklabels=False, showgrid=False, zeroline=False)
    _apply_theme(figure, built)
    LOGGER.debug("[plotly] rendered %d traces over %d panels", len(figure.data), len(layout))
    return figure


def _apply_theme(figure: go.Figure, built: BuiltPlot) -> None:
    current = built.plot.theme
    figure.update_layout(
        showlegend=False,
        paper_bgcolor=css_colour(current.get("background")),
        plot_bgcolor=css_colour(current.get("panel_background")),
        font={"family": current.get("font_family"), "size": current.get("font_size")},
        width=current.get("width"),
        height=current.get("height"),
    )
    title = current.get("title")
    if title:
        figure.update_layout(title=title)


def primitive_traces(primitive: Primitive) -> list[go.Scatter]:
    """Plotly traces drawing ``primitive``; unknown kinds draw nothing."""
    if primitive.kind == "points":
        return [_points_trace(primitive)]
    if primitive.kind == "polyline":
        return [_polyline_trace(primitive)]
    if primitive.kind == "rects":
        return _rect_traces(primitive)
    if primitive.kind == "text":
        return [_text_trace(primitive)]
    if primitive.kind == "curves":
        return _curve_traces(primitive)
    LOGGER.warning("[plotly] no trace for drawable kind '%s'", primitive.kind)
    return []


def _points_trace(primitive: Primitive) -> go.Scatter:
    style = primitive.style
    marker: dict[str, Any] = {}
    if style.get("colour") is not None:
        marker["color"] = _colours(style["colour"])
    if style.get("size") is not None:
        marker["size"] = _scaled(style["size"], POINT_SIZE_SCALE)
    if style.get("shape") is not None:
        marker["symbol"] = [_symbol(value) for value in np.atleast_1d(style["shape"])]
    if style.get("alpha") is not None:
        marker["opacity"] = _opacity(style["alpha"])
    return go.Scatter(x=primitive.coords["x"], y=primitive.coords["y"], mode="markers", marker=marker)


def _line_style(style: dict[str, Any] | Any, index: int | None = None) -> dict[str, Any]:
    line: dict[str, Any] = {}
    colour = _element(style.get("colour"), index)
    if colour is not None:
        line["color"] = css_colour(colour)
    size = _element(style.get("size"), index)
    if _present(size):
        line["width"] = float(size) * LINE_WIDTH_SCALE
    linetype = _element(style.get("linetype"), index)
    if _present(linetype):
        line["dash"] = _dash(linetype)
    return line


def _polyline_trace(primitive: Primitive) -> go.Scatter:
    alpha = primitive.style.get("alpha")
    return go.Scatter(
        x=primitive.coords["x"],
        y=primitive.coords["y"],
        mode="lines",
        line=_line_style(primitive.style),
        opacity=float(alpha) if _present(alpha) else None,
    )


def _rect_traces(primitive: Primitive) -> list[go.Scatter]:
    coords = primitive.coords
    traces = []
    for index in range(len(primitive)):
        xmin, xmax = coords["xmin"][index], coords["xmax"][index]
        ymin, ymax = coords["ymin"][index], coords["ymax"][index]
        fill = _element(primitive.style.get("fill"), index)
        alpha = _element(primitive.style.get("alpha"), index)
        traces.append(
            go.Scatter(
                x=[xmin, xmax, xmax, xmin, xmin],
                y=[ymin, ymin, ymax, ymax, ymin],
                mode="lines",
                fill="toself",
                fillcolor=css_colour(fill),
                line=_line_style(primitive.style, index) or {"width": 0},
                opacity=float(alpha) if _present(alpha) else None,
            )
        )
    return traces


def _text_trace(primitive: Primitive) -> go.Scatter:
    style = primitive.style
    font: dict[str, Any] = {}
    if style.get("colour") is not None:
        font["color"] = _colours(style["colour"])
    if style.get("size") is not None:
        font["size"] = _scaled(style["size"], TEXT_SIZE_SCALE)
    labels = style.get("label")
    return go.Scatter(
        x=primitive.coords["x"],
        y=primitive.coords["y"],
        mode="text",
        text=[str(label) for label in np.atleast_1d(labels)] if labels is not None else None,
        textfont=font,
    )


def _curve_traces(primitive: Primitive) -> list[go.Scatter]:
    params = primitive.params
    traces = []
    for index in range(len(primitive)):
        xs, ys = curve_points(
            (primitive.coords["x"][index], primitive.coords["y"][index]),
            (primitive.coords["xend"][index], primitive.coords["yend"][index]),
            curvature=params.get("curvature", 0.5),
            angle=params.get("angle", 90),
            ncp=params.get("ncp", 5),
        )
        alpha = _element(primitive.style.get("alpha"), index)
        traces.append(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                line=_line_style(primitive.style, index),
                opacity=float(alpha) if _present(alpha) else None,
            )
        )
    return traces


def curve_points(
    start: tuple[float, float],
    end: tuple[float, float],
    curvature: float = 0.5,
    angle: float = 90,
    ncp: int = 5,
) -> tuple[np.ndarray, np.ndarray]:
    """Sample a quadratic Bezier from ``start`` to ``end``.

    Positive ``curvature`` bends to the right of the direction of travel and
    zero gives a straight line. ``angle`` below 90 skews the bend towards the
    start point, above 90 towards the end point.
    """
    (x0, y0), (x1, y1) = start, end
    dx, dy = x1 - x0, y1 - y0
    skew = math.cos(math.radians(angle))
    control_x = (x0 + x1) / 2 + curvature * dy / 2 - skew * dx / 2
    control_y = (y0 + y1) / 2 - curvature * dx / 2 - skew * dy / 2
    t = np.linspace(0.0, 1.0, max(int(ncp), 1) * 4 + 2)
    xs = (1 - t) ** 2 * x0 + 2 * (1 - t) * t * control_x + t**2 * x1
    ys = (1 - t) ** 2 * y0 + 2 * (1 - t) * t * control_y + t**2 * y1
    return xs, ys


def css_colour(value: Any) -> str | None:
    """Translate a colour value into something Plotly accepts."""
    if not _present(value):
        return None
    text = str(value)
    match = _GREY_PATTERN.match(text)
    if match:
        level = round(int(match.group(1)) * 255 / 100)
        return f"rgb({level},{level},{level})"
    return text


def _colours(values: Any) -> Any:
    if np.ndim(values) == 0:
        return css_colour(values)
    return [css_colour(value) for value in values]


def _scaled(values: Any, factor: float) -> Any:
    if np.ndim(values) == 0:
        return float(values) * factor
    return [float(value) * factor if _present(value) else factor for value in values]


def _opacity(values: Any) -> Any:
    if np.ndim(values) == 0:
        return float(values) if _present(values) else 1.0
    return [float(value) if _present(value) else 1.0 for value in values]


def _symbol(value: Any) -> str:
    if isinstance(value, str):
        return value
    if not _present(value):
        return "circle"
    return SHAPE_SYMBOLS.get(int(value), "circle")


def _dash(value: Any) -> str:
    if isinstance(value, str):
        return value
    return LINETYPE_DASHES.get(int(value), "solid")


def _element(values: Any, index: int | None) -> Any:
    if index is None or values is None or np.ndim(values) == 0:
        return values
    return values[index]


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, float | np.floating):
        return not math.isnan(value)
    return True


__all__ = ["css_colour", "curve_points", "primitive_traces", "render_plotly"]
