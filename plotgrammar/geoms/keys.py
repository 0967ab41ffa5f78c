"""Legend key glyphs for geoms."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from plotgrammar.drawables import Primitive


def _style(data: Mapping[str, Any], names: tuple[str, ...]) -> dict[str, Any]:
    return {name: data[name] for name in names if name in data}


def draw_key_point(data: Mapping[str, Any], params: Mapping[str, Any]) -> Primitive:
    """A single centred point."""
    return Primitive(
        "key_point",
        coords={"x": [0.5], "y": [0.5]},
        style=_style(data, ("colour", "fill", "size", "shape", "alpha", "stroke")),
        params=dict(params),
    )


def draw_key_path(data: Mapping[str, Any], params: Mapping[str, Any]) -> Primitive:
    """A horizontal line across the key."""
    return Primitive(
        "key_path",
        coords={"x": [0.1, 0.9], "y": [0.5, 0.5]},
        style=_style(data, ("colour", "size", "linetype", "alpha")),
        params=dict(params),
    )


def draw_key_rect(data: Mapping[str, Any], params: Mapping[str, Any]) -> Primitive:
    """A filled square covering the key."""
    return Primitive(
        "key_rect",
        coords={"xmin": [0.0], "xmax": [1.0], "ymin": [0.0], "ymax": [1.0]},
        style=_style(data, ("fill", "colour", "alpha", "size", "linetype")),
        params=dict(params),
    )


def draw_key_text(data: Mapping[str, Any], params: Mapping[str, Any]) -> Primitive:
    """The letter "a" in the mapped text style."""
    style = _style(data, ("colour", "size", "angle", "alpha", "family", "fontface"))
    style["label"] = "a"
    return Primitive("key_text", coords={"x": [0.5], "y": [0.5]}, style=style, params=dict(params))


__all__ = ["draw_key_path", "draw_key_point", "draw_key_rect", "draw_key_text"]
