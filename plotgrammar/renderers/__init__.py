"""Rendering backends for built plots."""

from plotgrammar.renderers.plotly_renderer import render_plotly

__all__ = ["render_plotly"]
