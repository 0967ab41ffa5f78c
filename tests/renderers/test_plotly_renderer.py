"""Tests for the Plotly renderer."""

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import pytest

from plotgrammar import FacetWrap, Plot, aes, build, layer, theme
from plotgrammar.drawables import Primitive
from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.renderers import render_plotly
from plotgrammar.renderers.plotly_renderer import css_colour, curve_points, primitive_traces


def scatter(data, **kwargs):
    """A scatterplot of x against y."""
    return Plot(data=data, mapping=aes(x="x", y="y"), layers=(layer(geom="point", stat="identity", position="identity"),), **kwargs)


class TestRenderPlotly:
    """Tests for figure construction."""

    def test_single_panel(self, xy_data):
        """Test one marker trace on unit axes."""
        figure = render_plotly(build(scatter(xy_data)))
        assert isinstance(figure, go.Figure)
        (trace,) = figure.data
        assert trace.mode == "markers"
        assert len(trace.x) == 2
        assert tuple(figure.layout.xaxis.range) == (0, 1)
        assert figure.layout.showlegend is False

    def test_facets_become_subplots(self, category_data):
        """Test one subplot per panel with facet titles."""
        figure = render_plotly(build(scatter(category_data, facet=FacetWrap("category"))))
        assert len(figure.data) == 2
        assert {trace.xaxis for trace in figure.data} == {"x", "x2"}
        assert [annotation.text for annotation in figure.layout.annotations] == ["a", "b"]

    def test_groups_become_traces(self, category_data):
        """Test that each drawn group of a path is its own trace."""
        plot = Plot(
            data=category_data,
            mapping=aes(x="x", y="y", colour="category"),
            layers=(layer(geom="line", stat="identity", position="identity"),),
        )
        figure = render_plotly(build(plot))
        assert [trace.mode for trace in figure.data] == ["lines", "lines"]
        assert figure.data[0].line.color != figure.data[1].line.color

    def test_theme(self, xy_data):
        """Test that theme elements reach the layout."""
        plot = scatter(xy_data).with_theme(theme(title="Points", background="grey50", width=400))
        figure = render_plotly(build(plot))
        assert figure.layout.title.text == "Points"
        assert figure.layout.paper_bgcolor == "rgb(128,128,128)"
        assert figure.layout.width == 400

    def test_drawables_must_match_layers(self, xy_data):
        """Test that precomputed drawables are checked against the layers."""
        with pytest.raises(ConfigValidationError, match="Expected drawables for 1 layers, got 0"):
            render_plotly(build(scatter(xy_data)), drawables=[])


class TestPrimitiveTraces:
    """Tests for primitive conversion."""

    def test_rects_are_closed(self):
        """Test one filled closed trace per rectangle."""
        primitive = Primitive(
            "rects",
            coords={"xmin": np.array([0.1, 0.5]), "xmax": np.array([0.2, 0.6]), "ymin": np.zeros(2), "ymax": np.ones(2)},
            style={"fill": np.array(["grey35", "red"], dtype=object)},
        )
        first, second = primitive_traces(primitive)
        assert first.fill == "toself"
        assert list(first.x) == [0.1, 0.2, 0.2, 0.1, 0.1]
        assert first.fillcolor == "rgb(89,89,89)"
        assert second.fillcolor == "red"

    def test_text(self):
        """Test text traces."""
        primitive = Primitive("text", coords={"x": np.array([0.5]), "y": np.array([0.5])}, style={"label": np.array(["hi"])})
        (trace,) = primitive_traces(primitive)
        assert trace.mode == "text"
        assert list(trace.text) == ["hi"]

    def test_curves(self):
        """Test one sampled line per curve."""
        primitive = Primitive(
            "curves",
            coords={"x": np.array([0.0]), "y": np.array([0.0]), "xend": np.array([1.0]), "yend": np.array([0.0])},
            style={"linetype": 2},
            params={"curvature": 0.5, "angle": 90, "ncp": 5},
        )
        (trace,) = primitive_traces(primitive)
        assert len(trace.x) == 22
        assert trace.line.dash == "dash"

    def test_unknown_kind(self, caplog):
        """Test that unsupported primitives are skipped with a warning."""
        assert primitive_traces(Primitive("key_point")) == []
        assert "no trace for drawable kind 'key_point'" in caplog.text


class TestHelpers:
    """Tests for colour and curve helpers."""

    def test_css_colour(self):
        """Test colour translation."""
        assert css_colour("grey0") == "rgb(0,0,0)"
        assert css_colour("gray100") == "rgb(255,255,255)"
        assert css_colour("#112233") == "#112233"
        assert css_colour(None) is None
        assert css_colour(float("nan")) is None

    def test_curve_endpoints(self):
        """Test that curves start and end at their endpoints."""
        xs, ys = curve_points((0.0, 0.0), (1.0, 1.0), curvature=-1.0, ncp=2)
        assert len(xs) == 10
        assert (xs[0], ys[0]) == (0.0, 0.0)
        assert xs[-1] == pytest.approx(1.0)
        assert ys[-1] == pytest.approx(1.0)

    def test_straight_curve(self):
        """Test that zero curvature at a right angle is a straight line."""
        xs, ys = curve_points((0.0, 0.0), (1.0, 0.0), curvature=0.0)
        np.testing.assert_allclose(ys, 0.0, atol=1e-12)

    def test_curvature_direction(self):
        """Test that positive curvature bends right of the direction of travel."""
        _, ys = curve_points((0.0, 0.0), (1.0, 0.0), curvature=1.0)
        assert ys[len(ys) // 2] < 0
        _, ys = curve_points((0.0, 0.0), (1.0, 0.0), curvature=-1.0)
        assert ys[len(ys) // 2] > 0
