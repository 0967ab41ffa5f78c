"""End-to-end tests for building and drawing plots."""

import logging

import numpy as np
import pandas as pd
import pytest

from plotgrammar import Plot, aes, build, draw, layer, theme
from plotgrammar.drawables import CompositeDrawable, NullDrawable, Primitive
from plotgrammar.exceptions import (
    ConfigValidationError,
    EmptyGroupResult,
    IncompatibleScaleValues,
    MissingRequiredAesthetic,
)
from plotgrammar.facets import FacetWrap
from plotgrammar.frames import GROUP, NO_GROUP, PANEL
from plotgrammar.panel import PanelRanges
from plotgrammar.scales import ContinuousScale
from plotgrammar.stats import Stat


class DropGroupStat(Stat):
    """Stat that returns nothing for the group whose category is 'b'."""

    name = "drop_b"

    def compute_group(self, data, scales):  # type: ignore[override]
        if (data["colour"] == "b").all():
            return pd.DataFrame()
        return data[["x", "y"]]


def point_layer(**kwargs):
    """A point layer with identity stat and position."""
    return layer(geom="point", stat="identity", position="identity", **kwargs)


class TestScenarios:
    """The two reference scenarios."""

    def test_continuous_only(self, xy_data):
        """Test that two numeric rows stay ungrouped in panel 1."""
        built = build(Plot(data=xy_data, mapping=aes(x="x", y="y"), layers=(point_layer(),)))
        (result,) = built.layer_data
        assert len(result) == 2
        assert {"x", "y", PANEL, GROUP} <= set(result.columns)
        assert list(result[GROUP]) == [NO_GROUP, NO_GROUP]
        assert list(result[PANEL]) == [1, 1]
        assert list(result["x"]) == [1, 2]

    def test_discrete_colour_groups(self):
        """Test one group per distinct category within panel 1."""
        data = pd.DataFrame({"x": [1, 2], "y": [2, 4], "category": ["a", "b"]})
        built = build(Plot(data=data, mapping=aes(x="x", y="y", colour="category"), layers=(point_layer(),)))
        (result,) = built.layer_data
        assert list(result[GROUP]) == [1, 2]
        assert list(result[PANEL]) == [1, 1]
        assert result["colour"].nunique() == 2


class TestBuild:
    """Tests for the orchestrator."""

    def test_unpacks(self, xy_data):
        """Test that a built plot unpacks into layer data and panel context."""
        layer_data, panel = build(Plot(data=xy_data, mapping=aes(x="x", y="y"), layers=(point_layer(),)))
        assert len(layer_data) == 1
        assert panel.n_panels == 1

    def test_requires_layers(self, xy_data):
        """Test that a plot without layers cannot be built."""
        with pytest.raises(ConfigValidationError, match="at least one layer"):
            build(Plot(data=xy_data))

    def test_missing_required_aesthetic_aborts(self):
        """Test that a missing y is reported at build time and aborts the build."""
        plot = Plot(data=pd.DataFrame({"x": [1, 2]}), mapping=aes(x="x"), layers=(point_layer(),))
        with pytest.raises(MissingRequiredAesthetic, match="geom_point"):
            build(plot)

    @pytest.mark.parametrize("position", ["identity", "stack"])
    def test_bar_without_y_reports_missing_aesthetic(self, position):
        """Test that a bar layer mapped on x only fails with MissingRequiredAesthetic."""
        plot = Plot(
            data=pd.DataFrame({"x": [1, 2]}),
            mapping=aes(x="x"),
            layers=(layer(geom="bar", stat="identity", position=position),),
        )
        with pytest.raises(MissingRequiredAesthetic, match="geom_bar"):
            build(plot)

    def test_scales_are_shared_across_layers(self):
        """Test that position scales train on every layer."""
        plot = Plot(
            mapping=aes(x="x", y="y"),
            layers=(
                point_layer(data=pd.DataFrame({"x": [0, 1], "y": [0, 1]})),
                point_layer(data=pd.DataFrame({"x": [5], "y": [3]})),
            ),
        )
        built = build(plot)
        assert built.panel.ranges(1).x_domain == (0.0, 5.0)

    def test_plot_scales_are_not_mutated(self, xy_data):
        """Test that user scales are copied before training."""
        user = ContinuousScale("x")
        plot = Plot(data=xy_data, mapping=aes(x="x", y="y"), layers=(point_layer(),), scales=(user,))
        build(plot)
        assert user.range is None

    def test_log_scale_transforms_data(self):
        """Test that scale transformations apply before statistics."""
        data = pd.DataFrame({"x": [1.0, 100.0], "y": [1.0, 2.0]})
        plot = Plot(data=data, mapping=aes(x="x", y="y"), layers=(point_layer(),), scales=(ContinuousScale("x", trans="log10"),))
        (result,) = build(plot).layer_data
        np.testing.assert_allclose(result["x"], [0.0, 2.0])

    def test_incompatible_scale_aborts(self):
        """Test that discrete values on a continuous scale abort the build."""
        plot = Plot(
            mapping=aes(x="x", y="y"),
            layers=(
                point_layer(data=pd.DataFrame({"x": [1.0], "y": [1.0]})),
                point_layer(data=pd.DataFrame({"x": ["a"], "y": [1.0]})),
            ),
        )
        with pytest.raises(IncompatibleScaleValues):
            build(plot)

    def test_warnings_are_collected_and_logged(self, caplog):
        """Test that non-fatal conditions are returned and logged."""
        data = pd.DataFrame({"x": [1, 2, 3], "y": [1, 2, 3], "colour": ["a", "b", "a"]})
        plot = Plot(
            data=data,
            mapping=aes(x="x", y="y", colour="colour"),
            layers=(layer(geom="point", stat=DropGroupStat(), position="identity"),),
        )
        with caplog.at_level(logging.WARNING, logger="plotgrammar"):
            built = build(plot)
        assert any("produced no rows" in message for message in built.warnings)
        assert any("produced no rows" in record.getMessage() for record in caplog.records)
        (result,) = built.layer_data
        assert len(result) == 2

    def test_empty_group_result_category(self):
        """Test that dropped groups are reported as EmptyGroupResult."""
        data = pd.DataFrame({"x": [1, 2], "y": [1, 2], "colour": ["a", "b"], PANEL: [1, 1], GROUP: [1, 2]})
        with pytest.warns(EmptyGroupResult, match="group 2 in panel 1"):
            result = DropGroupStat().compute_panel(data, PanelRanges((0.0, 1.0), (0.0, 1.0)))
        assert list(result["colour"]) == ["a"]

    def test_env_is_used_for_expressions(self):
        """Test that plot env supplies names missing from the data."""
        data = pd.DataFrame({"x": [1, 2], "y": [1, 2]})
        plot = Plot(data=data, mapping=aes(x="x + shift", y="y"), layers=(point_layer(),), env={"shift": 10})
        (result,) = build(plot).layer_data
        assert list(result["x"]) == [11, 12]


class TestStatPipeline:
    """Builds that restructure data through statistics and positions."""

    def test_count_bars_stack(self):
        """Test count bars stacked by fill group."""
        data = pd.DataFrame({"cls": ["u", "u", "v", "u"], "kind": ["p", "q", "p", "p"]})
        plot = Plot(
            data=data,
            mapping=aes(x="cls", fill="kind"),
            layers=(layer(geom="bar", stat="count", position="stack"),),
        )
        (result,) = build(plot).layer_data
        u_rows = result[result["x"] == 1.0].sort_values("ymin")
        assert list(u_rows["ymax"]) == [1.0, 3.0]
        assert u_rows["ymin"].iloc[0] == 0.0
        assert {"xmin", "xmax", "ymin", "ymax", "fill"} <= set(result.columns)

    def test_histogram(self):
        """Test that stat_bin restructures rows into bins."""
        data = pd.DataFrame({"v": np.arange(10, dtype=float)})
        plot = Plot(data=data, mapping=aes(x="v"), layers=(layer(geom="bar", stat="bin", position="identity", params={"bins": 5}),))
        built = build(plot)
        (result,) = built.layer_data
        assert result["count"].sum() == 10
        assert (result["y"] == result["count"]).all()
        assert not [message for message in built.warnings if "bins = 30" in message]

    def test_histogram_default_bins_warns(self):
        """Test the default-bins warning."""
        data = pd.DataFrame({"v": np.arange(10, dtype=float)})
        plot = Plot(data=data, mapping=aes(x="v"), layers=(layer(geom="bar", stat="bin", position="identity"),))
        assert any("bins = 30" in message for message in build(plot).warnings)


class TestFacetedBuild:
    """Builds with more than one panel."""

    def test_wrap_assigns_panels(self, category_data):
        """Test that each category gets its own panel and groups never straddle panels."""
        plot = Plot(
            data=category_data,
            mapping=aes(x="x", y="y"),
            layers=(point_layer(),),
            facet=FacetWrap("category"),
        )
        built = build(plot)
        (result,) = built.layer_data
        assert built.panel.n_panels == 2
        assert sorted(result[PANEL].unique()) == [1, 2]

    def test_draw_emits_one_drawable_per_panel(self, category_data):
        """Test the draw dispatcher across panels, including an empty layer."""
        plot = Plot(
            data=category_data,
            mapping=aes(x="x", y="y"),
            layers=(point_layer(), point_layer(data=pd.DataFrame({"x": pd.Series(dtype=float), "y": pd.Series(dtype=float)}))),
            facet=FacetWrap("category"),
        )
        drawables = draw(build(plot))
        assert [len(per_layer) for per_layer in drawables] == [2, 2]
        assert all(isinstance(drawable, Primitive) for drawable in drawables[0])
        assert all(isinstance(drawable, NullDrawable) for drawable in drawables[1])


class TestDraw:
    """Tests for drawing built plots."""

    def test_points_in_unit_coordinates(self, xy_data):
        """Test that drawn coordinates are rescaled into the panel."""
        built = build(Plot(data=xy_data, mapping=aes(x="x", y="y"), layers=(point_layer(),)))
        ((primitive,),) = draw(built)
        assert primitive.kind == "points"
        assert np.all((primitive.coords["x"] > 0) & (primitive.coords["x"] < 1))
        assert primitive.style["colour"].tolist() == ["black", "black"]

    def test_paths_draw_per_group(self, category_data):
        """Test that group-granularity geoms yield one child per group."""
        plot = Plot(
            data=category_data,
            mapping=aes(x="x", y="y", colour="category"),
            layers=(layer(geom="line", stat="identity", position="identity"),),
        )
        ((drawable,),) = draw(build(plot))
        assert isinstance(drawable, CompositeDrawable)
        assert len(drawable.children) == 2
        assert all(child.kind == "polyline" for child in drawable.children)

    def test_theme_does_not_affect_data(self, xy_data):
        """Test that themes are carried but not used by the build."""
        plot = Plot(data=xy_data, mapping=aes(x="x", y="y"), layers=(point_layer(),)).with_theme(theme(title="t"))
        built = build(plot)
        assert built.plot.theme.get("title") == "t"
