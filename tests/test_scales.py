"""Tests for scales and the panel context."""

import numpy as np
import pandas as pd
import pytest
from plotly.colors import qualitative as qualitative_colors

from plotgrammar.exceptions import ConfigValidationError, IncompatibleScaleValues, ScaleConflictWarning
from plotgrammar.facets import FacetNull
from plotgrammar.panel import PanelContext
from plotgrammar.scales import (
    CONTINUOUS,
    DISCRETE,
    ContinuousScale,
    DiscreteScale,
    ScaleSet,
    implied_kind,
    scale_key,
)


class TestScaleKey:
    """Tests for aesthetic to scale resolution."""

    def test_position_families(self):
        """Test that x-like and y-like aesthetics share the x and y scales."""
        assert scale_key("xmin") == "x"
        assert scale_key("yend") == "y"
        assert scale_key("colour") == "colour"
        assert scale_key("label") is None

    def test_implied_kind(self):
        """Test continuous/discrete inference from values."""
        assert implied_kind(np.array([1.0, 2.0])) == CONTINUOUS
        assert implied_kind(np.array(["a"], dtype=object)) == DISCRETE
        assert implied_kind(pd.Categorical([1, 2])) == DISCRETE
        assert implied_kind(np.array([True])) == DISCRETE


class TestContinuousScale:
    """Tests for continuous scales."""

    def test_train_and_dimension(self):
        """Test training and expanded ranges."""
        scale = ContinuousScale("x")
        scale.train(pd.Series([1.0, 3.0]))
        scale.train(pd.Series([5.0]))
        assert scale.extent() == (1.0, 5.0)
        assert scale.dimension() == pytest.approx((0.8, 5.2))

    def test_limits_override_training(self):
        """Test that user limits take precedence."""
        scale = ContinuousScale("y", limits=[0, 10])
        scale.train(pd.Series([2.0, 3.0]))
        assert scale.extent() == (0.0, 10.0)

    def test_log_transform(self):
        """Test the log10 transformation and its inverse."""
        scale = ContinuousScale("x", trans="log10")
        np.testing.assert_allclose(scale.transform(pd.Series([1.0, 100.0])), [0.0, 2.0])
        np.testing.assert_allclose(scale.inverse([2.0]), [100.0])

    def test_unknown_transform(self):
        """Test that unknown transformations are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown scale transformation"):
            ContinuousScale("x", trans="cubic")

    def test_discrete_values_raise(self):
        """Test that strings cannot train a continuous scale."""
        with pytest.raises(IncompatibleScaleValues):
            ContinuousScale("x").train(pd.Series(["a", "b"]))

    def test_size_mapping(self):
        """Test rescaling into the output range."""
        scale = ContinuousScale("size", output_range=(1.0, 3.0))
        scale.train(pd.Series([0.0, 10.0]))
        np.testing.assert_allclose(scale.map(pd.Series([0.0, 5.0, 10.0])), [1.0, 2.0, 3.0])

    def test_colour_gradient(self):
        """Test that colours map to rgb strings."""
        scale = ContinuousScale("colour")
        scale.train(pd.Series([0.0, 1.0]))
        mapped = scale.map(pd.Series([0.0, 1.0]))
        assert all(value.startswith("rgb(") for value in mapped)
        assert mapped[0] != mapped[1]

    def test_unscaled_aesthetic(self):
        """Test that aesthetics without scales are rejected."""
        with pytest.raises(ConfigValidationError, match="does not take a scale"):
            ContinuousScale("label")


class TestDiscreteScale:
    """Tests for discrete scales."""

    def test_position_levels(self):
        """Test that discrete positions map to 1..k in sorted order."""
        scale = DiscreteScale("x")
        scale.train(pd.Series(["b", "a", "b"]))
        np.testing.assert_array_equal(scale.map(pd.Series(["a", "b"])), [1.0, 2.0])
        assert scale.extent() == (1.0, 2.0)
        assert scale.dimension() == pytest.approx((0.4, 2.6))

    def test_categorical_level_order(self):
        """Test that categorical level order is kept."""
        scale = DiscreteScale("x")
        scale.train(pd.Series(pd.Categorical(["a"], categories=["z", "a"])))
        assert scale.domain() == ["z", "a"]

    def test_numeric_values_pass_through(self):
        """Test that already-mapped numeric positions are left alone."""
        scale = DiscreteScale("x")
        scale.train(pd.Series(["a", "b"]))
        scale.train(pd.Series([0.5, 2.5]))
        assert scale.extent() == (0.5, 2.5)
        np.testing.assert_array_equal(scale.map(pd.Series([0.5, 2.5])), [0.5, 2.5])

    def test_colour_palette(self):
        """Test the default qualitative palette."""
        scale = DiscreteScale("colour")
        scale.train(pd.Series(["a", "b"]))
        assert list(scale.map(pd.Series(["a", "b", "c"]))) == [
            qualitative_colors.Plotly[0],
            qualitative_colors.Plotly[1],
            "#7F7F7F",
        ]

    def test_custom_palette(self):
        """Test a user palette."""
        scale = DiscreteScale("fill", palette=["red", "blue"])
        scale.train(pd.Series(["x", "y", "z"]))
        assert list(scale.map(pd.Series(["x", "z"]))) == ["red", "red"]


class TestScaleSet:
    """Tests for the scale collection."""

    def test_add_defaults_registers_by_kind(self):
        """Test default registration from evaluated values."""
        scales = ScaleSet()
        scales.add_defaults({"x": np.array([1.0]), "colour": np.array(["a"], dtype=object), "label": np.array(["t"])})
        assert isinstance(scales.get("x"), ContinuousScale)
        assert isinstance(scales.get("colour"), DiscreteScale)
        assert "label" not in scales
        assert scales.input() == ["x", "colour"]

    def test_conflict_keeps_first(self):
        """Test that the first registered scale wins a kind conflict, with a warning."""
        scales = ScaleSet()
        scales.add_defaults({"x": np.array([1.0])})
        with pytest.warns(ScaleConflictWarning, match="keeping the first"):
            scales.add_defaults({"x": np.array(["a"], dtype=object)})
        assert isinstance(scales.get("x"), ContinuousScale)

    def test_user_scale_is_kept(self):
        """Test that an explicitly supplied scale is not replaced by defaults."""
        user = ContinuousScale("x", trans="log10")
        scales = ScaleSet([user])
        scales.add_defaults({"xmin": np.array([1.0])})
        assert scales.get("x") is user

    def test_transform_and_train_df(self):
        """Test frame-level transformation and training."""
        scales = ScaleSet([ContinuousScale("y", trans="sqrt")])
        data = pd.DataFrame({"y": [4.0, 9.0], "ymax": [16.0, 16.0]})
        transformed = scales.transform_df(data)
        np.testing.assert_allclose(transformed["y"], [2.0, 3.0])
        scales.train_df(transformed)
        assert scales.get("y").extent() == (2.0, 4.0)

    def test_add_missing(self):
        """Test that missing position scales are added."""
        scales = ScaleSet()
        scales.add_missing(("x", "y"))
        assert [scale.aesthetic for scale in scales.position_scales()] == ["x", "y"]
        assert not scales.non_position_scales()


class TestPanelContext:
    """Tests for the panel context."""

    def test_ranges_default_to_unit(self):
        """Test ranges before any scale exists."""
        context = PanelContext(FacetNull().compute_layout([]))
        ranges = context.ranges(1)
        assert ranges.x_range == (0.0, 1.0)
        assert ranges.x_domain is None
        assert context.panel_ids == [1]

    def test_train_and_reset(self):
        """Test position training across layers and resetting."""
        context = PanelContext(FacetNull().compute_layout([]), ScaleSet([ContinuousScale("x"), ContinuousScale("y")]))
        context.train_position([pd.DataFrame({"x": [0.0, 1.0]}), pd.DataFrame({"x": [3.0], "y": [1.0]})])
        assert context.ranges().x_domain == (0.0, 3.0)
        context.reset_scales()
        assert context.ranges().x_domain is None
