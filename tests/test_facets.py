"""Tests for facet layouts."""

import pandas as pd
import pytest

from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.facets import COL, ROW, FacetNull, FacetWrap
from plotgrammar.frames import PANEL


class TestFacetNull:
    """Tests for the single-panel facet."""

    def test_layout(self):
        """Test the one-panel layout."""
        layout = FacetNull().compute_layout([None])
        assert layout.to_dict("records") == [{PANEL: 1, ROW: 1, COL: 1}]

    def test_map_data(self):
        """Test that every row lands in panel 1 without mutating the input."""
        data = pd.DataFrame({"x": [1, 2]})
        result = FacetNull().map_data(data, FacetNull().compute_layout([data]))
        assert list(result[PANEL]) == [1, 1]
        assert PANEL not in data.columns


class TestFacetWrap:
    """Tests for wrapped facets."""

    def test_layout_sorted_and_wrapped(self):
        """Test panel numbering and grid placement."""
        data = pd.DataFrame({"g": ["c", "a", "b", "d", "a"]})
        layout = FacetWrap("g").compute_layout([data])
        assert list(layout["g"]) == ["a", "b", "c", "d"]
        assert list(layout[PANEL]) == [1, 2, 3, 4]
        assert list(layout[ROW]) == [1, 1, 2, 2]
        assert list(layout[COL]) == [1, 2, 1, 2]

    def test_ncol(self):
        """Test a fixed number of columns."""
        data = pd.DataFrame({"g": [1, 2, 3]})
        layout = FacetWrap(["g"], ncol=3).compute_layout([data])
        assert list(layout[ROW]) == [1, 1, 1]

    def test_map_data_assigns_panels(self):
        """Test that rows are matched to their panel."""
        data = pd.DataFrame({"g": ["b", "a"], "x": [1, 2]})
        facet = FacetWrap("g")
        layout = facet.compute_layout([data])
        result = facet.map_data(data, layout)
        assert list(result[PANEL]) == [2, 1]
        assert list(result["x"]) == [1, 2]

    def test_layer_without_facet_vars_repeats(self):
        """Test that data lacking the faceting variables appears in every panel."""
        facet = FacetWrap("g")
        layout = facet.compute_layout([pd.DataFrame({"g": ["a", "b"]})])
        result = facet.map_data(pd.DataFrame({"x": [5]}), layout)
        assert sorted(result[PANEL]) == [1, 2]

    def test_requires_facets(self):
        """Test validation of the constructor."""
        with pytest.raises(ConfigValidationError, match="at least one"):
            FacetWrap([])
        with pytest.raises(ConfigValidationError, match="ncol must be positive"):
            FacetWrap("g", ncol=0)

    def test_no_layer_has_facet_vars(self):
        """Test that a layout cannot be built without the variables."""
        with pytest.raises(ConfigValidationError, match="No layer has all faceting variables"):
            FacetWrap("g").compute_layout([pd.DataFrame({"x": [1]})])

    def test_too_small_grid(self):
        """Test that panels must fit the requested grid."""
        data = pd.DataFrame({"g": [1, 2, 3]})
        with pytest.raises(ConfigValidationError, match="do not fit"):
            FacetWrap("g", ncol=1, nrow=2).compute_layout([data])
