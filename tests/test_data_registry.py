"""Tests for named data sources."""

import pandas as pd
import pytest

from plotgrammar.config.structured_configs import DataConfig
from plotgrammar.data_registry import DictDataRegistry, materialize_data, resolve_data_source
from plotgrammar.exceptions import ConfigValidationError


@pytest.fixture
def frame():
    """Numeric values with a label column."""
    return pd.DataFrame({"value": [1.0, 10.0, 100.0], "label": ["a", "b", "c"]})


class TestDictDataRegistry:
    """Tests for the in-memory registry."""

    def test_register_and_get(self, frame):
        """Test registration and lookup."""
        registry = DictDataRegistry()
        registry.register("main", frame)
        assert "main" in registry
        assert registry.get("main") is frame

    def test_missing(self):
        """Test that unknown sources raise a config error."""
        with pytest.raises(ConfigValidationError, match="'other' is not registered"):
            DictDataRegistry().get("other")


class TestResolveDataSource:
    """Tests for resolving sources from registries or mappings."""

    def test_mapping(self, frame):
        """Test resolution from a plain dict."""
        assert resolve_data_source("main", {"main": frame}) is frame
        with pytest.raises(ConfigValidationError, match="not registered"):
            resolve_data_source("other", {"main": frame})

    def test_registry(self, frame):
        """Test resolution through a registry."""
        assert resolve_data_source("main", DictDataRegistry({"main": frame})) is frame


class TestMaterializeData:
    """Tests for filters and column selection."""

    def test_filters(self, frame):
        """Test query filters, including helper functions."""
        result = materialize_data(DataConfig(filters=["value > 1", "log10(value) < 2"]), {"main": frame})
        assert list(result["label"]) == ["b"]
        assert list(result.index) == [0]

    def test_columns(self, frame):
        """Test column selection and its validation."""
        result = materialize_data(DataConfig(columns=["label"]), {"main": frame})
        assert list(result.columns) == ["label"]
        with pytest.raises(ConfigValidationError, match=r"Columns \['missing'\] are not present"):
            materialize_data(DataConfig(columns=["missing"]), {"main": frame})

    def test_source_is_not_mutated(self, frame):
        """Test that materializing copies the source."""
        result = materialize_data(DataConfig(), {"main": frame})
        result.loc[0, "value"] = -1.0
        assert frame.loc[0, "value"] == 1.0
