"""Shared fixtures for plotgrammar tests."""

import pandas as pd
import pytest

from plotgrammar.facets import FacetNull
from plotgrammar.panel import PanelContext


@pytest.fixture
def xy_data() -> pd.DataFrame:
    """Two rows of numeric x and y."""
    return pd.DataFrame({"x": [1, 2], "y": [2, 4]})


@pytest.fixture
def category_data() -> pd.DataFrame:
    """Numeric x/y with a two-level category column."""
    return pd.DataFrame({"x": [1, 2, 3, 4], "y": [2, 4, 6, 8], "category": ["a", "b", "a", "b"]})


@pytest.fixture
def panel() -> PanelContext:
    """A single-panel context with no scales registered yet."""
    return PanelContext(FacetNull().compute_layout([]))
