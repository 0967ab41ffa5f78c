"""Tests for theme merging."""

import pytest

from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.themes import DEFAULT_ELEMENTS, Theme, add_theme, theme, theme_default


class TestAddTheme:
    """Tests for the complete/incomplete merge rules."""

    def test_incomplete_plus_incomplete_is_right_biased_union(self):
        """Test that the right operand wins on shared elements."""
        merged = theme(title="a", font_size=10) + theme(title="b", width=300)
        assert not merged.complete
        assert dict(merged.elements) == {"title": "b", "font_size": 10, "width": 300}

    def test_incomplete_plus_complete(self):
        """Test that the complete operand replaces, with non-null overrides laid over it."""
        merged = theme(font_size=20, title=None) + theme_default(title="base")
        assert merged.complete
        assert merged.get("font_size") == 20
        assert merged.get("title") == "base"

    def test_complete_plus_incomplete(self):
        """Test that overrides are laid over a complete theme."""
        merged = theme_default() + theme(background="white")
        assert merged.complete
        assert merged.get("background") == "white"
        assert merged.get("font_size") == DEFAULT_ELEMENTS["font_size"]

    def test_complete_plus_complete(self):
        """Test that the right complete theme wins outright."""
        right = theme_default(font_size=8)
        assert add_theme(theme_default(font_size=30), right) is right

    def test_adding_non_theme(self):
        """Test that only themes can be added."""
        with pytest.raises(ConfigValidationError, match="Can't add a dict"):
            add_theme(theme(), {"title": "x"})


class TestTheme:
    """Tests for theme construction."""

    def test_unknown_element(self):
        """Test that unknown elements are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown theme elements: colour_bar"):
            Theme({"colour_bar": True})

    def test_elements_are_read_only(self):
        """Test immutability of the element mapping."""
        with pytest.raises(TypeError):
            theme(title="x").elements["title"] = "y"  # type: ignore[index]

    def test_get_default(self):
        """Test fallbacks for unset elements."""
        assert theme().get("width", 100) == 100
