"""Tests for the plotgrammar logger module."""

import logging

from plotgrammar.logger import PLOTGRAMMAR_LOGGER


def test_plotgrammar_logger() -> None:
    """Test that the logger is created with the correct name."""
    assert PLOTGRAMMAR_LOGGER.name == "plotgrammar"
    assert isinstance(PLOTGRAMMAR_LOGGER, logging.Logger)


def test_module_loggers_are_children() -> None:
    """Test that module loggers propagate to the package logger."""
    child = logging.getLogger("plotgrammar.build")
    assert child.parent is PLOTGRAMMAR_LOGGER
