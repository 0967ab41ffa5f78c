"""Plotgrammar logger.

This module provides the main logger instance for the plotgrammar package.
It configures Python's warnings system to be captured by the logging system
and creates a logger instance named "plotgrammar" for use throughout the package.
"""

import logging

# Route ``warnings.warn`` output (EmptyGroupResult, InvalidShowLegend, ...) to
# the logging system so it is handled consistently with other log messages.
# This is a module-level side effect that occurs on import.
logging.captureWarnings(True)

# Main logger instance for the plotgrammar package.
# It can be imported and used directly: `from plotgrammar.logger import PLOTGRAMMAR_LOGGER`
PLOTGRAMMAR_LOGGER: logging.Logger = logging.getLogger("plotgrammar")
