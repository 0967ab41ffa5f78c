"""Custom exception and warning hierarchy for the plotgrammar package."""

from __future__ import annotations

from collections.abc import Iterable


class PlotGrammarException(Exception):
    """Base exception for plotgrammar."""


class ConfigValidationError(PlotGrammarException):
    """Exception raised when a config is invalid."""


class MissingComponent(PlotGrammarException):
    """Exception raised when a layer is created without a geom, stat or position."""


class UnknownParameter(PlotGrammarException):
    """Exception raised when layer params contain keys no component recognizes."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = list(names)
        super().__init__(f"Unknown parameters: {', '.join(self.names)}")


class UnknownExtension(PlotGrammarException):
    """Exception raised when a geom, stat or position name is not registered."""

    def __init__(self, category: str, name: str) -> None:
        self.category = category
        self.name = name
        super().__init__(f"No {category} called '{name}'.")


class InvalidExtension(PlotGrammarException):
    """Exception raised when a capability object breaks its contract."""


class InvalidMapping(PlotGrammarException):
    """Exception raised when a layer mapping was not created by ``aes()``."""


class AestheticEvaluationError(PlotGrammarException):
    """Exception raised when an aesthetic expression cannot be evaluated."""


class AestheticLengthMismatch(PlotGrammarException):
    """Exception raised when evaluated aesthetics are neither length 1 nor n."""


class MissingRequiredAesthetic(PlotGrammarException):
    """Exception raised when a stat or geom is missing required aesthetics."""

    def __init__(self, capability: str, missing: Iterable[str]) -> None:
        self.capability = capability
        self.missing = list(missing)
        super().__init__(f"{capability} requires the following missing aesthetics: {', '.join(self.missing)}")


class IncompatibleScaleValues(PlotGrammarException):
    """Exception raised when a scale is trained on values of the wrong kind."""


class PlotGrammarWarning(UserWarning):
    """Base category for non-fatal conditions raised during a build."""


class EmptyGroupResult(PlotGrammarWarning):
    """A statistic produced no rows for one group; that group is dropped."""


class InvalidShowLegend(PlotGrammarWarning):
    """``show_legend`` was not a single logical value and was set to False."""


class DeprecatedParameter(PlotGrammarWarning):
    """A deprecated layer parameter was supplied."""


class ScaleConflictWarning(PlotGrammarWarning):
    """Layers imply conflicting scale types for one aesthetic."""


class RemovedMissingValues(PlotGrammarWarning):
    """Rows containing missing values were removed before drawing."""


class NonLinearCoordWarning(PlotGrammarWarning):
    """A geom does not support the current non-linear coordinate system."""
