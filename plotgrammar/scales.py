"""Scales: per-aesthetic domain training, transformation and mapping.

Scales are the only state shared across the layers of one build. Two mutation
points exist: registering default scales while aesthetics are evaluated, and
training ranges on layer data. Everything else reads the scales.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
import pandas as pd
from plotly.colors import find_intermediate_color, hex_to_rgb, label_rgb
from plotly.colors import qualitative as qualitative_colors

from plotgrammar.exceptions import ConfigValidationError, IncompatibleScaleValues, ScaleConflictWarning

LOGGER = logging.getLogger(__name__)

X_AESTHETICS = ("x", "xmin", "xmax", "xend", "xintercept", "xlower", "xmiddle", "xupper")
Y_AESTHETICS = ("y", "ymin", "ymax", "yend", "yintercept", "lower", "middle", "upper")
NON_POSITION_AESTHETICS = ("colour", "fill", "size", "alpha", "shape", "linetype")

CONTINUOUS = "continuous"
DISCRETE = "discrete"

NA_COLOUR = "#7F7F7F"
GRADIENT_LOW = "#132B43"
GRADIENT_HIGH = "#56B1F7"
SHAPE_PALETTE = (16, 17, 15, 3, 7, 8)
LINETYPE_PALETTE = ("solid", "dash", "dot", "dashdot", "longdash", "longdashdot")

_TRANSFORMS = {
    "identity": (lambda values: values, lambda values: values),
    "log10": (np.log10, lambda values: np.power(10.0, values)),
    "sqrt": (np.sqrt, np.square),
    "reverse": (np.negative, np.negative),
}


def scale_key(aesthetic: str) -> str | None:
    """Name of the scale responsible for ``aesthetic``; None if it is never scaled."""
    if aesthetic in X_AESTHETICS:
        return "x"
    if aesthetic in Y_AESTHETICS:
        return "y"
    if aesthetic in NON_POSITION_AESTHETICS:
        return aesthetic
    return None


def implied_kind(values: Any) -> str:
    """Scale kind implied by evaluated values: numeric first value means continuous."""
    series = values if isinstance(values, pd.Series) else pd.Series(values)
    if isinstance(series.dtype, pd.CategoricalDtype) or pd.api.types.is_bool_dtype(series.dtype):
        return DISCRETE
    if pd.api.types.is_numeric_dtype(series.dtype):
        return CONTINUOUS
    present = series.dropna()
    if present.empty:
        return DISCRETE
    first = present.iloc[0]
    return CONTINUOUS if _is_number(first) else DISCRETE


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float | np.number) and not isinstance(value, bool | np.bool_)


class Scale:
    """Base class shared by continuous and discrete scales."""

    kind: str = ""

    def __init__(self, aesthetic: str, *, limits: Iterable[Any] | None = None, name: str | None = None) -> None:
        key = scale_key(aesthetic)
        if key is None:
            raise ConfigValidationError(f"Aesthetic '{aesthetic}' does not take a scale")
        self.aesthetic = key
        self.name = name
        self.limits = list(limits) if limits is not None else None

    @property
    def is_position(self) -> bool:
        """Whether this scale controls a positional aesthetic."""
        return self.aesthetic in ("x", "y")

    @property
    def aesthetics(self) -> tuple[str, ...]:
        """Frame columns handled by this scale."""
        if self.aesthetic == "x":
            return X_AESTHETICS
        if self.aesthetic == "y":
            return Y_AESTHETICS
        return (self.aesthetic,)

    def train(self, values: Any) -> None:
        """Extend the trained domain with ``values``."""
        raise NotImplementedError

    def transform(self, values: Any) -> Any:
        """Apply the scale transformation to raw values."""
        return values

    def map(self, values: Any) -> Any:
        """Map transformed values to the aesthetic's output space."""
        raise NotImplementedError

    def extent(self) -> tuple[float, float] | None:
        """Unexpanded continuous extent, or None before training."""
        raise NotImplementedError

    def dimension(self) -> tuple[float, float]:
        """Expanded continuous extent of a position scale."""
        raise NotImplementedError

    def reset(self) -> None:
        """Forget trained continuous ranges; levels of discrete scales persist."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.aesthetic!r})"


class ContinuousScale(Scale):
    """Scale for numeric values with an optional transformation."""

    kind = CONTINUOUS

    def __init__(
        self,
        aesthetic: str,
        *,
        trans: str = "identity",
        limits: Iterable[float] | None = None,
        output_range: tuple[float, float] | None = None,
        expand: float = 0.05,
        name: str | None = None,
    ) -> None:
        super().__init__(aesthetic, limits=limits, name=name)
        if trans not in _TRANSFORMS:
            raise ConfigValidationError(f"Unknown scale transformation '{trans}'; expected one of {sorted(_TRANSFORMS)}")
        self.trans = trans
        self.expand = expand
        self.output_range = output_range or _default_output_range(self.aesthetic)
        self.range: tuple[float, float] | None = None

    def transform(self, values: Any) -> Any:
        forward, _ = _TRANSFORMS[self.trans]
        numeric = _numeric(values, self.aesthetic)
        with np.errstate(divide="ignore", invalid="ignore"):
            return forward(numeric)

    def inverse(self, values: Any) -> Any:
        """Undo the scale transformation."""
        _, backward = _TRANSFORMS[self.trans]
        return backward(np.asarray(values, dtype=float))

    def train(self, values: Any) -> None:
        numeric = _numeric(values, self.aesthetic)
        finite = numeric[np.isfinite(numeric)]
        if finite.size == 0:
            return
        low, high = float(finite.min()), float(finite.max())
        if self.range is not None:
            low, high = min(low, self.range[0]), max(high, self.range[1])
        self.range = (low, high)

    def reset(self) -> None:
        self.range = None

    def extent(self) -> tuple[float, float] | None:
        """User limits (transformed) if set, otherwise the trained range."""
        if self.limits is not None:
            low, high = self.transform(np.asarray(self.limits, dtype=float))
            return float(low), float(high)
        return self.range

    def map(self, values: Any) -> Any:
        if self.is_position or self.aesthetic in ("shape", "linetype"):
            return values
        numeric = np.asarray(values, dtype=float)
        rescaled = _rescale(numeric, self.extent())
        if self.aesthetic in ("colour", "fill"):
            return np.asarray([_gradient(value) for value in rescaled], dtype=object)
        low, high = self.output_range
        return low + rescaled * (high - low)

    def dimension(self) -> tuple[float, float]:
        extent = self.extent() or (0.0, 1.0)
        low, high = extent
        span = high - low
        if span == 0:
            return low - 0.5, high + 0.5
        return low - span * self.expand, high + span * self.expand


class DiscreteScale(Scale):
    """Scale for categorical values; position levels map to 1..k."""

    kind = DISCRETE

    def __init__(
        self,
        aesthetic: str,
        *,
        limits: Iterable[Any] | None = None,
        palette: list[Any] | None = None,
        expand: float = 0.6,
        name: str | None = None,
    ) -> None:
        super().__init__(aesthetic, limits=limits, name=name)
        self.palette = palette
        self.expand = expand
        self.levels: list[Any] = []
        self.continuous_range: tuple[float, float] | None = None

    def train(self, values: Any) -> None:
        if isinstance(values, pd.Series) and isinstance(values.dtype, pd.CategoricalDtype):
            candidates = list(values.cat.categories)
        elif isinstance(values, pd.Categorical):
            candidates = list(values.categories)
        else:
            series = pd.Series(values).dropna()
            if series.empty:
                return
            if series.map(_is_number).all():
                numeric = series.to_numpy(dtype=float)
                low, high = float(numeric.min()), float(numeric.max())
                if self.continuous_range is not None:
                    low = min(low, self.continuous_range[0])
                    high = max(high, self.continuous_range[1])
                self.continuous_range = (low, high)
                return
            candidates = sorted(series.unique(), key=str)
        self.levels.extend(level for level in candidates if level not in self.levels)

    def reset(self) -> None:
        self.continuous_range = None

    def domain(self) -> list[Any]:
        """Levels in display order."""
        return list(self.limits) if self.limits is not None else list(self.levels)

    def map(self, values: Any) -> Any:
        series = pd.Series(values, dtype=object) if not isinstance(values, pd.Series) else values.astype(object)
        if series.map(_is_number).all():
            return values
        positions = {level: index for index, level in enumerate(self.domain())}
        if self.is_position:
            return np.asarray([float(positions[value] + 1) if value in positions else np.nan for value in series])
        palette = self._palette(len(positions))
        mapped = [palette[positions[value] % len(palette)] if value in positions else None for value in series]
        if self.aesthetic in ("colour", "fill"):
            mapped = [NA_COLOUR if value is None else value for value in mapped]
        return np.asarray(mapped, dtype=object)

    def _palette(self, n: int) -> list[Any]:
        if self.palette:
            return list(self.palette)
        if self.aesthetic in ("colour", "fill"):
            return list(qualitative_colors.Plotly)
        if self.aesthetic == "shape":
            return list(SHAPE_PALETTE)
        if self.aesthetic == "linetype":
            return list(LINETYPE_PALETTE)
        if self.aesthetic in ("size", "alpha"):
            low, high = _default_output_range(self.aesthetic)
            return list(np.linspace(low, high, max(n, 1)))
        return self.domain() or [None]

    def extent(self) -> tuple[float, float] | None:
        count = len(self.domain())
        low, high = (1.0, float(count)) if count else (np.inf, -np.inf)
        if self.continuous_range is not None:
            low, high = min(low, self.continuous_range[0]), max(high, self.continuous_range[1])
        if not np.isfinite(low):
            return None
        return low, high

    def dimension(self) -> tuple[float, float]:
        extent = self.extent()
        if extent is None:
            return 0.0, 1.0
        return extent[0] - self.expand, extent[1] + self.expand


def _default_output_range(aesthetic: str) -> tuple[float, float]:
    if aesthetic == "size":
        return 1.0, 6.0
    if aesthetic == "alpha":
        return 0.1, 1.0
    return 0.0, 1.0


def _numeric(values: Any, aesthetic: str) -> np.ndarray:
    series = values if isinstance(values, pd.Series) else pd.Series(values)
    dtype = series.dtype
    if pd.api.types.is_numeric_dtype(dtype) and not pd.api.types.is_bool_dtype(dtype):
        return series.to_numpy(dtype=float, na_value=np.nan)
    if isinstance(dtype, pd.CategoricalDtype) or not series.dropna().map(_is_number).all():
        raise IncompatibleScaleValues(f"Discrete value supplied to continuous scale '{aesthetic}'")
    return series.to_numpy(dtype=float, na_value=np.nan)


def _rescale(values: np.ndarray, extent: tuple[float, float] | None) -> np.ndarray:
    if extent is None:
        return np.full(values.shape, 0.5)
    low, high = extent
    if high == low:
        return np.full(values.shape, 0.5)
    return (values - low) / (high - low)


def _gradient(position: float) -> str:
    if not np.isfinite(position):
        return NA_COLOUR
    low, high = hex_to_rgb(GRADIENT_LOW), hex_to_rgb(GRADIENT_HIGH)
    blended = find_intermediate_color(low, high, float(np.clip(position, 0.0, 1.0)), colortype="tuple")
    return label_rgb(tuple(int(round(channel)) for channel in blended))


class ScaleSet:
    """The scales of one plot, keyed by the aesthetic they control."""

    def __init__(self, scales: Iterable[Scale] = ()) -> None:
        self._scales: dict[str, Scale] = {}
        for scale in scales:
            self.add(scale)

    def __contains__(self, aesthetic: object) -> bool:
        return isinstance(aesthetic, str) and scale_key(aesthetic) in self._scales

    def __len__(self) -> int:
        return len(self._scales)

    def add(self, scale: Scale) -> None:
        """Add ``scale``, replacing any scale for the same aesthetic."""
        if scale.aesthetic in self._scales:
            LOGGER.info("[scales] scale for '%s' is being replaced", scale.aesthetic)
        self._scales[scale.aesthetic] = scale

    def get(self, aesthetic: str) -> Scale | None:
        """Scale responsible for ``aesthetic``, if any."""
        key = scale_key(aesthetic)
        return self._scales.get(key) if key is not None else None

    def input(self) -> list[str]:
        """Aesthetic names with a registered scale."""
        return list(self._scales)

    def position_scales(self) -> list[Scale]:
        """Scales for the x and y aesthetics."""
        return [scale for scale in self._scales.values() if scale.is_position]

    def non_position_scales(self) -> list[Scale]:
        """Scales for colour, size and the other non-positional aesthetics."""
        return [scale for scale in self._scales.values() if not scale.is_position]

    def add_defaults(self, evaluated: Mapping[str, Any]) -> None:
        """Register a default scale for every evaluated aesthetic that lacks one.

        When an aesthetic already has a scale of a different kind, the first
        registered scale wins and a warning is issued.
        """
        for aesthetic, values in evaluated.items():
            key = scale_key(aesthetic)
            if key is None:
                continue
            kind = implied_kind(values)
            existing = self._scales.get(key)
            if existing is None:
                self._scales[key] = ContinuousScale(key) if kind == CONTINUOUS else DiscreteScale(key)
                LOGGER.debug("[scales] registered %s scale for '%s'", kind, key)
            elif existing.kind != kind:
                warnings.warn(
                    f"Aesthetic '{aesthetic}' implies a {kind} scale but a {existing.kind} scale for '{key}' "
                    "is already registered; keeping the first.",
                    ScaleConflictWarning,
                    stacklevel=2,
                )

    def add_missing(self, aesthetics: Iterable[str]) -> None:
        """Register continuous scales for aesthetics that still have none."""
        for aesthetic in aesthetics:
            key = scale_key(aesthetic)
            if key is not None and key not in self._scales:
                self._scales[key] = ContinuousScale(key)

    def transform_df(self, data: pd.DataFrame) -> pd.DataFrame:
        """Apply every continuous scale transformation to matching columns."""
        result = data.copy()
        for column in data.columns:
            scale = self.get(column)
            if isinstance(scale, ContinuousScale) and scale.trans != "identity":
                result[column] = scale.transform(data[column])
        return result

    def train_df(self, data: pd.DataFrame, scales: Iterable[Scale] | None = None) -> None:
        """Train ``scales`` (default: all) on the matching columns of ``data``."""
        for scale in self._scales.values() if scales is None else scales:
            for column in scale.aesthetics:
                if column in data.columns:
                    scale.train(data[column])

    def map_df(self, data: pd.DataFrame, scales: Iterable[Scale] | None = None) -> pd.DataFrame:
        """Map the matching columns of ``data`` through ``scales`` (default: all)."""
        result = data.copy()
        for scale in self._scales.values() if scales is None else scales:
            for column in scale.aesthetics:
                if column in data.columns:
                    result[column] = scale.map(data[column])
        return result

    def reset_position(self) -> None:
        """Reset the trained ranges of the position scales."""
        for scale in self.position_scales():
            scale.reset()


__all__ = [
    "CONTINUOUS",
    "DISCRETE",
    "ContinuousScale",
    "DiscreteScale",
    "Scale",
    "ScaleSet",
    "X_AESTHETICS",
    "Y_AESTHETICS",
    "implied_kind",
    "scale_key",
]
