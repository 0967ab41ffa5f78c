"""Structured plot configuration dataclasses.

A plot config names its data sources, layers, facet, scales and theme. Geoms,
stats and positions are given either by registered name (``"point"``) or as a
hydra ``_target_`` mapping; mapping values are aesthetic expression strings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from plotgrammar.exceptions import ConfigValidationError

FACET_TYPES = ("null", "wrap")
SCALE_TYPES = ("continuous", "discrete")


def _ensure(condition: bool, message: str) -> None:
    """Raise ConfigValidationError if condition is not met."""
    if not condition:
        raise ConfigValidationError(message)


def validate_component(value: Any, field_name: str) -> None:
    """A component is a non-empty name or a mapping with a ``_target_``."""
    if isinstance(value, str):
        _ensure(bool(value.strip()), f"{field_name} must be a non-empty string")
        return
    if isinstance(value, Mapping):
        target = value.get("_target_")
        _ensure(isinstance(target, str) and bool(target.strip()), f"{field_name}._target_ must be a non-empty string")
        return
    raise ConfigValidationError(f"{field_name} must be a name or a `_target_` mapping, got {type(value).__name__}")


def validate_mapping(mapping: Any, field_name: str) -> None:
    """Aesthetic mappings are string-keyed mappings."""
    _ensure(isinstance(mapping, Mapping), f"{field_name} must be a mapping of aesthetic to expression")
    for name in mapping:
        _ensure(isinstance(name, str) and bool(name), f"{field_name} keys must be aesthetic names, got {name!r}")


@dataclass
class DataConfig:
    """Logical data source with lightweight filtering."""

    source: str = "main"
    filters: list[str] = field(default_factory=list)
    columns: list[str] | None = None

    def __post_init__(self) -> None:
        _ensure(isinstance(self.source, str) and bool(self.source), "DataConfig.source must be a non-empty string")
        _ensure(all(isinstance(expr, str) for expr in self.filters), "DataConfig.filters must be query strings")


@dataclass
class LayerConfig:  # pylint: disable=too-many-instance-attributes
    """One layer of a configured plot."""

    geom: Any = "point"
    stat: Any = "identity"
    position: Any = "identity"
    mapping: dict[str, Any] = field(default_factory=dict)
    data: DataConfig | None = None
    params: dict[str, Any] = field(default_factory=dict)
    inherit_aes: bool = True
    subset: str | list[str] | None = None
    show_legend: Any = None

    def __post_init__(self) -> None:
        validate_layer_config(self)


def validate_layer_config(cfg: LayerConfig) -> None:
    """Validate a LayerConfig."""
    for component in ("geom", "stat", "position"):
        validate_component(getattr(cfg, component), f"LayerConfig.{component}")
    validate_mapping(cfg.mapping, "LayerConfig.mapping")
    _ensure(isinstance(cfg.params, Mapping), "LayerConfig.params must be a mapping")
    _ensure(isinstance(cfg.inherit_aes, bool), "LayerConfig.inherit_aes must be a boolean")


@dataclass
class FacetConfig:
    """Faceting: ``null`` for a single panel or ``wrap`` over ``facets``."""

    type: str = "null"
    facets: list[str] = field(default_factory=list)
    ncol: int | None = None
    nrow: int | None = None

    def __post_init__(self) -> None:
        validate_facet_config(self)


def validate_facet_config(cfg: FacetConfig) -> None:
    """Validate a FacetConfig."""
    _ensure(cfg.type in FACET_TYPES, f"FacetConfig.type must be one of {FACET_TYPES}, got '{cfg.type}'")
    if cfg.type == "wrap":
        _ensure(bool(cfg.facets), "FacetConfig.facets is required when type='wrap'")
    for name in ("ncol", "nrow"):
        value = getattr(cfg, name)
        _ensure(value is None or (isinstance(value, int) and value > 0), f"FacetConfig.{name} must be a positive int")


@dataclass
class ScaleConfig:  # pylint: disable=too-many-instance-attributes
    """A user-supplied scale for one aesthetic."""

    aesthetic: str
    type: str = "continuous"
    trans: str = "identity"
    limits: list[Any] | None = None
    range: list[float] | None = None
    palette: list[Any] | None = None
    expand: float | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        validate_scale_config(self)


def validate_scale_config(cfg: ScaleConfig) -> None:
    """Validate a ScaleConfig."""
    _ensure(bool(cfg.aesthetic), "ScaleConfig.aesthetic must be a non-empty string")
    _ensure(cfg.type in SCALE_TYPES, f"ScaleConfig.type must be one of {SCALE_TYPES}, got '{cfg.type}'")
    if cfg.type == "discrete":
        _ensure(cfg.trans == "identity", "ScaleConfig.trans applies to continuous scales only")
        _ensure(cfg.range is None, "ScaleConfig.range applies to continuous scales only")
    else:
        _ensure(cfg.palette is None, "ScaleConfig.palette applies to discrete scales only")
    if cfg.range is not None:
        _ensure(len(cfg.range) == 2, "ScaleConfig.range must have exactly two values")
    if cfg.limits is not None and cfg.type == "continuous":
        _ensure(len(cfg.limits) == 2, "ScaleConfig.limits of a continuous scale must have exactly two values")


@dataclass
class PlotConfig:  # pylint: disable=too-many-instance-attributes
    """Top-level configuration for one plot."""

    data: DataConfig | None = field(default_factory=DataConfig)
    mapping: dict[str, Any] = field(default_factory=dict)
    layers: list[LayerConfig] = field(default_factory=list)
    facet: FacetConfig = field(default_factory=FacetConfig)
    scales: list[ScaleConfig] = field(default_factory=list)
    theme: dict[str, Any] = field(default_factory=dict)
    env: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_plot_config(self)


def validate_plot_config(cfg: PlotConfig) -> None:
    """Validate a PlotConfig."""
    _ensure(cfg.layers is not None, "PlotConfig.layers must be a list")
    validate_mapping(cfg.mapping, "PlotConfig.mapping")
    aesthetics = [scale.aesthetic for scale in cfg.scales]
    duplicates = sorted({name for name in aesthetics if aesthetics.count(name) > 1})
    _ensure(not duplicates, f"PlotConfig.scales defines more than one scale for {duplicates}")
    for index, layer_cfg in enumerate(cfg.layers):
        if layer_cfg.data is None:
            _ensure(cfg.data is not None, f"PlotConfig.layers[{index}] has no data and the plot has no default data")


__all__ = [
    "DataConfig",
    "FacetConfig",
    "LayerConfig",
    "PlotConfig",
    "ScaleConfig",
    "validate_component",
    "validate_facet_config",
    "validate_layer_config",
    "validate_mapping",
    "validate_plot_config",
    "validate_scale_config",
]
