"""Turn plot configurations (dicts, YAML-loaded DictConfigs) into :class:`Plot` objects."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

import hydra
import pandas as pd
from omegaconf import DictConfig, OmegaConf

from plotgrammar.aesthetics import aes
from plotgrammar.config.structured_configs import DataConfig, FacetConfig, LayerConfig, PlotConfig, ScaleConfig
from plotgrammar.data_registry import DataRegistry, materialize_data
from plotgrammar.exceptions import ConfigValidationError
from plotgrammar.facets import Facet, FacetNull, FacetWrap
from plotgrammar.geoms import Geom
from plotgrammar.layer import Layer, layer
from plotgrammar.plot import Plot
from plotgrammar.positions import Position
from plotgrammar.scales import ContinuousScale, DiscreteScale, Scale
from plotgrammar.stats import Stat
from plotgrammar.themes import theme

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _get(obj: Any, key: str, default: Any = None) -> Any:
    """Get a value from a dict, DictConfig or attribute-style object."""
    if isinstance(obj, Mapping | DictConfig):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _to_container(value: Any) -> Any:
    if isinstance(value, DictConfig):
        return OmegaConf.to_container(value, resolve=True)
    return value


def plot_config_from_dict(config: Mapping[str, Any] | DictConfig) -> PlotConfig:
    """Convert a plain or OmegaConf mapping into a validated PlotConfig."""
    config = _to_container(config)
    if not isinstance(config, Mapping):
        raise ConfigValidationError(f"Plot config must be a mapping, got {type(config).__name__}")
    unknown = sorted(set(config) - {"data", "mapping", "layers", "facet", "scales", "theme", "env"})
    if unknown:
        raise ConfigValidationError(f"Unknown plot config keys: {unknown}")
    data = _get(config, "data", {})
    facet = _get(config, "facet")
    return PlotConfig(
        data=None if data is None else _data_config(data),
        mapping=dict(_get(config, "mapping") or {}),
        layers=[_layer_config(layer_cfg) for layer_cfg in _get(config, "layers") or []],
        facet=FacetConfig(**facet) if facet else FacetConfig(),
        scales=[ScaleConfig(**scale_cfg) for scale_cfg in _get(config, "scales") or []],
        theme=dict(_get(config, "theme") or {}),
        env=dict(_get(config, "env") or {}),
    )


def _data_config(data: Any) -> DataConfig:
    if isinstance(data, str):
        return DataConfig(source=data)
    return DataConfig(
        source=_get(data, "source", "main"),
        filters=list(_get(data, "filters") or []),
        columns=_get(data, "columns"),
    )


def _layer_config(layer_cfg: Mapping[str, Any]) -> LayerConfig:
    data = _get(layer_cfg, "data")
    fields = dict(layer_cfg)
    fields["data"] = None if data is None else _data_config(data)
    try:
        return LayerConfig(**fields)
    except TypeError as exc:
        raise ConfigValidationError(f"Invalid layer config: {exc}") from exc


def plot_from_config(
    config: Mapping[str, Any] | DictConfig | PlotConfig,
    data_registry: DataRegistry | Mapping[str, pd.DataFrame],
) -> Plot:
    """Build a :class:`Plot` from configuration, resolving data through ``data_registry``."""
    cfg = config if isinstance(config, PlotConfig) else plot_config_from_dict(config)
    plot_data = materialize_data(cfg.data, data_registry) if cfg.data is not None else None
    plot = Plot(
        data=plot_data,
        mapping=aes(**cfg.mapping),
        layers=tuple(build_layer(layer_cfg, data_registry) for layer_cfg in cfg.layers),
        facet=build_facet(cfg.facet),
        scales=tuple(build_scale(scale_cfg) for scale_cfg in cfg.scales),
        env=cfg.env,
    )
    if cfg.theme:
        plot = plot.with_theme(theme(**cfg.theme))
    LOGGER.info("[config] loaded plot with %d layers", len(plot.layers))
    return plot


def build_layer(cfg: LayerConfig, data_registry: DataRegistry | Mapping[str, pd.DataFrame]) -> Layer:
    """Create a layer from its config."""
    return layer(
        geom=_component(cfg.geom, Geom),
        stat=_component(cfg.stat, Stat),
        position=_component(cfg.position, Position),
        data=materialize_data(cfg.data, data_registry) if cfg.data is not None else None,
        mapping=aes(**cfg.mapping),
        params=dict(cfg.params),
        inherit_aes=cfg.inherit_aes,
        subset=cfg.subset,
        show_legend=cfg.show_legend,
    )


def _component(value: Any, expected_type: type[T]) -> str | T:
    """Registered names pass through; ``_target_`` mappings are instantiated with hydra."""
    if isinstance(value, str):
        return value
    obj = hydra.utils.instantiate(dict(value))
    if not isinstance(obj, expected_type):
        raise ConfigValidationError(
            f"{value['_target_']} must instantiate a {expected_type.__name__}, got {type(obj).__name__}"
        )
    LOGGER.debug("[config] instantiated %s", type(obj).__name__)
    return obj


def build_facet(cfg: FacetConfig) -> Facet:
    """Create the facet described by ``cfg``."""
    if cfg.type == "wrap":
        return FacetWrap(cfg.facets, ncol=cfg.ncol, nrow=cfg.nrow)
    return FacetNull()


def build_scale(cfg: ScaleConfig) -> Scale:
    """Create the scale described by ``cfg``."""
    if cfg.type == "discrete":
        kwargs: dict[str, Any] = {"limits": cfg.limits, "palette": cfg.palette, "name": cfg.name}
        if cfg.expand is not None:
            kwargs["expand"] = cfg.expand
        return DiscreteScale(cfg.aesthetic, **kwargs)
    kwargs = {
        "trans": cfg.trans,
        "limits": cfg.limits,
        "output_range": tuple(cfg.range) if cfg.range is not None else None,
        "name": cfg.name,
    }
    if cfg.expand is not None:
        kwargs["expand"] = cfg.expand
    return ContinuousScale(cfg.aesthetic, **kwargs)


__all__ = ["build_facet", "build_layer", "build_scale", "plot_config_from_dict", "plot_from_config"]
