"""Plot configuration: structured configs and the loader that turns them into plots."""

from plotgrammar.config.plot_loader import plot_config_from_dict, plot_from_config
from plotgrammar.config.structured_configs import DataConfig, FacetConfig, LayerConfig, PlotConfig, ScaleConfig

__all__ = [
    "DataConfig",
    "FacetConfig",
    "LayerConfig",
    "PlotConfig",
    "ScaleConfig",
    "plot_config_from_dict",
    "plot_from_config",
]
