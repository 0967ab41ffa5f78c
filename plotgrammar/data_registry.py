"""Named data sources for plots built from configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

import pandas as pd

from plotgrammar.aesthetics import CALC_ENV
from plotgrammar.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from plotgrammar.config.structured_configs import DataConfig


class DataRegistry(Protocol):  # pylint: disable=too-few-public-methods
    """Anything that returns a DataFrame for a source name."""

    def get(self, source_name: str) -> pd.DataFrame:
        """Return the DataFrame registered as ``source_name``."""
        ...  # pylint: disable=unnecessary-ellipsis


class DictDataRegistry:
    """Registry backed by an in-memory mapping."""

    def __init__(self, data: Mapping[str, pd.DataFrame] | None = None) -> None:
        self._data: dict[str, pd.DataFrame] = dict(data or {})

    def register(self, source_name: str, data: pd.DataFrame) -> None:
        """Add or replace ``source_name``."""
        self._data[source_name] = data

    def get(self, source_name: str) -> pd.DataFrame:
        """Get the DataFrame registered as ``source_name``."""
        try:
            return self._data[source_name]
        except KeyError as exc:
            raise ConfigValidationError(f"Data source '{source_name}' is not registered") from exc

    def __contains__(self, source_name: object) -> bool:
        return source_name in self._data


def resolve_data_source(source_name: str, data_registry: DataRegistry | Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """Look up ``source_name`` in a registry or a plain mapping."""
    if isinstance(data_registry, Mapping):
        if source_name not in data_registry:
            raise ConfigValidationError(f"Data source '{source_name}' is not registered")
        return data_registry[source_name]
    return data_registry.get(source_name)


def materialize_data(data_cfg: DataConfig, data_registry: DataRegistry | Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """Resolve a data source, then apply its query filters and column selection."""
    df = resolve_data_source(data_cfg.source, data_registry).copy()
    for expr in data_cfg.filters:
        df = df.query(expr.strip(), engine="python", local_dict=CALC_ENV)
    if data_cfg.columns:
        missing = [column for column in data_cfg.columns if column not in df.columns]
        if missing:
            raise ConfigValidationError(f"Columns {missing} are not present in data source '{data_cfg.source}'")
        df = df.loc[:, data_cfg.columns]
    return df.reset_index(drop=True)


__all__ = ["DataRegistry", "DictDataRegistry", "materialize_data", "resolve_data_source"]
