"""Frame helpers shared by every pipeline stage.

Frames are pandas DataFrames. Once a frame leaves aesthetic evaluation it
carries a ``PANEL`` column and, after group assignment, a ``GROUP`` column.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Iterator, Mapping

import numpy as np
import pandas as pd

from plotgrammar.exceptions import ConfigValidationError, RemovedMissingValues

PANEL = "PANEL"
GROUP = "GROUP"
NO_GROUP = -1


def is_empty(data: pd.DataFrame | None) -> bool:
    """Whether ``data`` is missing, has no rows, or has no columns."""
    return data is None or data.shape[0] == 0 or data.shape[1] == 0


def empty_frame() -> pd.DataFrame:
    """An empty frame, the result of any stage given no data."""
    return pd.DataFrame()


def cunion(preferred: pd.DataFrame, other: pd.DataFrame) -> pd.DataFrame:
    """Column union of two frames with equal row counts; ``preferred`` wins on collisions."""
    if preferred.shape[1] == 0:
        return other.copy()
    if other.shape[1] == 0:
        return preferred.copy()
    result = other.copy()
    for column in preferred.columns:
        result[column] = preferred[column].array
    ordered = list(preferred.columns) + [column for column in other.columns if column not in preferred.columns]
    return result.loc[:, ordered]


def split_frame(data: pd.DataFrame, column: str) -> Iterator[tuple[object, pd.DataFrame]]:
    """Yield ``(key, sub_frame)`` pairs for each distinct value of ``column`` in sorted order."""
    for key, sub in data.groupby(column, sort=True, dropna=False):
        yield key, sub


def constant_columns(data: pd.DataFrame, exclude: Iterable[str] = ()) -> dict[str, object]:
    """Columns whose value is identical in every row, keyed to that value."""
    excluded = set(exclude)
    constants: dict[str, object] = {}
    for column in data.columns:
        if column in excluded or data.empty:
            continue
        values = data[column]
        if values.nunique(dropna=False) == 1:
            constants[column] = values.iloc[0]
    return constants


def resolution(values: Iterable[float] | pd.Series, zero: bool = True) -> float:
    """Smallest non-zero gap between distinct values, or 1 when there is none."""
    array = np.asarray(values, dtype=float)
    array = array[~np.isnan(array)]
    if array.size == 0:
        return 1.0
    unique = np.unique(array)
    if zero:
        unique = np.unique(np.append(unique, 0.0))
    if unique.size < 2:
        return 1.0
    return float(np.min(np.diff(unique)))


def remove_missing(data: pd.DataFrame, variables: Iterable[str], *, na_rm: bool = False, name: str = "") -> pd.DataFrame:
    """Drop rows with missing values in ``variables``, warning unless ``na_rm``."""
    present = [variable for variable in variables if variable in data.columns]
    if not present or data.empty:
        return data
    missing = data[present].isna().any(axis=1)
    removed = int(missing.sum())
    if removed == 0:
        return data
    if not na_rm:
        suffix = f" ({name})" if name else ""
        warnings.warn(f"Removed {removed} rows containing missing values{suffix}.", RemovedMissingValues, stacklevel=2)
    return data.loc[~missing]


def is_discrete(values: pd.Series) -> bool:
    """Whether a column holds discrete (non-numeric) values."""
    dtype = values.dtype
    if isinstance(dtype, pd.CategoricalDtype):
        return True
    if pd.api.types.is_bool_dtype(dtype):
        return True
    return not pd.api.types.is_numeric_dtype(dtype)


def fortify(data: object) -> pd.DataFrame | None:
    """Coerce layer or plot data to a DataFrame; None means inherit."""
    if data is None or isinstance(data, pd.DataFrame):
        return data
    if isinstance(data, Mapping):
        return pd.DataFrame(dict(data))
    if isinstance(data, list | tuple) and all(isinstance(record, Mapping) for record in data):
        return pd.DataFrame.from_records(list(data))
    raise ConfigValidationError(
        f"`data` must be a DataFrame, a mapping of columns or a list of records, not {type(data).__name__}"
    )


__all__ = [
    "GROUP",
    "NO_GROUP",
    "PANEL",
    "cunion",
    "constant_columns",
    "empty_frame",
    "fortify",
    "is_discrete",
    "is_empty",
    "remove_missing",
    "resolution",
    "split_frame",
]
