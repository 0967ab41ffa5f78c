"""Group assignment.

Rows sharing the same panel and the same values of every discrete aesthetic
form one group; an explicit ``group`` aesthetic joins the key even when it is
numeric. Groups drive per-group statistics and per-group drawing.
"""

from __future__ import annotations

import pandas as pd

from plotgrammar.frames import GROUP, NO_GROUP, PANEL, is_discrete

_NOT_GROUPING = {"label", PANEL, GROUP}


def grouping_columns(data: pd.DataFrame) -> list[str]:
    """Columns whose values define group identity, in frame order."""
    columns = [column for column in data.columns if column not in _NOT_GROUPING and is_discrete(data[column])]
    if "group" in data.columns and "group" not in columns:
        columns.append("group")
    return columns


def add_group(data: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``data`` with a ``GROUP`` column.

    Every distinct ``(PANEL, discrete values)`` key receives an integer id
    starting at 1, assigned in sorted key order with missing values last. With
    no discrete aesthetics every row is ungrouped (``GROUP = -1``).
    """
    result = data.copy()
    if result.shape[0] == 0:
        result[GROUP] = pd.Series(dtype="int64")
        return result

    columns = grouping_columns(result)
    if not columns:
        result[GROUP] = NO_GROUP
        return result

    keys = [PANEL] if PANEL in result.columns else []
    keys += columns
    key_frame = pd.DataFrame({key: _sortable(result[key]) for key in keys}, index=result.index)
    ids = key_frame.groupby(keys, sort=True, dropna=False, observed=True).ngroup() + 1
    result[GROUP] = ids.astype("int64")
    return result


def _sortable(values: pd.Series) -> pd.Series:
    # mixed object columns (e.g. 1 and "a") cannot be ordered directly
    if values.dtype == object:
        return values.map(lambda value: value if pd.isna(value) else str(value))
    return values


__all__ = ["add_group", "grouping_columns"]
