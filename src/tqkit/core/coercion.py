"""
Shape coercion between tidy tables and time-indexed frames.

A tidy table carries one row per observation and a date column; a time series
is a frame indexed by a sorted DatetimeIndex holding numeric columns only.
Wrapped functions operate on the latter; users work with the former.

Quick Start:
    from tqkit.core.coercion import as_timeseries, as_tidy

    ts = as_timeseries(prices, select=['close', 'volume'])
    tidy = as_tidy(ts)

Common Patterns:
    # Pattern 1: Grouped work
    for keys, group in split_groups(prices, 'symbol'):
        ts = as_timeseries(group, select='adjusted')

    # Pattern 2: One column per symbol
    wide = to_wide(prices, id_col='symbol', value_col='adjusted')
    long = to_long(wide, id_col='symbol', value_name='adjusted')
"""

import warnings
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import pandas as pd
from pandas.api.types import is_datetime64_any_dtype, is_numeric_dtype, is_bool_dtype
from pandas.core.groupby import DataFrameGroupBy

from tqkit.exceptions import CoercionError, ColumnError

DEFAULT_DATE_COLUMN = 'date'

Columns = Union[str, Sequence[str], None]


def as_column_list(columns: Columns) -> List[str]:
    """Normalise a column name or sequence of names into a list."""
    if columns is None:
        return []
    if isinstance(columns, str):
        return [columns]
    return list(columns)


def find_date_column(frame: pd.DataFrame, date_col: Optional[str] = None) -> str:
    """
    Locate the column holding observation timestamps.

    Args:
        frame: Tidy table
        date_col: Explicit column name. If None, a column named 'date' is used,
                  else the first datetime64 column.

    Returns:
        Name of the date column

    Raises:
        ColumnError: If an explicit date_col is missing
        CoercionError: If no date column can be found
    """
    if date_col is not None:
        if date_col not in frame.columns:
            raise ColumnError(f"Date column '{date_col}' not found in {list(frame.columns)}")
        return date_col

    if DEFAULT_DATE_COLUMN in frame.columns:
        return DEFAULT_DATE_COLUMN

    for column in frame.columns:
        if is_datetime64_any_dtype(frame[column]):
            return column

    raise CoercionError(
        f"No date or datetime column found in {list(frame.columns)}. "
        f"Pass date_col to name it explicitly."
    )


def as_timeseries(frame: pd.DataFrame, select: Columns = None,
                  date_col: Optional[str] = None) -> pd.DataFrame:
    """
    Convert a tidy table into a time-indexed frame.

    Args:
        frame: Tidy table with a date column
        select: Column name or list of names to keep. None keeps every
                numeric column.
        date_col: Name of the date column (auto-detected if None)

    Returns:
        DataFrame indexed by a sorted DatetimeIndex named after the date column

    Raises:
        ColumnError: If a selected column is missing
        CoercionError: If no numeric columns remain
    """
    date_col = find_date_column(frame, date_col)
    selected = as_column_list(select)

    missing = [col for col in selected if col not in frame.columns]
    if missing:
        raise ColumnError(f"Selected columns not found: {missing}. Available: {list(frame.columns)}")

    if not selected:
        selected = [col for col in frame.columns if col != date_col]

    numeric = [col for col in selected
               if col != date_col and is_numeric_dtype(frame[col]) and not is_bool_dtype(frame[col])]
    dropped = [col for col in selected if col not in numeric and col != date_col]
    if dropped:
        warnings.warn(f"Non-numeric columns being dropped: {dropped}", UserWarning, stacklevel=2)

    if not numeric:
        raise CoercionError("No numeric columns available to convert to a time series")

    try:
        index = pd.DatetimeIndex(pd.to_datetime(frame[date_col]), name=date_col)
    except (ValueError, TypeError) as e:
        raise CoercionError(f"Column '{date_col}' cannot be parsed as dates: {e}") from e

    ts = frame[numeric].copy()
    ts.index = index
    ts.columns = [str(col) for col in ts.columns]

    if not ts.index.is_monotonic_increasing:
        ts = ts.sort_index(kind='stable')
    return ts


def as_tidy(ts: Union[pd.DataFrame, pd.Series], date_col: str = DEFAULT_DATE_COLUMN) -> pd.DataFrame:
    """
    Convert a time-indexed frame or series back into a tidy table.

    Args:
        ts: Time-indexed DataFrame or Series
        date_col: Name for the date column

    Returns:
        DataFrame with a RangeIndex, the date column first

    Raises:
        CoercionError: If the index is not datetime-like
    """
    if isinstance(ts, pd.Series):
        ts = ts.to_frame(name=ts.name if ts.name is not None else 'value')
    elif not isinstance(ts, pd.DataFrame):
        raise CoercionError(f"Expected a DataFrame or Series, got {type(ts).__name__}")

    index = ts.index
    if isinstance(index, pd.PeriodIndex):
        index = index.to_timestamp()
    if not isinstance(index, pd.DatetimeIndex):
        try:
            index = pd.DatetimeIndex(index)
        except (ValueError, TypeError) as e:
            raise CoercionError(f"Time series index is not datetime-like: {e}") from e

    tidy = ts.copy()
    if date_col in tidy.columns:
        raise CoercionError(
            f"Value column '{date_col}' clashes with the date column name; "
            f"rename it or pass a different date_col"
        )
    tidy.insert(0, date_col, index)
    tidy.columns = [str(col) for col in tidy.columns]
    return tidy.reset_index(drop=True)


def to_wide(tidy: pd.DataFrame, id_col: str = 'symbol', value_col: Optional[str] = None,
            date_col: Optional[str] = None) -> pd.DataFrame:
    """
    Pivot a long multi-identifier table into one column per identifier.

    Args:
        tidy: Tidy table with identifier and date columns
        id_col: Column holding identifiers
        value_col: Column to spread (required when several value columns exist)
        date_col: Date column (auto-detected if None)

    Returns:
        Time-indexed DataFrame with one column per identifier

    Raises:
        ColumnError: If a named column is missing
        CoercionError: If (date, identifier) pairs are duplicated
    """
    date_col = find_date_column(tidy, date_col)
    if id_col not in tidy.columns:
        raise ColumnError(f"Identifier column '{id_col}' not found")

    if value_col is None:
        candidates = [col for col in tidy.columns
                      if col not in (id_col, date_col) and is_numeric_dtype(tidy[col])]
        if len(candidates) != 1:
            raise CoercionError(f"value_col is required; candidates are {candidates}")
        value_col = candidates[0]
    elif value_col not in tidy.columns:
        raise ColumnError(f"Value column '{value_col}' not found")

    if tidy.duplicated(subset=[date_col, id_col]).any():
        raise CoercionError(f"Duplicate ({date_col}, {id_col}) pairs prevent pivoting")

    wide = tidy.pivot(index=date_col, columns=id_col, values=value_col)
    wide.index = pd.DatetimeIndex(pd.to_datetime(wide.index), name=date_col)
    wide.columns.name = None
    return wide.sort_index()


def to_long(wide: pd.DataFrame, id_col: str = 'symbol', value_name: str = 'value',
            date_col: str = DEFAULT_DATE_COLUMN) -> pd.DataFrame:
    """
    Melt a one-column-per-identifier frame into a tidy table.

    Args:
        wide: Time-indexed DataFrame
        id_col: Name for the identifier column
        value_name: Name for the value column
        date_col: Name for the date column

    Returns:
        Tidy table ordered by identifier then date
    """
    tidy = as_tidy(wide, date_col=date_col)
    long = tidy.melt(id_vars=[date_col], var_name=id_col, value_name=value_name)
    long = long[[id_col, date_col, value_name]]
    return long.reset_index(drop=True)


def split_groups(data: Union[pd.DataFrame, DataFrameGroupBy],
                 group_by: Columns = None) -> Iterator[Tuple[Dict[str, Any], pd.DataFrame]]:
    """
    Split a table into groups.

    Args:
        data: DataFrame, or a DataFrameGroupBy whose keys are column names
        group_by: Grouping column name(s) when ``data`` is a DataFrame

    Yields:
        (group key dict, sub-frame) pairs in order of first appearance.
        Ungrouped data yields a single pair with an empty key dict.

    Raises:
        ColumnError: If a grouping column is missing
        CoercionError: If the groupby keys are not column names
    """
    frame, group_cols = resolve_groups(data, group_by)

    if not group_cols:
        yield {}, frame
        return

    grouped = frame.groupby(group_cols, sort=False, dropna=False)
    for key, sub in grouped:
        if not isinstance(key, tuple):
            key = (key,)
        yield dict(zip(group_cols, key)), sub


def resolve_groups(data: Union[pd.DataFrame, DataFrameGroupBy],
                   group_by: Columns = None) -> Tuple[pd.DataFrame, List[str]]:
    """Return the underlying frame and grouping column names."""
    if isinstance(data, DataFrameGroupBy):
        if group_by is not None:
            raise CoercionError("group_by cannot be combined with an already grouped frame")
        keys = data.keys
        if not isinstance(keys, (str, list, tuple)):
            raise CoercionError("Grouped frames must be grouped by column names")
        group_cols = as_column_list(keys)
        if not all(isinstance(col, str) for col in group_cols):
            raise CoercionError("Grouped frames must be grouped by column names")
        frame = data.obj
    elif isinstance(data, pd.DataFrame):
        frame = data
        group_cols = as_column_list(group_by)
    else:
        raise CoercionError(f"Expected a DataFrame, got {type(data).__name__}")

    missing = [col for col in group_cols if col not in frame.columns]
    if missing:
        raise ColumnError(f"Grouping columns not found: {missing}")
    return frame, group_cols
