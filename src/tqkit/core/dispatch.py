"""
Grouped dispatch of mutate functions over tidy tables.

Each operation follows the same four steps per group:
1. coerce the selected columns of the tidy table into a time series,
2. call the wrapped function,
3. coerce the result back into a tidy table,
4. re-attach the grouping columns (transmute) or join the new columns onto
   the group's rows (mutate).

Quick Start:
    from tqkit.core.dispatch import mutate, transmute

    # Monthly returns per symbol
    monthly = transmute(prices, 'monthly_return', select='adjusted', group_by='symbol')

    # Add a 50-day SMA column, keeping every original column
    with_sma = mutate(prices, 'SMA', select='close', group_by='symbol', n=50)

    # Rolling correlation between two columns
    cor = transmute_xy(returns, 'rolling_cor', x='asset', y='benchmark', n=60)
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype
from pandas.core.groupby import DataFrameGroupBy

from tqkit.core.coercion import (
    Columns,
    as_column_list,
    as_tidy,
    as_timeseries,
    find_date_column,
    resolve_groups,
    split_groups,
)
from tqkit.exceptions import CoercionError, ColumnError
from tqkit.functions import MutateFunction, get_function

logger = logging.getLogger(__name__)

Data = Union[pd.DataFrame, DataFrameGroupBy]


def transmute(data: Data, mutate_fun, select: Columns = None,
              col_rename: Union[str, Sequence[str], None] = None,
              group_by: Columns = None, date_col: Optional[str] = None,
              **params: Any) -> pd.DataFrame:
    """
    Apply a function and return only its output (plus date and group columns).

    The output may have a different number of rows than the input, which makes
    transmute the right choice for periodicity conversion and period returns.

    Args:
        data: Tidy table, or a DataFrameGroupBy over column names
        mutate_fun: Registered function name or callable (frame, **params)
        select: Column(s) passed to the function. None passes every numeric column.
        col_rename: New names for the output columns
        group_by: Grouping column(s) when data is a DataFrame
        date_col: Date column (auto-detected if None)
        **params: Parameters forwarded to the function

    Returns:
        DataFrame with group columns, the date column and the function's output

    Raises:
        ColumnError: If a selected, grouping or date column is missing
        UnknownFunctionError: If mutate_fun is not registered
    """
    fun = get_function(mutate_fun)
    return _dispatch(data, fun, as_column_list(select) or None, col_rename,
                     group_by, date_col, params, keep_input=False)


def mutate(data: Data, mutate_fun, select: Columns = None,
           col_rename: Union[str, Sequence[str], None] = None,
           group_by: Columns = None, date_col: Optional[str] = None,
           **params: Any) -> pd.DataFrame:
    """
    Apply a function and append its output to the input columns.

    Rows are returned ordered by date within each group. New columns whose
    names clash with existing ones get '.1', '.2', ... suffixes.

    Args:
        Same as transmute()

    Returns:
        Input rows plus the function's output columns

    Raises:
        CoercionError: If the function changes the number of rows (use transmute)
    """
    fun = get_function(mutate_fun)
    return _dispatch(data, fun, as_column_list(select) or None, col_rename,
                     group_by, date_col, params, keep_input=True)


def transmute_xy(data: Data, mutate_fun, x: str, y: Optional[str] = None,
                 col_rename: Union[str, Sequence[str], None] = None,
                 group_by: Columns = None, date_col: Optional[str] = None,
                 **params: Any) -> pd.DataFrame:
    """
    transmute() for functions taking an x and optionally a y column.

    The function receives a frame whose first column is x and second is y.

    Raises:
        ValueError: If the function requires y and none is given
    """
    fun = get_function(mutate_fun)
    columns = _xy_columns(fun, x, y)
    return _dispatch(data, fun, columns, col_rename, group_by, date_col, params, keep_input=False)


def mutate_xy(data: Data, mutate_fun, x: str, y: Optional[str] = None,
              col_rename: Union[str, Sequence[str], None] = None,
              group_by: Columns = None, date_col: Optional[str] = None,
              **params: Any) -> pd.DataFrame:
    """mutate() for functions taking an x and optionally a y column."""
    fun = get_function(mutate_fun)
    columns = _xy_columns(fun, x, y)
    return _dispatch(data, fun, columns, col_rename, group_by, date_col, params, keep_input=True)


def _xy_columns(fun: MutateFunction, x: str, y: Optional[str]) -> List[str]:
    if not isinstance(x, str) or not x:
        raise ValueError("x must be a column name")
    if y is None:
        if fun.needs_xy:
            raise ValueError(f"Function '{fun.name}' requires a y column")
        return [x]
    return [x, y]


def _dispatch(data: Data, fun: MutateFunction, columns: Optional[List[str]],
              col_rename, group_by: Columns, date_col: Optional[str],
              params: Dict[str, Any], keep_input: bool) -> pd.DataFrame:
    frame, group_cols = resolve_groups(data, group_by)
    date_col = find_date_column(frame, date_col)
    if date_col in group_cols:
        raise CoercionError(f"Date column '{date_col}' cannot be a grouping column")
    if columns:
        missing = [col for col in columns if col not in frame.columns]
        if missing:
            raise ColumnError(f"Columns not found: {missing}. Available: {list(frame.columns)}")
    else:
        # Grouping columns are identifiers, never function inputs
        columns = [col for col in frame.columns
                   if col not in group_cols and col != date_col
                   and is_numeric_dtype(frame[col]) and not is_bool_dtype(frame[col])]
        if not columns:
            raise CoercionError("No numeric columns available to pass to the function")

    renames = as_column_list(col_rename)

    pieces = []
    for keys, group in split_groups(frame, group_cols):
        logger.debug(f"Applying {fun.name} to group {keys or '(all rows)'} ({len(group)} rows)")
        if keep_input:
            pieces.append(_mutate_group(group, fun, columns, date_col, params, renames))
        else:
            pieces.append(_transmute_group(group, keys, group_cols, fun, columns,
                                           date_col, params, renames))

    if not pieces:
        empty_cols = list(frame.columns) if keep_input else group_cols + [date_col]
        return pd.DataFrame(columns=empty_cols)

    return pd.concat(pieces, ignore_index=True)


def _call(group: pd.DataFrame, fun: MutateFunction, columns: List[str], date_col: str,
          params: Dict[str, Any], renames: List[str]) -> pd.DataFrame:
    ts = as_timeseries(group, select=columns, date_col=date_col)
    result = fun.compute(ts, **params)

    if isinstance(result, pd.Series):
        result = result.to_frame(name=result.name if result.name is not None else fun.name)
    elif not isinstance(result, pd.DataFrame):
        raise CoercionError(
            f"Function '{fun.name}' returned {type(result).__name__}; expected a Series or DataFrame"
        )

    if renames:
        if len(renames) != result.shape[1]:
            raise ValueError(
                f"col_rename has {len(renames)} names but '{fun.name}' returned "
                f"{result.shape[1]} columns: {list(result.columns)}"
            )
        result = result.set_axis(renames, axis=1)
    return result


def _transmute_group(group: pd.DataFrame, keys: Dict[str, Any], group_cols: List[str],
                     fun: MutateFunction, columns: List[str], date_col: str,
                     params: Dict[str, Any], renames: List[str]) -> pd.DataFrame:
    result = _call(group, fun, columns, date_col, params, renames)
    tidy = as_tidy(result, date_col=date_col)
    tidy.columns = _deduplicate(list(tidy.columns[:1]), list(tidy.columns[1:]), group_cols)
    for position, col in enumerate(group_cols):
        tidy.insert(position, col, keys[col])
    return tidy


def _mutate_group(group: pd.DataFrame, fun: MutateFunction, columns: List[str], date_col: str,
                  params: Dict[str, Any], renames: List[str]) -> pd.DataFrame:
    result = _call(group, fun, columns, date_col, params, renames)

    dates = pd.to_datetime(group[date_col]).values
    ordered = group.iloc[np.argsort(dates, kind='stable')].reset_index(drop=True)

    if len(result) != len(ordered):
        raise CoercionError(
            f"Could not join the output of '{fun.name}': it returned {len(result)} rows "
            f"for {len(ordered)} input rows. Use transmute() for functions that change periodicity."
        )

    new_names = _deduplicate([], [str(col) for col in result.columns], list(ordered.columns))
    for name, col in zip(new_names, result.columns):
        ordered[name] = result[col].to_numpy()
    return ordered


def _deduplicate(fixed: List[str], names: List[str], existing: List[str]) -> List[str]:
    """Suffix names that clash with existing (or earlier) names with '.1', '.2', ..."""
    taken = set(existing) | set(fixed)
    unique = []
    for name in names:
        candidate = name
        counter = 1
        while candidate in taken:
            candidate = f"{name}.{counter}"
            counter += 1
        taken.add(candidate)
        unique.append(candidate)
    return fixed + unique
