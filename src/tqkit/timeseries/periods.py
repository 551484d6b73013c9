"""
Periodicity conversion and period returns.

Buckets a time-indexed frame by calendar period using pandas Period
arithmetic and reduces each bucket to one row. Period returns compare the
closing value of consecutive buckets.

Quick Start:
    from tqkit.timeseries.periods import to_period, period_return

    monthly = to_period(ts, 'months')                  # OHLC bars per month
    weekly = to_period(ts, 'weeks', index_at='lastof')  # stamped on Sundays
    returns = period_return(ts[['adjusted']], 'monthly', type='log')
"""

import logging
from typing import Union

import numpy as np
import pandas as pd

from tqkit.core.ohlc import find_field, has_ohlc, pick_price
from tqkit.exceptions import CoercionError
from tqkit.timeseries.period_parser import Period, parse_period

logger = logging.getLogger(__name__)

INDEX_AT_OPTIONS = ('endof', 'startof', 'firstof', 'lastof')
RETURN_TYPES = ('arithmetic', 'log')

_INTRADAY_UNITS = ('seconds', 'minutes', 'hours')

TimeSeries = Union[pd.DataFrame, pd.Series]


def _as_frame(ts: TimeSeries) -> pd.DataFrame:
    if isinstance(ts, pd.Series):
        ts = ts.to_frame(name=ts.name if ts.name is not None else 'value')
    if not isinstance(ts, pd.DataFrame):
        raise CoercionError(f"Expected a time-indexed DataFrame, got {type(ts).__name__}")
    if not isinstance(ts.index, pd.DatetimeIndex):
        raise CoercionError("Periodicity conversion requires a DatetimeIndex")
    return ts


def _bucket_bounds(index: pd.DatetimeIndex, spec: Period):
    """
    Compute bucket boundaries for a sorted index.

    Returns:
        Tuple of (group ids per row, start positions, end positions,
        PeriodIndex of first bucket per group, PeriodIndex of last bucket per group)
    """
    naive = index.tz_localize(None) if index.tz is not None else index
    periods = naive.to_period(spec.freq)
    codes, uniques = pd.factorize(periods, sort=True)

    # Every k consecutive observed buckets form one output row
    group_ids = codes // spec.k
    boundaries = np.flatnonzero(np.diff(group_ids)) + 1
    starts = np.r_[0, boundaries]
    ends = np.r_[boundaries - 1, len(group_ids) - 1]

    return group_ids, starts, ends, uniques[codes[starts]], uniques[codes[ends]]


def _stamp(index: pd.DatetimeIndex, starts, ends, first_buckets, last_buckets,
           spec: Period, index_at: str) -> pd.DatetimeIndex:
    if index_at == 'endof':
        stamps = index[ends]
    elif index_at == 'startof':
        stamps = index[starts]
    else:
        if index_at == 'firstof':
            stamps = first_buckets.start_time
        elif spec.unit in _INTRADAY_UNITS:
            stamps = last_buckets.end_time.floor('s')
        else:
            stamps = last_buckets.end_time.normalize()
        stamps = pd.DatetimeIndex(stamps)
        if index.tz is not None:
            stamps = stamps.tz_localize(index.tz, nonexistent='shift_forward', ambiguous='NaT')
    return pd.DatetimeIndex(stamps, name=index.name)


def to_period(ts: TimeSeries, period: Union[str, Period] = 'months', k: int = 1,
              index_at: str = 'endof', ohlc: bool = True) -> pd.DataFrame:
    """
    Convert a time series to a coarser periodicity.

    Args:
        ts: Time-indexed DataFrame or Series
        period: Target period ('days', 'weeks', 'months', 'quarters', 'years', ...)
        k: Number of consecutive periods folded into one row
        index_at: Timestamp used for each row:
            - 'endof': last observation in the bucket
            - 'startof': first observation in the bucket
            - 'firstof': calendar start of the bucket
            - 'lastof': calendar end of the bucket
        ohlc: If True and the input carries open/high/low/close columns, build
              OHLC bars (volume summed). Otherwise keep the last row per bucket.

    Returns:
        DataFrame with one row per bucket and the input's columns

    Raises:
        PeriodError: If the period is unknown
        ValueError: If index_at or k is invalid
    """
    frame = _as_frame(ts)
    spec = parse_period(period, k)
    if index_at not in INDEX_AT_OPTIONS:
        raise ValueError(f"index_at must be one of {INDEX_AT_OPTIONS}, got {index_at!r}")

    if frame.index.hasnans:
        logger.warning(f"Dropping {int(frame.index.isna().sum())} rows with missing timestamps")
        frame = frame[frame.index.notna()]
    if frame.empty:
        return frame.copy()
    if not frame.index.is_monotonic_increasing:
        frame = frame.sort_index(kind='stable')

    group_ids, starts, ends, first_buckets, last_buckets = _bucket_bounds(frame.index, spec)

    if ohlc and has_ohlc(frame):
        out = frame.iloc[ends].copy()
        values = frame.reset_index(drop=True)
        groups = values.groupby(group_ids, sort=True)

        open_col = find_field(frame, 'open')
        out[open_col] = frame[open_col].to_numpy()[starts]
        out[find_field(frame, 'high')] = groups[find_field(frame, 'high')].max().to_numpy()
        out[find_field(frame, 'low')] = groups[find_field(frame, 'low')].min().to_numpy()

        volume_col = find_field(frame, 'volume')
        if volume_col is not None:
            out[volume_col] = groups[volume_col].sum(min_count=1).to_numpy()
    else:
        out = frame.iloc[ends].copy()

    out.index = _stamp(frame.index, starts, ends, first_buckets, last_buckets, spec, index_at)
    logger.debug(f"Converted {len(frame)} rows to {len(out)} {spec.unit} (k={spec.k})")
    return out


def to_daily(ts: TimeSeries, **kwargs) -> pd.DataFrame:
    """Convert to daily periodicity."""
    return to_period(ts, 'days', **kwargs)


def to_weekly(ts: TimeSeries, **kwargs) -> pd.DataFrame:
    """Convert to weekly periodicity (weeks end on Sunday)."""
    return to_period(ts, 'weeks', **kwargs)


def to_monthly(ts: TimeSeries, **kwargs) -> pd.DataFrame:
    """Convert to monthly periodicity."""
    return to_period(ts, 'months', **kwargs)


def to_quarterly(ts: TimeSeries, **kwargs) -> pd.DataFrame:
    """Convert to quarterly periodicity."""
    return to_period(ts, 'quarters', **kwargs)


def to_yearly(ts: TimeSeries, **kwargs) -> pd.DataFrame:
    """Convert to yearly periodicity."""
    return to_period(ts, 'years', **kwargs)


def period_return(ts: TimeSeries, period: Union[str, Period] = 'monthly',
                  type: str = 'arithmetic', leading: bool = True,
                  index_at: str = 'endof') -> pd.Series:
    """
    Compute returns over calendar periods.

    The closing value of each bucket is compared with the closing value of
    the previous bucket. The first bucket has no predecessor: with
    ``leading=True`` it is compared with the first observation of the input
    (the first open for OHLC input), otherwise it is NaN.

    Args:
        ts: Time-indexed DataFrame or Series. Multi-column input must carry a
            close column unless it is OHLC.
        period: Return period ('daily', 'weekly', 'monthly', 'quarterly', 'yearly')
        type: 'arithmetic' (c1 / c0 - 1) or 'log' (ln(c1 / c0))
        leading: Whether to fill the first bucket's return
        index_at: Timestamp used for each bucket (see to_period)

    Returns:
        Series named '<period>_returns' (e.g. 'monthly_returns')

    Raises:
        ValueError: If type is unknown
        ColumnError: If the price column cannot be chosen
    """
    if type not in RETURN_TYPES:
        raise ValueError(f"type must be one of {RETURN_TYPES}, got {type!r}")

    frame = _as_frame(ts)
    spec = parse_period(period)

    prices = pick_price(frame)
    if frame.empty:
        return pd.Series([], index=frame.index[:0], dtype='float64', name=spec.return_name)

    if not frame.index.is_monotonic_increasing:
        frame = frame.sort_index(kind='stable')
        prices = pick_price(frame)

    if has_ohlc(frame):
        first_value = frame[find_field(frame, 'open')].iloc[0]
    else:
        first_value = prices.iloc[0]

    closes = to_period(prices.to_frame(), spec, index_at=index_at, ohlc=False).iloc[:, 0]
    closes = closes.astype('float64')

    ratio = closes / closes.shift(1)
    first_ratio = closes.iloc[0] / float(first_value)
    if type == 'arithmetic':
        returns = ratio - 1.0
        first = first_ratio - 1.0
    else:
        returns = np.log(ratio)
        first = np.log(first_ratio)

    returns.iloc[0] = first if leading else np.nan
    returns.name = spec.return_name
    return returns


def daily_return(ts: TimeSeries, **kwargs) -> pd.Series:
    """Daily returns."""
    return period_return(ts, 'daily', **kwargs)


def weekly_return(ts: TimeSeries, **kwargs) -> pd.Series:
    """Weekly returns."""
    return period_return(ts, 'weekly', **kwargs)


def monthly_return(ts: TimeSeries, **kwargs) -> pd.Series:
    """Monthly returns."""
    return period_return(ts, 'monthly', **kwargs)


def quarterly_return(ts: TimeSeries, **kwargs) -> pd.Series:
    """Quarterly returns."""
    return period_return(ts, 'quarterly', **kwargs)


def yearly_return(ts: TimeSeries, **kwargs) -> pd.Series:
    """Yearly returns."""
    return period_return(ts, 'yearly', **kwargs)


def all_returns(ts: TimeSeries, **kwargs) -> pd.DataFrame:
    """Daily, weekly, monthly, quarterly and yearly returns, outer-joined on date."""
    columns = [
        period_return(ts, period, **kwargs)
        for period in ('daily', 'weekly', 'monthly', 'quarterly', 'yearly')
    ]
    return pd.concat(columns, axis=1, join='outer').sort_index()
