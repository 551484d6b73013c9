"""
tqkit: tidy financial time series.

One tidy-table interface over the 'ta' indicator library, pandas
time-series tooling, Yahoo Finance and ccxt retrieval, and matplotlib
financial charts.

Quick Start:
    import tqkit as tq

    prices = tq.get(['AAPL', 'MSFT'], from_date='2020-01-01')
    monthly = tq.transmute(prices, 'monthly_return', select='adjusted', group_by='symbol')
    with_sma = tq.mutate(prices, 'SMA', select='close', group_by='symbol', n=20)

Common Patterns:
    tq.function_options()                        # what mutate/transmute accept
    tq.to_wide(monthly, value_col='monthly_returns')
    tq.map_identifiers(['AAPL', 'BAD'], my_fetch)  # bad apples become warnings
"""

__version__ = '0.1.0'

from tqkit.exceptions import (
    TqError,
    CoercionError,
    ColumnError,
    UnknownFunctionError,
    PeriodError,
    FetchError,
    SymbolNotFoundError,
)
from tqkit.core import (
    as_timeseries,
    as_tidy,
    to_wide,
    to_long,
    map_identifiers,
)
from tqkit.core.dispatch import transmute, mutate, transmute_xy, mutate_xy
from tqkit.functions import register_function, function_options
from tqkit.timeseries import to_period, period_return
from tqkit.data import get, get_options

__all__ = [
    '__version__',
    'TqError',
    'CoercionError',
    'ColumnError',
    'UnknownFunctionError',
    'PeriodError',
    'FetchError',
    'SymbolNotFoundError',
    'as_timeseries',
    'as_tidy',
    'to_wide',
    'to_long',
    'map_identifiers',
    'transmute',
    'mutate',
    'transmute_xy',
    'mutate_xy',
    'register_function',
    'function_options',
    'to_period',
    'period_return',
    'get',
    'get_options',
]
