"""
Function Library: wraps the 'ta' library, pandas time-series methods and the
periodicity helpers behind the mutate function registry.

Nothing here implements an indicator; each wrapper picks the right input
columns, forwards parameters to the underlying library and names the output.

Quick Start:
    from tqkit.functions import get_function

    sma = get_function('SMA').compute(ts, n=20)          # Series named 'SMA'
    bands = get_function('BBands').compute(ts, n=20)     # dn, mavg, up, pctB
    monthly = get_function('to_monthly').compute(ts)

Supported built-ins (see function_options()):
    - ta: SMA, EMA, WMA, RSI, ROC, MACD, BBands, ATR, stoch, OBV
    - periodicity: to_period, to_daily, to_weekly, to_monthly, to_quarterly, to_yearly
    - returns: period_return, daily_return, ..., yearly_return, all_returns
    - pandas: lag, diff, rollapply
    - xy: rolling_cor, rolling_cov

Extending:
    To wrap another 'ta' indicator:
    1. Import the indicator class from ta
    2. Write a wrapper taking (frame, **params) that selects inputs with
       tqkit.core.ohlc helpers and returns a named Series/DataFrame
    3. Add it to _BUILTINS below
"""

from typing import Callable, Iterable, Optional, Union

import numpy as np
import pandas as pd
from ta.momentum import ROCIndicator, RSIIndicator, StochasticOscillator
from ta.trend import EMAIndicator, MACD, SMAIndicator, WMAIndicator
from ta.volatility import AverageTrueRange, BollingerBands
from ta.volume import OnBalanceVolumeIndicator

from tqkit.core.ohlc import pick_price, price_column, typical_price
from tqkit.functions.base import register_function, list_functions
from tqkit.timeseries import periods


def _check_window(n: int, name: str = 'n') -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise ValueError(f"{name} must be a positive integer, got {n!r}")
    return int(n)


def _float_price(frame: pd.DataFrame) -> pd.Series:
    return pick_price(frame).astype('float64')


# --- moving averages and oscillators -------------------------------------

def sma(frame: pd.DataFrame, n: int = 10) -> pd.Series:
    """Simple moving average of the price column."""
    indicator = SMAIndicator(close=_float_price(frame), window=_check_window(n))
    return indicator.sma_indicator().rename('SMA')


def ema(frame: pd.DataFrame, n: int = 10) -> pd.Series:
    """Exponential moving average of the price column."""
    indicator = EMAIndicator(close=_float_price(frame), window=_check_window(n))
    return indicator.ema_indicator().rename('EMA')


def wma(frame: pd.DataFrame, n: int = 10) -> pd.Series:
    """Weighted moving average of the price column."""
    indicator = WMAIndicator(close=_float_price(frame), window=_check_window(n))
    return indicator.wma().rename('WMA')


def rsi(frame: pd.DataFrame, n: int = 14) -> pd.Series:
    """Relative Strength Index."""
    indicator = RSIIndicator(close=_float_price(frame), window=_check_window(n))
    return indicator.rsi().rename('rsi')


def roc(frame: pd.DataFrame, n: int = 12) -> pd.Series:
    """Rate of change, in percent."""
    indicator = ROCIndicator(close=_float_price(frame), window=_check_window(n))
    return indicator.roc().rename('roc')


def macd(frame: pd.DataFrame, n_fast: int = 12, n_slow: int = 26, n_sig: int = 9) -> pd.DataFrame:
    """MACD line and signal line."""
    if _check_window(n_fast, 'n_fast') >= _check_window(n_slow, 'n_slow'):
        raise ValueError("n_fast must be smaller than n_slow")
    indicator = MACD(
        close=_float_price(frame),
        window_fast=n_fast,
        window_slow=n_slow,
        window_sign=_check_window(n_sig, 'n_sig'),
    )
    return pd.DataFrame({
        'macd': indicator.macd(),
        'signal': indicator.macd_signal(),
    })


def bbands(frame: pd.DataFrame, n: int = 20, sd: float = 2) -> pd.DataFrame:
    """
    Bollinger Bands.

    Uses the typical price (high + low + close) / 3 when H/L/C columns are
    present, otherwise the single price column.
    """
    if sd <= 0:
        raise ValueError(f"sd must be positive, got {sd!r}")
    indicator = BollingerBands(
        close=typical_price(frame).astype('float64'),
        window=_check_window(n),
        window_dev=sd,
    )
    return pd.DataFrame({
        'dn': indicator.bollinger_lband(),
        'mavg': indicator.bollinger_mavg(),
        'up': indicator.bollinger_hband(),
        'pctB': indicator.bollinger_pband(),
    })


def atr(frame: pd.DataFrame, n: int = 14) -> pd.Series:
    """Average True Range. Requires high, low and close."""
    indicator = AverageTrueRange(
        high=frame[price_column(frame, 'high')].astype('float64'),
        low=frame[price_column(frame, 'low')].astype('float64'),
        close=frame[price_column(frame, 'close')].astype('float64'),
        window=_check_window(n),
    )
    return indicator.average_true_range().rename('atr')


def stoch(frame: pd.DataFrame, n: int = 14, n_sig: int = 3) -> pd.DataFrame:
    """Stochastic oscillator. Requires high, low and close."""
    indicator = StochasticOscillator(
        high=frame[price_column(frame, 'high')].astype('float64'),
        low=frame[price_column(frame, 'low')].astype('float64'),
        close=frame[price_column(frame, 'close')].astype('float64'),
        window=_check_window(n),
        smooth_window=_check_window(n_sig, 'n_sig'),
    )
    return pd.DataFrame({
        'fastK': indicator.stoch(),
        'fastD': indicator.stoch_signal(),
    })


def obv(frame: pd.DataFrame) -> pd.Series:
    """On-balance volume. Requires close and volume."""
    indicator = OnBalanceVolumeIndicator(
        close=frame[price_column(frame, 'close')].astype('float64'),
        volume=frame[price_column(frame, 'volume')].astype('float64'),
    )
    return indicator.on_balance_volume().rename('obv')


# --- pandas time-series methods -----------------------------------------

def lag(frame: pd.DataFrame, k: Union[int, Iterable[int]] = 1) -> pd.DataFrame:
    """Shift every column forward by k rows (several lags if k is a list)."""
    lags = [k] if isinstance(k, (int, np.integer)) else list(k)
    shifted = [
        frame.shift(int(step)).add_suffix(f"_lag{int(step)}")
        for step in lags
    ]
    return pd.concat(shifted, axis=1)


def diff(frame: pd.DataFrame, lag: int = 1, differences: int = 1) -> pd.DataFrame:
    """Lagged, iterated differences of every column."""
    _check_window(lag, 'lag')
    result = frame
    for _ in range(_check_window(differences, 'differences')):
        result = result.diff(lag)
    return result.add_suffix('_diff')


def rollapply(frame: pd.DataFrame, width: int, func: Optional[Callable] = None,
              align: str = 'right', min_periods: Optional[int] = None) -> pd.DataFrame:
    """
    Apply ``func`` over a rolling window of every column.

    Args:
        frame: Time-indexed DataFrame
        width: Window length in rows
        func: Callable reducing a 1-d numpy array to a scalar (defaults to mean)
        align: 'right' (window ends at the row), 'center' or 'left'
        min_periods: Minimum observations required (defaults to width)
    """
    width = _check_window(width, 'width')
    if align not in ('right', 'center', 'left'):
        raise ValueError(f"align must be 'right', 'center' or 'left', got {align!r}")

    rolling = frame.rolling(window=width, min_periods=min_periods, center=(align == 'center'))
    result = rolling.mean() if func is None else rolling.apply(func, raw=True)
    if align == 'left':
        result = result.shift(-(width - 1))
    return result.add_suffix('_rollapply')


# --- x/y functions --------------------------------------------------------

def rolling_cor(frame: pd.DataFrame, n: int = 20) -> pd.Series:
    """Rolling correlation between the x (first) and y (second) columns."""
    x, y = frame.iloc[:, 0].astype('float64'), frame.iloc[:, 1].astype('float64')
    return x.rolling(window=_check_window(n)).corr(y).rename('rolling_cor')


def rolling_cov(frame: pd.DataFrame, n: int = 20) -> pd.Series:
    """Rolling covariance between the x (first) and y (second) columns."""
    x, y = frame.iloc[:, 0].astype('float64'), frame.iloc[:, 1].astype('float64')
    return x.rolling(window=_check_window(n)).cov(y).rename('rolling_cov')


_BUILTINS = [
    # (name, func, group, needs_xy, description)
    ('SMA', sma, 'ta', False, 'Simple moving average'),
    ('EMA', ema, 'ta', False, 'Exponential moving average'),
    ('WMA', wma, 'ta', False, 'Weighted moving average'),
    ('RSI', rsi, 'ta', False, 'Relative Strength Index'),
    ('ROC', roc, 'ta', False, 'Rate of change (percent)'),
    ('MACD', macd, 'ta', False, 'MACD and signal line'),
    ('BBands', bbands, 'ta', False, 'Bollinger Bands'),
    ('ATR', atr, 'ta', False, 'Average True Range'),
    ('stoch', stoch, 'ta', False, 'Stochastic oscillator'),
    ('OBV', obv, 'ta', False, 'On-balance volume'),
    ('to_period', periods.to_period, 'periodicity', False, 'Convert to a coarser periodicity'),
    ('to_daily', periods.to_daily, 'periodicity', False, 'Convert to daily'),
    ('to_weekly', periods.to_weekly, 'periodicity', False, 'Convert to weekly'),
    ('to_monthly', periods.to_monthly, 'periodicity', False, 'Convert to monthly'),
    ('to_quarterly', periods.to_quarterly, 'periodicity', False, 'Convert to quarterly'),
    ('to_yearly', periods.to_yearly, 'periodicity', False, 'Convert to yearly'),
    ('period_return', periods.period_return, 'returns', False, 'Returns over a period'),
    ('daily_return', periods.daily_return, 'returns', False, 'Daily returns'),
    ('weekly_return', periods.weekly_return, 'returns', False, 'Weekly returns'),
    ('monthly_return', periods.monthly_return, 'returns', False, 'Monthly returns'),
    ('quarterly_return', periods.quarterly_return, 'returns', False, 'Quarterly returns'),
    ('yearly_return', periods.yearly_return, 'returns', False, 'Yearly returns'),
    ('all_returns', periods.all_returns, 'returns', False, 'Returns over every period'),
    ('lag', lag, 'pandas', False, 'Lagged values'),
    ('diff', diff, 'pandas', False, 'Lagged differences'),
    ('rollapply', rollapply, 'pandas', False, 'Rolling window apply'),
    ('rolling_cor', rolling_cor, 'xy', True, 'Rolling correlation of x and y'),
    ('rolling_cov', rolling_cov, 'xy', True, 'Rolling covariance of x and y'),
]


def register_builtins() -> None:
    """Register every built-in function not yet in the registry."""
    registered = set(list_functions())
    for name, func, group, needs_xy, description in _BUILTINS:
        if name not in registered:
            register_function(name, func, group=group, needs_xy=needs_xy, description=description)


register_builtins()
