"""
Stock price, dividend and split retrieval built on top of yfinance.
"""

import logging
from typing import Optional

import pandas as pd
import yfinance as yf

from tqkit.exceptions import FetchError, SymbolNotFoundError

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ['open', 'high', 'low', 'close', 'volume', 'adjusted']

_YAHOO_COLUMNS = {
    'Open': 'open',
    'High': 'high',
    'Low': 'low',
    'Close': 'close',
    'Volume': 'volume',
    'Adj Close': 'adjusted',
}


def _end_exclusive(to_date) -> pd.Timestamp:
    # yfinance treats ``end`` as exclusive
    return pd.Timestamp(to_date).normalize() + pd.Timedelta(days=1)


def _history(symbol: str, from_date, to_date, auto_adjust: bool = False) -> pd.DataFrame:
    logger.info(f"Downloading {symbol} from Yahoo Finance ({from_date} to {to_date})")
    try:
        history = yf.Ticker(symbol).history(
            start=pd.Timestamp(from_date).strftime('%Y-%m-%d'),
            end=_end_exclusive(to_date).strftime('%Y-%m-%d'),
            auto_adjust=auto_adjust,
            actions=False,
        )
    except Exception as e:  # yfinance raises a wide range of errors
        raise FetchError(f"Error downloading {symbol}: {e}") from e

    if history is None or history.empty:
        raise SymbolNotFoundError(f"No price data returned for {symbol!r} between {from_date} and {to_date}")
    return history


def _tidy_index(frame: pd.DataFrame) -> pd.DataFrame:
    frame = frame[~frame.index.duplicated(keep='last')].sort_index()
    index = pd.DatetimeIndex(frame.index)
    if index.tz is not None:
        # Daily bars are stamped at exchange midnight; keep the calendar date
        index = index.tz_localize(None)
    tidy = frame.reset_index(drop=True)
    tidy.insert(0, 'date', index)
    return tidy


def fetch_stock_prices(symbol: str, from_date, to_date, auto_adjust: Optional[bool] = None,
                       **kwargs) -> pd.DataFrame:
    """
    Download daily stock prices.

    Args:
        symbol: Ticker symbol (e.g., 'AAPL')
        from_date: First date
        to_date: Last date (inclusive)
        auto_adjust: Let yfinance adjust OHLC for splits and dividends
                     (defaults to config data.auto_adjust)

    Returns:
        Tidy table with date, open, high, low, close, volume, adjusted

    Raises:
        SymbolNotFoundError: If no rows are returned
        FetchError: If the download fails
    """
    if auto_adjust is None:
        from tqkit.config import get_config
        auto_adjust = get_config().get_data_config().auto_adjust

    history = _history(symbol, from_date, to_date, auto_adjust=auto_adjust)
    prices = history.rename(columns=_YAHOO_COLUMNS)

    if 'adjusted' not in prices.columns:
        prices['adjusted'] = prices['close']
    for column in PRICE_COLUMNS:
        if column not in prices.columns:
            logger.warning(f"Column {column} missing from {symbol} data")
            prices[column] = float('nan')

    prices = prices[PRICE_COLUMNS].dropna(how='all')
    if prices.empty:
        raise SymbolNotFoundError(f"Price data for {symbol!r} contains no valid rows")
    return _tidy_index(prices)


def _fetch_actions(symbol: str, attribute: str, from_date, to_date) -> pd.DataFrame:
    logger.info(f"Downloading {attribute} for {symbol} from Yahoo Finance")
    try:
        series = getattr(yf.Ticker(symbol), attribute)
    except Exception as e:
        raise FetchError(f"Error downloading {attribute} for {symbol}: {e}") from e

    if series is None or len(series) == 0:
        raise SymbolNotFoundError(f"No {attribute} returned for {symbol!r}")

    frame = series.rename('value').to_frame()
    tidy = _tidy_index(frame)
    start = pd.Timestamp(from_date)
    end = pd.Timestamp(to_date).normalize() + pd.Timedelta(days=1)
    tidy = tidy[(tidy['date'] >= start) & (tidy['date'] < end)].reset_index(drop=True)
    if tidy.empty:
        raise SymbolNotFoundError(f"No {attribute} for {symbol!r} between {from_date} and {to_date}")
    return tidy


def fetch_dividends(symbol: str, from_date, to_date, **kwargs) -> pd.DataFrame:
    """Dividend history as a tidy table (date, value)."""
    return _fetch_actions(symbol, 'dividends', from_date, to_date)


def fetch_splits(symbol: str, from_date, to_date, **kwargs) -> pd.DataFrame:
    """Split history as a tidy table (date, value)."""
    return _fetch_actions(symbol, 'splits', from_date, to_date)
