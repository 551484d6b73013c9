"""
Uniform retrieval entry point.

``get()`` hides which provider serves a request: every source returns a tidy
table with a ``date`` column, and requests for several symbols go through the
bad-apple policy so one unknown ticker does not sink the batch.

Quick Start:
    from tqkit.data import get

    aapl = get('AAPL', from_date='2020-01-01')               # raises on failure
    faang = get(['META', 'AMZN', 'AAPL', 'NFLX', 'GOOG'])    # symbol column added
    btc = get(['BTC/USD', 'ETH/USD'], get='crypto.prices')
"""

import datetime as dt
import logging
from typing import Callable, Dict, List, Optional

import pandas as pd

from tqkit.core.bad_apple import Identifiers, map_identifiers
from tqkit.data.fetcher import fetch_crypto_prices
from tqkit.data.yahoo import fetch_dividends, fetch_splits, fetch_stock_prices

logger = logging.getLogger(__name__)


_SOURCES: Dict[str, Callable[..., pd.DataFrame]] = {
    'stock.prices': fetch_stock_prices,
    'dividends': fetch_dividends,
    'splits': fetch_splits,
    'crypto.prices': fetch_crypto_prices,
}


def get_options() -> List[str]:
    """List the available data sources."""
    return list(_SOURCES.keys())


def _resolve_dates(from_date, to_date):
    from tqkit.config import get_config

    end = pd.Timestamp(to_date) if to_date is not None else pd.Timestamp(dt.date.today())
    if from_date is not None:
        start = pd.Timestamp(from_date)
    else:
        years = get_config().get_data_config().default_lookback_years
        start = end - pd.DateOffset(years=years)

    if start > end:
        raise ValueError(f"from_date ({start.date()}) is after to_date ({end.date()})")
    return start.normalize(), end.normalize()


def get(symbols: Identifiers, get: str = 'stock.prices', from_date=None, to_date=None,
        complete_cases: bool = True, progress: bool = False,
        id_col: str = 'symbol', **kwargs) -> pd.DataFrame:
    """
    Retrieve data for one or more symbols as a tidy table.

    Args:
        symbols: A symbol, a list of symbols, or a DataFrame whose first column
                 holds symbols (other columns are carried onto the output)
        get: Source name (see get_options())
        from_date: First date (defaults to config data.default_lookback_years before to_date)
        to_date: Last date, inclusive (defaults to today)
        complete_cases: Drop symbols that fail (True) or keep a NaN row for them (False).
                        Only applies to several symbols.
        progress: Show a progress bar when fetching several symbols
        id_col: Name of the symbol column for multi-symbol requests
        **kwargs: Forwarded to the source

    Returns:
        Tidy DataFrame. Multi-symbol requests carry the symbol column first.

    Raises:
        ValueError: If the source is unknown or the dates are inverted
        FetchError: If a single-symbol request fails
    """
    source = _SOURCES.get(get)
    if source is None:
        raise ValueError(f"Unknown source: {get!r}. Valid options: {', '.join(_SOURCES)}")

    start, end = _resolve_dates(from_date, to_date)

    if isinstance(symbols, str):
        logger.debug(f"Retrieving {get} for {symbols}")
        return source(symbols, start, end, **kwargs)

    logger.info(f"Retrieving {get} for several symbols between {start.date()} and {end.date()}")
    return map_identifiers(
        symbols,
        source,
        id_col=id_col,
        complete_cases=complete_cases,
        progress=progress,
        from_date=start,
        to_date=end,
        **kwargs,
    )
