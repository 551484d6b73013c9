"""
CCXT fetching logic for crypto OHLCV data.

Pages through an exchange's OHLCV endpoint between two dates and returns a
tidy table (date, open, high, low, close, volume).
"""

import logging
from typing import List, Optional, Tuple

import ccxt
import pandas as pd

from tqkit.exceptions import FetchError, SymbolNotFoundError

logger = logging.getLogger(__name__)

OHLCV_COLUMNS = ['open', 'high', 'low', 'close', 'volume']

# Safety limit on pages per request
MAX_BATCHES = 10000


def create_exchange(exchange_name: str, enable_rate_limit: bool = True) -> ccxt.Exchange:
    """
    Create and configure exchange instance.

    Args:
        exchange_name: Name of exchange (e.g., 'coinbase')
        enable_rate_limit: Enable rate limiting

    Returns:
        Configured exchange instance

    Raises:
        FetchError: If the exchange is not supported by ccxt
    """
    exchange_class = getattr(ccxt, exchange_name, None)
    if exchange_class is None:
        raise FetchError(f"Exchange '{exchange_name}' is not supported by ccxt")
    return exchange_class({'enableRateLimit': enable_rate_limit})


def fetch_ohlcv_batch(exchange: ccxt.Exchange, symbol: str, timeframe: str,
                      since: int, limit: int = 1000) -> List[list]:
    """
    Fetch a batch of OHLCV data from exchange.

    Args:
        exchange: CCXT exchange instance
        symbol: Trading pair (e.g., 'BTC/USD')
        timeframe: Data granularity (e.g., '1h', '1d')
        since: Starting timestamp in milliseconds
        limit: Maximum number of candles to fetch

    Returns:
        List of [timestamp, open, high, low, close, volume] rows

    Raises:
        SymbolNotFoundError: If the market does not exist on the exchange
        FetchError: If the request fails for any other reason
    """
    try:
        return exchange.fetch_ohlcv(symbol, timeframe, since, limit=limit)
    except ccxt.BadSymbol as e:
        raise SymbolNotFoundError(f"Market {symbol} not found on {exchange.id}") from e
    except ccxt.ExchangeError as e:
        error_msg = str(e).lower()
        if 'not found' in error_msg or 'invalid symbol' in error_msg or 'not have market' in error_msg:
            raise SymbolNotFoundError(f"Market {symbol} not found on {exchange.id}") from e
        raise FetchError(f"Exchange error fetching {symbol}: {e}") from e
    except ccxt.BaseError as e:
        raise FetchError(f"Error fetching {symbol}: {e}") from e


def _to_millis(value) -> int:
    stamp = pd.Timestamp(value)
    if stamp.tzinfo is None:
        stamp = stamp.tz_localize('UTC')
    return int(stamp.timestamp() * 1000)


def fetch_historical(exchange: ccxt.Exchange, symbol: str, timeframe: str,
                     start_date, end_date, limit: int = 1000) -> Tuple[pd.DataFrame, int]:
    """
    Fetch historical OHLCV candles from start_date to end_date (inclusive).

    Args:
        exchange: CCXT exchange instance
        symbol: Trading pair (e.g., 'BTC/USD')
        timeframe: Data granularity (e.g., '1h', '1d')
        start_date: Start date (string, date or timestamp)
        end_date: End date (string, date or timestamp); the whole day is included
        limit: Candles per request

    Returns:
        Tuple of (tidy DataFrame, number of API requests made)

    Raises:
        SymbolNotFoundError: If the market doesn't exist on the exchange
        FetchError: If a request fails
    """
    since = _to_millis(start_date)
    end_ts = _to_millis(pd.Timestamp(end_date).normalize()) + 24 * 3600 * 1000 - 1
    step_ms = int(exchange.parse_timeframe(timeframe) * 1000)

    all_ohlcv: List[list] = []
    api_requests = 0

    logger.debug(f"Fetching {symbol} {timeframe} from {exchange.id} between {start_date} and {end_date}")

    while since <= end_ts and api_requests < MAX_BATCHES:
        ohlcv = fetch_ohlcv_batch(exchange, symbol, timeframe, since, limit=limit)
        api_requests += 1
        if not ohlcv:
            break

        all_ohlcv.extend(ohlcv)
        last_timestamp = ohlcv[-1][0]
        if last_timestamp >= end_ts:
            break
        since = last_timestamp + step_ms

    if not all_ohlcv:
        logger.warning(f"No data fetched for {symbol} {timeframe} from {start_date} to {end_date}")
        return pd.DataFrame(columns=['date'] + OHLCV_COLUMNS), api_requests

    logger.debug(f"Fetched {len(all_ohlcv)} candles for {symbol} {timeframe} in {api_requests} API requests")

    df = pd.DataFrame(all_ohlcv, columns=['timestamp'] + OHLCV_COLUMNS)
    df = df[(df['timestamp'] >= _to_millis(start_date)) & (df['timestamp'] <= end_ts)]
    df = df.drop_duplicates(subset='timestamp', keep='last').sort_values('timestamp')

    df.insert(0, 'date', pd.to_datetime(df['timestamp'], unit='ms', utc=True))
    df = df.drop(columns='timestamp').reset_index(drop=True)
    return df, api_requests


def fetch_crypto_prices(symbol: str, from_date, to_date, exchange: Optional[str] = None,
                        timeframe: Optional[str] = None, **kwargs) -> pd.DataFrame:
    """
    Retrieve crypto OHLCV prices for one market.

    Args:
        symbol: Trading pair (e.g., 'BTC/USD')
        from_date: Start date
        to_date: End date
        exchange: ccxt exchange id (defaults to config data.crypto_exchange)
        timeframe: Candle size (defaults to config data.crypto_timeframe)

    Returns:
        Tidy table with date, open, high, low, close, volume

    Raises:
        SymbolNotFoundError: If the exchange returns no candles
    """
    from tqkit.config import get_config

    data_config = get_config().get_data_config()
    exchange_name = exchange or data_config.crypto_exchange
    timeframe = timeframe or data_config.crypto_timeframe

    client = create_exchange(exchange_name)
    df, requests = fetch_historical(client, symbol, timeframe, from_date, to_date, **kwargs)
    if df.empty:
        raise SymbolNotFoundError(
            f"No {timeframe} candles for {symbol} on {exchange_name} between {from_date} and {to_date}"
        )
    logger.info(f"Retrieved {len(df)} rows for {symbol} from {exchange_name} ({requests} requests)")
    return df
