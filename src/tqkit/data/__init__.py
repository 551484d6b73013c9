"""
Data retrieval: stock prices, dividends and splits from Yahoo Finance and
crypto candles from ccxt exchanges, all returned as tidy tables.
"""

from tqkit.data.sources import get, get_options
from tqkit.data.fetcher import create_exchange, fetch_historical, fetch_crypto_prices
from tqkit.data.yahoo import fetch_stock_prices, fetch_dividends, fetch_splits

__all__ = [
    'get',
    'get_options',
    'create_exchange',
    'fetch_historical',
    'fetch_crypto_prices',
    'fetch_stock_prices',
    'fetch_dividends',
    'fetch_splits',
]
