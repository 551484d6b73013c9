"""
Unit tests for data retrieval.

Network providers (yfinance, ccxt) are replaced with mocks.
"""

import unittest
from unittest import mock

import ccxt
import pandas as pd
import pytest

from tqkit.data import fetcher, sources, yahoo
from tqkit.exceptions import FetchError, SymbolNotFoundError


def _yahoo_history(start='2020-01-02', periods=3):
    index = pd.date_range(start, periods=periods, freq='B', tz='America/New_York', name='Date')
    return pd.DataFrame({
        'Open': [10.0, 11.0, 12.0][:periods],
        'High': [11.0, 12.0, 13.0][:periods],
        'Low': [9.0, 10.0, 11.0][:periods],
        'Close': [10.5, 11.5, 12.5][:periods],
        'Adj Close': [10.4, 11.4, 12.4][:periods],
        'Volume': [100, 200, 300][:periods],
    }, index=index)


@pytest.mark.unit
class TestYahoo(unittest.TestCase):

    @mock.patch('tqkit.data.yahoo.yf.Ticker')
    def test_stock_prices_are_tidy(self, ticker_cls):
        ticker_cls.return_value.history.return_value = _yahoo_history()

        prices = yahoo.fetch_stock_prices('AAPL', '2020-01-01', '2020-01-10')

        self.assertEqual(list(prices.columns),
                         ['date', 'open', 'high', 'low', 'close', 'volume', 'adjusted'])
        self.assertIsNone(prices['date'].dt.tz)
        self.assertEqual(prices['date'].iloc[0], pd.Timestamp('2020-01-02'))
        self.assertEqual(prices['adjusted'].iloc[-1], 12.4)

    @mock.patch('tqkit.data.yahoo.yf.Ticker')
    def test_end_date_is_inclusive(self, ticker_cls):
        ticker_cls.return_value.history.return_value = _yahoo_history()

        yahoo.fetch_stock_prices('AAPL', '2020-01-01', '2020-01-10')

        kwargs = ticker_cls.return_value.history.call_args.kwargs
        self.assertEqual(kwargs['start'], '2020-01-01')
        self.assertEqual(kwargs['end'], '2020-01-11')
        self.assertFalse(kwargs['auto_adjust'])

    @mock.patch('tqkit.data.yahoo.yf.Ticker')
    def test_missing_adjusted_falls_back_to_close(self, ticker_cls):
        ticker_cls.return_value.history.return_value = _yahoo_history().drop(columns='Adj Close')
        prices = yahoo.fetch_stock_prices('AAPL', '2020-01-01', '2020-01-10', auto_adjust=True)
        self.assertEqual(prices['adjusted'].tolist(), prices['close'].tolist())

    @mock.patch('tqkit.data.yahoo.yf.Ticker')
    def test_empty_history_raises_not_found(self, ticker_cls):
        ticker_cls.return_value.history.return_value = pd.DataFrame()
        with self.assertRaises(SymbolNotFoundError):
            yahoo.fetch_stock_prices('NOPE', '2020-01-01', '2020-01-10')

    @mock.patch('tqkit.data.yahoo.yf.Ticker')
    def test_provider_error_raises_fetch_error(self, ticker_cls):
        ticker_cls.return_value.history.side_effect = RuntimeError('rate limited')
        with self.assertRaises(FetchError):
            yahoo.fetch_stock_prices('AAPL', '2020-01-01', '2020-01-10')

    @mock.patch('tqkit.data.yahoo.yf.Ticker')
    def test_dividends_filtered_to_range(self, ticker_cls):
        index = pd.DatetimeIndex(['2019-11-07', '2020-02-07', '2020-05-08'], tz='America/New_York')
        ticker_cls.return_value.dividends = pd.Series([0.77, 0.77, 0.82], index=index, name='Dividends')

        dividends = yahoo.fetch_dividends('AAPL', '2020-01-01', '2020-12-31')

        self.assertEqual(list(dividends.columns), ['date', 'value'])
        self.assertEqual(dividends['value'].tolist(), [0.77, 0.82])

    @mock.patch('tqkit.data.yahoo.yf.Ticker')
    def test_no_splits_in_range_raises(self, ticker_cls):
        index = pd.DatetimeIndex(['2014-06-09'], tz='America/New_York')
        ticker_cls.return_value.splits = pd.Series([7.0], index=index)
        with self.assertRaises(SymbolNotFoundError):
            yahoo.fetch_splits('AAPL', '2020-01-01', '2020-12-31')


def _candle(day, price):
    millis = int(pd.Timestamp(day, tz='UTC').timestamp() * 1000)
    return [millis, price, price + 1, price - 1, price + 0.5, 10.0]


@pytest.mark.unit
class TestCcxtFetcher(unittest.TestCase):

    def setUp(self):
        self.exchange = mock.MagicMock()
        self.exchange.id = 'mockex'
        self.exchange.parse_timeframe.return_value = 86400

    def test_pages_until_end_date(self):
        self.exchange.fetch_ohlcv.side_effect = [
            [_candle('2024-01-01', 100), _candle('2024-01-02', 101)],
            [_candle('2024-01-03', 102)],
        ]

        df, requests = fetcher.fetch_historical(self.exchange, 'BTC/USD', '1d',
                                                '2024-01-01', '2024-01-03', limit=2)

        self.assertEqual(requests, 2)
        self.assertEqual(list(df.columns), ['date', 'open', 'high', 'low', 'close', 'volume'])
        self.assertEqual(len(df), 3)
        self.assertEqual(str(df['date'].dt.tz), 'UTC')
        second_since = self.exchange.fetch_ohlcv.call_args_list[1].args[2]
        self.assertEqual(second_since, _candle('2024-01-03', 0)[0])

    def test_rows_outside_range_are_dropped(self):
        self.exchange.fetch_ohlcv.side_effect = [
            [_candle('2024-01-01', 100), _candle('2024-01-02', 101), _candle('2024-01-05', 104)],
        ]
        df, _ = fetcher.fetch_historical(self.exchange, 'BTC/USD', '1d', '2024-01-01', '2024-01-02')
        self.assertEqual(len(df), 2)

    def test_no_candles_returns_empty(self):
        self.exchange.fetch_ohlcv.return_value = []
        df, requests = fetcher.fetch_historical(self.exchange, 'BTC/USD', '1d', '2024-01-01', '2024-01-02')
        self.assertTrue(df.empty)
        self.assertEqual(requests, 1)

    def test_bad_symbol_raises_not_found(self):
        self.exchange.fetch_ohlcv.side_effect = ccxt.BadSymbol('mockex does not have market symbol XXX/USD')
        with self.assertRaises(SymbolNotFoundError):
            fetcher.fetch_ohlcv_batch(self.exchange, 'XXX/USD', '1d', 0)

    def test_network_error_raises_fetch_error(self):
        self.exchange.fetch_ohlcv.side_effect = ccxt.NetworkError('timeout')
        with self.assertRaises(FetchError):
            fetcher.fetch_ohlcv_batch(self.exchange, 'BTC/USD', '1d', 0)

    def test_unknown_exchange_raises(self):
        with self.assertRaises(FetchError):
            fetcher.create_exchange('not_an_exchange')

    @mock.patch('tqkit.data.fetcher.create_exchange')
    def test_crypto_prices_use_configured_exchange(self, create_exchange):
        create_exchange.return_value = self.exchange
        self.exchange.fetch_ohlcv.side_effect = [[_candle('2024-01-01', 100)], []]

        df = fetcher.fetch_crypto_prices('BTC/USD', '2024-01-01', '2024-01-02')

        create_exchange.assert_called_once_with('coinbase')
        self.assertEqual(self.exchange.fetch_ohlcv.call_args_list[0].args[1], '1d')
        self.assertEqual(len(df), 1)

    @mock.patch('tqkit.data.fetcher.create_exchange')
    def test_crypto_prices_empty_raises(self, create_exchange):
        create_exchange.return_value = self.exchange
        self.exchange.fetch_ohlcv.return_value = []
        with self.assertRaises(SymbolNotFoundError):
            fetcher.fetch_crypto_prices('BTC/USD', '2024-01-01', '2024-01-02', exchange='kraken')


def _fake_source(symbol, from_date, to_date, **kwargs):
    if symbol == 'BAD':
        raise SymbolNotFoundError('BAD not found')
    return pd.DataFrame({'date': [pd.Timestamp(from_date), pd.Timestamp(to_date)], 'close': [1.0, 2.0]})


@pytest.mark.unit
class TestGet(unittest.TestCase):

    def setUp(self):
        patcher = mock.patch.dict(sources._SOURCES, {'stock.prices': _fake_source})
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_options(self):
        self.assertEqual(sources.get_options(),
                         ['stock.prices', 'dividends', 'splits', 'crypto.prices'])

    def test_single_symbol_has_no_symbol_column(self):
        result = sources.get('AAPL', from_date='2020-01-01', to_date='2020-02-01')
        self.assertEqual(list(result.columns), ['date', 'close'])
        self.assertEqual(result['date'].iloc[-1], pd.Timestamp('2020-02-01'))

    def test_single_bad_symbol_raises(self):
        with self.assertRaises(SymbolNotFoundError):
            sources.get('BAD', from_date='2020-01-01', to_date='2020-02-01')

    def test_several_symbols_isolate_bad_apples(self):
        with pytest.warns(UserWarning):
            result = sources.get(['AAPL', 'BAD', 'MSFT'], from_date='2020-01-01', to_date='2020-02-01')
        self.assertEqual(result['symbol'].unique().tolist(), ['AAPL', 'MSFT'])

    def test_keep_bad_apples(self):
        with pytest.warns(UserWarning):
            result = sources.get(['AAPL', 'BAD'], from_date='2020-01-01', to_date='2020-02-01',
                                 complete_cases=False)
        self.assertIn('BAD', result['symbol'].tolist())

    def test_default_lookback_from_config(self):
        result = sources.get('AAPL', to_date='2020-06-15')
        self.assertEqual(result['date'].iloc[0], pd.Timestamp('2010-06-15'))

    def test_inverted_dates_raise(self):
        with self.assertRaises(ValueError):
            sources.get('AAPL', from_date='2021-01-01', to_date='2020-01-01')

    def test_unknown_source_raises(self):
        with self.assertRaises(ValueError):
            sources.get('AAPL', get='bond.prices')
