"""
Shared pytest fixtures for all tests.

Provides reusable fixtures for:
- OHLCV data generation (time-indexed and tidy)
- Multi-symbol tidy price tables
- Configuration setup
"""

import matplotlib
matplotlib.use('Agg')

import pytest
import pandas as pd
import numpy as np
import tempfile
import os
import yaml
import shutil
from datetime import datetime
from typing import Optional

from tqkit.config import set_config


@pytest.fixture(autouse=True)
def reset_active_config():
    """Every test starts and ends with the packaged default configuration."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def sample_ohlcv_data():
    """
    Generate realistic OHLCV data.

    Uses realistic price movements (trend + noise).
    Ensures proper OHLC relationships (high >= open/close >= low).

    Default: 250 daily candles, returned with a DatetimeIndex named 'date'.
    Pass tidy=True to get the date as a column instead.
    """
    def _create_ohlcv_data(
        num_candles: int = 250,
        start_date: Optional[datetime] = None,
        frequency: str = 'D',
        base_price: float = 100.0,
        volatility: float = 0.02,
        seed: int = 42,
        tidy: bool = False
    ) -> pd.DataFrame:
        """Create OHLCV data with specified parameters."""
        if start_date is None:
            start_date = datetime(2020, 1, 1)

        dates = pd.date_range(start=start_date, periods=num_candles, freq=frequency, name='date')

        # Set seed for reproducibility using NumPy's modern random API
        rng = np.random.default_rng(seed)

        n = num_candles
        trend = np.linspace(0, base_price * 0.2, n)
        noise = rng.standard_normal(n).cumsum() * base_price * volatility * 0.5
        closes = base_price + trend + noise

        opens = np.roll(closes, 1)
        opens[0] = base_price

        high_spreads = np.abs(rng.standard_normal(n) * base_price * volatility * 0.5)
        low_spreads = np.abs(rng.standard_normal(n) * base_price * volatility * 0.5)
        highs = np.maximum(opens, closes) + high_spreads
        lows = np.minimum(opens, closes) - low_spreads

        volumes = rng.integers(1_000_000, 10_000_000, n).astype('float64')

        df = pd.DataFrame({
            'open': opens,
            'high': highs,
            'low': lows,
            'close': closes,
            'volume': volumes,
        }, index=dates)

        if tidy:
            df = df.reset_index()
        return df

    return _create_ohlcv_data


@pytest.fixture
def tidy_prices(sample_ohlcv_data):
    """Tidy daily prices for two symbols (symbol, date, OHLCV, adjusted)."""
    frames = []
    for seed, symbol in enumerate(['AAPL', 'MSFT']):
        frame = sample_ohlcv_data(num_candles=180, frequency='B', seed=seed, tidy=True,
                                  base_price=100.0 + 50 * seed)
        frame['adjusted'] = frame['close'] * 0.98
        frame.insert(0, 'symbol', symbol)
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


@pytest.fixture
def monthly_prices():
    """
    A small tidy table with known month-end values.

    Month-end adjusted prices are 110, 121 and 108.9 after a first value of
    100, giving monthly returns of +10%, +10% and -10%.
    """
    return pd.DataFrame({
        'date': pd.to_datetime(['2020-01-02', '2020-01-31', '2020-02-03',
                                '2020-02-28', '2020-03-02', '2020-03-31']),
        'adjusted': [100.0, 110.0, 111.0, 121.0, 120.0, 108.9],
    })


@pytest.fixture
def temp_config_dir():
    """Create temporary config directory with minimal valid config files."""
    temp_dir = tempfile.mkdtemp()
    config_dir = os.path.join(temp_dir, 'config')
    os.makedirs(os.path.join(config_dir, 'profiles'))

    data_config = {
        'data': {
            'default_source': 'stock.prices',
            'default_lookback_years': 5,
            'auto_adjust': False,
            'crypto_exchange': 'kraken',
            'crypto_timeframe': '1h',
        }
    }
    charts_config = {
        'charts': {
            'color_up': 'green',
            'color_down': 'black',
            'fill_up': 'green',
            'fill_down': 'black',
            'linewidth': 0.8,
            'moving_average': {'color': 'orange', 'linestyle': 'solid', 'linewidth': 1.5},
            'bbands': {'color_ma': 'blue', 'color_bands': 'grey', 'fill': 'lightgrey', 'alpha': 0.1},
        }
    }
    logging_config = {'logging': {'level': 'WARNING', 'format': '%(levelname)s:%(message)s'}}
    quick_profile = {'data': {'default_lookback_years': 1}, 'logging': {'level': 'DEBUG'}}

    for name, content in (('data.yaml', data_config), ('charts.yaml', charts_config),
                          ('logging.yaml', logging_config)):
        with open(os.path.join(config_dir, name), 'w') as f:
            yaml.dump(content, f)
    with open(os.path.join(config_dir, 'profiles', 'quick.yaml'), 'w') as f:
        yaml.dump(quick_profile, f)

    yield config_dir

    shutil.rmtree(temp_dir, ignore_errors=True)
