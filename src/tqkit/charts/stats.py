"""
Layer computations for bar and candlestick charts.

Each function turns a tidy OHLC table into plain layer tables (one row per
primitive to draw). Drawing lives in geoms.py.

Layer tables:
    linerange      x, ymin (low), ymax (high), colour
    segment_left   x, xend = x - 0.5, y = yend = open, colour
    segment_right  x, xend = x + 0.5, y = yend = close, colour
    rect           xmin = x - 0.45, xmax = x + 0.45, ymin, ymax (body), fill

x is expressed in matplotlib date numbers (days), so the 0.5 / 0.45 offsets
are fractions of a day.
"""

from typing import Dict, Optional

import matplotlib.dates as mdates
import numpy as np
import pandas as pd
from pandas.api.types import is_datetime64_any_dtype, is_numeric_dtype

from tqkit.exceptions import ColumnError

SEGMENT_HALF_WIDTH = 0.5
BODY_HALF_WIDTH = 0.45


def x_numbers(values: pd.Series) -> np.ndarray:
    if is_numeric_dtype(values) and not is_datetime64_any_dtype(values):
        return values.to_numpy(dtype='float64')

    dates = pd.to_datetime(values)
    if dates.dt.tz is not None:
        dates = dates.dt.tz_convert(None)
    return mdates.date2num(dates.to_numpy())


def _prepare(data: pd.DataFrame, x: str, open: str, high: str, low: str, close: str,
             group: Optional[str], na_rm: bool) -> pd.DataFrame:
    required = [x, open, high, low, close]
    if group is not None:
        required.append(group)
    missing = [col for col in required if col not in data.columns]
    if missing:
        raise ColumnError(
            f"Chart requires columns {missing}. Available columns: {list(data.columns)}"
        )

    frame = data[required].copy()
    if na_rm:
        frame = frame.dropna(subset=[x, open, high, low, close])

    prepared = pd.DataFrame({
        'x': x_numbers(frame[x]),
        'open': frame[open].astype('float64').to_numpy(),
        'high': frame[high].astype('float64').to_numpy(),
        'low': frame[low].astype('float64').to_numpy(),
        'close': frame[close].astype('float64').to_numpy(),
    })
    if group is not None:
        prepared.insert(0, 'group', frame[group].to_numpy())
    return prepared


def _with_group(layer: pd.DataFrame, prepared: pd.DataFrame) -> pd.DataFrame:
    if 'group' in prepared.columns:
        layer.insert(0, 'group', prepared['group'].to_numpy())
    return layer


def _linerange(prepared: pd.DataFrame, colours: np.ndarray) -> pd.DataFrame:
    return _with_group(pd.DataFrame({
        'x': prepared['x'],
        'ymin': prepared['low'],
        'ymax': prepared['high'],
        'colour': colours,
    }), prepared)


def barchart_layers(data: pd.DataFrame, x: str = 'date', open: str = 'open',
                    high: str = 'high', low: str = 'low', close: str = 'close',
                    color_up: str = 'darkblue', color_down: str = 'red',
                    group: Optional[str] = None, na_rm: bool = True) -> Dict[str, pd.DataFrame]:
    """
    Compute the three layers of an OHLC bar chart.

    A bar is "up" when open < close; equal open and close count as down.

    Args:
        data: Tidy table with date and OHLC columns
        x: Date (or numeric) column for the horizontal axis
        open, high, low, close: Column names of the price fields
        color_up: Colour of up bars
        color_down: Colour of down bars
        group: Optional column identifying series (e.g., 'symbol'), carried onto every layer
        na_rm: Drop rows with missing x or OHLC values

    Returns:
        Dict with 'linerange', 'segment_left' and 'segment_right' tables

    Raises:
        ColumnError: If a required column is missing
    """
    prepared = _prepare(data, x, open, high, low, close, group, na_rm)
    up = (prepared['open'] < prepared['close']).to_numpy()
    colours = np.where(up, color_up, color_down)

    segment_left = _with_group(pd.DataFrame({
        'x': prepared['x'],
        'xend': prepared['x'] - SEGMENT_HALF_WIDTH,
        'y': prepared['open'],
        'yend': prepared['open'],
        'colour': colours,
    }), prepared)

    segment_right = _with_group(pd.DataFrame({
        'x': prepared['x'],
        'xend': prepared['x'] + SEGMENT_HALF_WIDTH,
        'y': prepared['close'],
        'yend': prepared['close'],
        'colour': colours,
    }), prepared)

    return {
        'linerange': _linerange(prepared, colours),
        'segment_left': segment_left,
        'segment_right': segment_right,
    }


def candlestick_layers(data: pd.DataFrame, x: str = 'date', open: str = 'open',
                       high: str = 'high', low: str = 'low', close: str = 'close',
                       color_up: str = 'darkblue', color_down: str = 'red',
                       fill_up: str = 'darkblue', fill_down: str = 'red',
                       group: Optional[str] = None, na_rm: bool = True) -> Dict[str, pd.DataFrame]:
    """
    Compute the two layers of a candlestick chart: wicks and bodies.

    Args:
        data: Tidy table with date and OHLC columns
        x: Date (or numeric) column for the horizontal axis
        open, high, low, close: Column names of the price fields
        color_up, color_down: Wick colours
        fill_up, fill_down: Body fill colours
        group: Optional column identifying series
        na_rm: Drop rows with missing x or OHLC values

    Returns:
        Dict with 'linerange' and 'rect' tables

    Raises:
        ColumnError: If a required column is missing
    """
    prepared = _prepare(data, x, open, high, low, close, group, na_rm)
    up = (prepared['open'] < prepared['close']).to_numpy()

    rect = _with_group(pd.DataFrame({
        'xmin': prepared['x'] - BODY_HALF_WIDTH,
        'xmax': prepared['x'] + BODY_HALF_WIDTH,
        'ymin': np.where(up, prepared['open'], prepared['close']),
        'ymax': np.where(up, prepared['close'], prepared['open']),
        'fill': np.where(up, fill_up, fill_down),
    }), prepared)

    return {
        'linerange': _linerange(prepared, np.where(up, color_up, color_down)),
        'rect': rect,
    }

