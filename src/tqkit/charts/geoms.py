"""
Chart drawing on matplotlib axes.

Quick Start:
    import matplotlib.pyplot as plt
    from tqkit.charts import candlestick, moving_average, bbands, theme_tq

    fig, ax = plt.subplots()
    candlestick(ax, aapl)
    moving_average(ax, aapl, ma_fun='EMA', n=[20, 50])
    bbands(ax, aapl, n=20, sd=2)
    theme_tq(ax)

Unset style arguments (colours, line widths, alpha) fall back to the
'charts' section of the active configuration.
"""

from typing import Iterable, List, Optional, Union

import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.collections import LineCollection, PatchCollection
from matplotlib.patches import Rectangle
from pandas.api.types import is_datetime64_any_dtype

from tqkit.charts.stats import x_numbers, barchart_layers, candlestick_layers
from tqkit.core.coercion import as_timeseries
from tqkit.core.ohlc import find_field, price_column, typical_price
from tqkit.exceptions import ColumnError
from tqkit.functions import get_function


def _chart_config():
    from tqkit.config import get_config
    return get_config().get_chart_config()


def _pick(value, default):
    return default if value is None else value


def _finish_axis(ax: Axes, data: pd.DataFrame, x: str) -> None:
    if is_datetime64_any_dtype(data[x]):
        ax.xaxis_date()
    ax.autoscale_view()


def _segments(x0, y0, x1, y1) -> np.ndarray:
    return np.stack([np.column_stack([x0, y0]), np.column_stack([x1, y1])], axis=1)


def _linerange_collection(layer: pd.DataFrame, linewidth, linestyle, alpha) -> LineCollection:
    segments = _segments(layer['x'], layer['ymin'], layer['x'], layer['ymax'])
    return LineCollection(segments, colors=list(layer['colour']), linewidths=linewidth,
                          linestyles=linestyle, alpha=alpha)


def barchart(ax: Axes, data: pd.DataFrame, x: str = 'date', open: str = 'open',
             high: str = 'high', low: str = 'low', close: str = 'close',
             color_up: Optional[str] = None, color_down: Optional[str] = None,
             linewidth: Optional[float] = None, linestyle: str = 'solid',
             alpha: Optional[float] = None, group: Optional[str] = None,
             na_rm: bool = True) -> List[LineCollection]:
    """
    Draw an OHLC bar chart: a high-low range with open tick left and close tick right.

    Args:
        ax: Axes to draw on
        data: Tidy table with date and OHLC columns
        x, open, high, low, close: Column names
        color_up, color_down: Bar colours (config defaults when None)
        linewidth, linestyle, alpha: Line styling
        group: Optional series column (e.g., 'symbol')
        na_rm: Drop rows with missing values

    Returns:
        The collections added to the axes
    """
    style = _chart_config()
    linewidth = _pick(linewidth, style.linewidth)
    layers = barchart_layers(
        data, x=x, open=open, high=high, low=low, close=close,
        color_up=_pick(color_up, style.color_up), color_down=_pick(color_down, style.color_down),
        group=group, na_rm=na_rm,
    )

    collections = [_linerange_collection(layers['linerange'], linewidth, linestyle, alpha)]
    for name in ('segment_left', 'segment_right'):
        layer = layers[name]
        collections.append(LineCollection(
            _segments(layer['x'], layer['y'], layer['xend'], layer['yend']),
            colors=list(layer['colour']), linewidths=linewidth,
            linestyles=linestyle, alpha=alpha,
        ))

    for collection in collections:
        ax.add_collection(collection)
    _finish_axis(ax, data, x)
    return collections


def candlestick(ax: Axes, data: pd.DataFrame, x: str = 'date', open: str = 'open',
                high: str = 'high', low: str = 'low', close: str = 'close',
                color_up: Optional[str] = None, color_down: Optional[str] = None,
                fill_up: Optional[str] = None, fill_down: Optional[str] = None,
                linewidth: Optional[float] = None, linestyle: str = 'solid',
                alpha: Optional[float] = None, group: Optional[str] = None,
                na_rm: bool = True) -> List[Union[LineCollection, PatchCollection]]:
    """
    Draw a candlestick chart: high-low wicks behind open-close bodies.

    Args:
        ax: Axes to draw on
        data: Tidy table with date and OHLC columns
        x, open, high, low, close: Column names
        color_up, color_down: Wick colours (config defaults when None)
        fill_up, fill_down: Body colours (config defaults when None)
        linewidth, linestyle, alpha: Styling
        group: Optional series column
        na_rm: Drop rows with missing values

    Returns:
        The wick and body collections added to the axes
    """
    style = _chart_config()
    layers = candlestick_layers(
        data, x=x, open=open, high=high, low=low, close=close,
        color_up=_pick(color_up, style.color_up), color_down=_pick(color_down, style.color_down),
        fill_up=_pick(fill_up, style.fill_up), fill_down=_pick(fill_down, style.fill_down),
        group=group, na_rm=na_rm,
    )

    wicks = _linerange_collection(layers['linerange'], _pick(linewidth, style.linewidth),
                                  linestyle, alpha)

    rect = layers['rect']
    patches = [
        Rectangle((xmin, ymin), xmax - xmin, ymax - ymin)
        for xmin, xmax, ymin, ymax in zip(rect['xmin'], rect['xmax'], rect['ymin'], rect['ymax'])
    ]
    bodies = PatchCollection(patches, facecolors=list(rect['fill']), edgecolors='none', alpha=alpha)

    ax.add_collection(wicks)
    ax.add_collection(bodies)
    _finish_axis(ax, data, x)
    return [wicks, bodies]


def _series_frames(data: pd.DataFrame, group: Optional[str]):
    if group is None:
        yield None, data
        return
    if group not in data.columns:
        raise ColumnError(f"Group column '{group}' not found. Available columns: {list(data.columns)}")
    for key, part in data.groupby(group, sort=False, dropna=False):
        yield key, part


def _as_windows(n: Union[int, Iterable[int]]) -> List[int]:
    if isinstance(n, (int, np.integer)) and not isinstance(n, bool):
        return [int(n)]
    return list(n)


def moving_average(ax: Axes, data: pd.DataFrame, ma_fun: str = 'SMA',
                   n: Union[int, Iterable[int]] = 20, x: str = 'date', price: str = 'close',
                   color: Optional[str] = None, linestyle: Optional[str] = None,
                   linewidth: Optional[float] = None, alpha: Optional[float] = None,
                   group: Optional[str] = None, **params) -> list:
    """
    Overlay moving averages of a price column.

    Args:
        ax: Axes to draw on
        data: Tidy table with a date column and the price column
        ma_fun: Catalog name of the moving average ('SMA', 'EMA', 'WMA', ...)
        n: Window, or several windows for several lines
        x: Date column
        price: Column to average
        color, linestyle, linewidth, alpha: Line styling (config defaults when None)
        group: Optional series column; one line per group and window
        **params: Extra parameters for the moving-average function

    Returns:
        The Line2D objects added to the axes

    Raises:
        UnknownFunctionError: If ma_fun is not in the catalog
        ColumnError: If the price column is missing
    """
    style = _chart_config().moving_average
    fun = get_function(ma_fun)
    windows = _as_windows(n)

    lines = []
    for key, part in _series_frames(data, group):
        ts = as_timeseries(part, select=price, date_col=x)
        xs = x_numbers(ts.index.to_series())
        for window in windows:
            values = fun.compute(ts, n=window, **params)
            if isinstance(values, pd.DataFrame):
                values = values.iloc[:, 0]
            label = f"{fun.name}({window})" if key is None else f"{key} {fun.name}({window})"
            lines.extend(ax.plot(
                xs, values.to_numpy(dtype='float64'), label=label,
                color=_pick(color, style.color), linestyle=_pick(linestyle, style.linestyle),
                linewidth=_pick(linewidth, style.linewidth), alpha=alpha,
            ))

    _finish_axis(ax, data, x)
    return lines


def _band_inputs(part: pd.DataFrame, x: str) -> pd.DataFrame:
    fields = [find_field(part, field) for field in ('high', 'low', 'close')]
    if all(field is not None for field in fields):
        return as_timeseries(part, select=fields, date_col=x)
    return as_timeseries(part, select=price_column(part, 'close'), date_col=x)


def bbands(ax: Axes, data: pd.DataFrame, ma_fun: str = 'SMA', n: int = 20, sd: float = 2,
           x: str = 'date', color_ma: Optional[str] = None, color_bands: Optional[str] = None,
           fill: Optional[str] = None, alpha: Optional[float] = None,
           linestyle: Optional[str] = None, linewidth: Optional[float] = None,
           group: Optional[str] = None) -> list:
    """
    Overlay Bollinger Bands: a moving average with bands sd deviations away
    and a shaded ribbon between them.

    Bands use the typical price (high + low + close) / 3 when those columns
    exist, else close. The centre line applies ma_fun to that price; the band
    half-width is taken from the BBands function (sd rolling deviations).

    Returns:
        The artists added to the axes (ribbon first)
    """
    style = _chart_config().bbands
    ma_style = _chart_config().moving_average
    fun = get_function(ma_fun)
    bands_fun = get_function('BBands')
    linestyle = _pick(linestyle, ma_style.linestyle)
    linewidth = _pick(linewidth, ma_style.linewidth)

    artists = []
    for _, part in _series_frames(data, group):
        ts = _band_inputs(part, x)
        xs = x_numbers(ts.index.to_series())

        bands = bands_fun.compute(ts, n=n, sd=sd)
        half_width = bands['up'] - bands['mavg']
        center = fun.compute(typical_price(ts).rename('price').to_frame(), n=n)
        if isinstance(center, pd.DataFrame):
            center = center.iloc[:, 0]
        center = center.to_numpy(dtype='float64')
        lower = center - half_width.to_numpy(dtype='float64')
        upper = center + half_width.to_numpy(dtype='float64')

        artists.append(ax.fill_between(xs, lower, upper, color=_pick(fill, style.fill),
                                       alpha=_pick(alpha, style.alpha), linewidth=0))
        for values in (lower, upper):
            artists.extend(ax.plot(xs, values, color=_pick(color_bands, style.color_bands),
                                   linestyle=linestyle, linewidth=linewidth))
        artists.extend(ax.plot(xs, center, color=_pick(color_ma, style.color_ma),
                               linestyle=linestyle, linewidth=linewidth))

    _finish_axis(ax, data, x)
    return artists
