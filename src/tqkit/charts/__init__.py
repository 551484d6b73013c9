"""
Financial charts on matplotlib.

Package Contents:
    - barchart_layers(), candlestick_layers(): layer tables for OHLC charts
    - barchart(), candlestick(): draw OHLC charts on an Axes
    - moving_average(), bbands(): indicator overlays
    - zoom_x_date(): zoom a date axis
    - theme_tq(), palette_light(), palette_dark(), palette_green()
"""

from tqkit.charts.stats import barchart_layers, candlestick_layers
from tqkit.charts.geoms import barchart, candlestick, moving_average, bbands
from tqkit.charts.coords import zoom_x_date
from tqkit.charts.themes import theme_tq, palette_light, palette_dark, palette_green

__all__ = [
    'barchart_layers',
    'candlestick_layers',
    'barchart',
    'candlestick',
    'moving_average',
    'bbands',
    'zoom_x_date',
    'theme_tq',
    'palette_light',
    'palette_dark',
    'palette_green',
]
