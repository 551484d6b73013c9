"""
Configuration accessor module.

Provides type-safe access to configuration values.
"""

from typing import Dict, Any
from dataclasses import dataclass


@dataclass
class DataConfig:
    """Data retrieval configuration."""
    default_source: str
    default_lookback_years: int
    auto_adjust: bool
    crypto_exchange: str
    crypto_timeframe: str


@dataclass
class MovingAverageStyle:
    """Line style for moving average overlays."""
    color: str
    linestyle: str
    linewidth: float


@dataclass
class BBandsStyle:
    """Style for Bollinger Band overlays."""
    color_ma: str
    color_bands: str
    fill: str
    alpha: float


@dataclass
class ChartConfig:
    """Chart configuration."""
    color_up: str
    color_down: str
    fill_up: str
    fill_down: str
    linewidth: float
    moving_average: MovingAverageStyle
    bbands: BBandsStyle


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    format: str


class ConfigAccessor:
    """
    Type-safe access to configuration values.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the accessor.

        Args:
            config: Merged configuration dictionary
        """
        self.config = config

    # Data accessors
    def get_data_config(self) -> DataConfig:
        """Get data configuration as typed object."""
        data = self.config.get('data', {})
        return DataConfig(
            default_source=data.get('default_source', 'stock.prices'),
            default_lookback_years=int(data.get('default_lookback_years', 10)),
            auto_adjust=bool(data.get('auto_adjust', False)),
            crypto_exchange=data.get('crypto_exchange', 'coinbase'),
            crypto_timeframe=data.get('crypto_timeframe', '1d'),
        )

    # Chart accessors
    def get_chart_config(self) -> ChartConfig:
        """Get chart configuration as typed object."""
        charts = self.config.get('charts', {})
        ma = charts.get('moving_average', {})
        bands = charts.get('bbands', {})

        return ChartConfig(
            color_up=charts.get('color_up', 'darkblue'),
            color_down=charts.get('color_down', 'red'),
            fill_up=charts.get('fill_up', 'darkblue'),
            fill_down=charts.get('fill_down', 'red'),
            linewidth=float(charts.get('linewidth', 0.5)),
            moving_average=MovingAverageStyle(
                color=ma.get('color', 'darkgreen'),
                linestyle=ma.get('linestyle', 'dashed'),
                linewidth=float(ma.get('linewidth', 1.0)),
            ),
            bbands=BBandsStyle(
                color_ma=bands.get('color_ma', 'darkblue'),
                color_bands=bands.get('color_bands', 'red'),
                fill=bands.get('fill', 'grey'),
                alpha=float(bands.get('alpha', 0.05)),
            ),
        )

    # Logging accessors
    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration as typed object."""
        log = self.config.get('logging', {})
        return LoggingConfig(
            level=str(log.get('level', 'INFO')).upper(),
            format=log.get('format', '%(levelname)s:%(name)s:%(message)s'),
        )
