"""
Configuration validator module.

Validates configuration structure, types and ranges.
"""

import logging
from typing import Dict, Any, List

from matplotlib.colors import is_color_like


# Names registered in tqkit.data.sources
DATA_SOURCES = ('stock.prices', 'dividends', 'splits', 'crypto.prices')
_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
_LINESTYLES = ('solid', 'dashed', 'dashdot', 'dotted', '-', '--', '-.', ':')


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def is_valid(self) -> bool:
        """Check if validation passed."""
        return len(self.errors) == 0

    def add_error(self, message: str):
        """Add a validation error."""
        self.errors.append(message)

    def add_warning(self, message: str):
        """Add a validation warning."""
        self.warnings.append(message)


class ConfigValidator:
    """
    Validates configuration structure, types, and constraints.
    """

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate entire configuration.

        Args:
            config: Configuration dictionary to validate

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult()

        self.validate_data(config.get('data', {}), result)
        self.validate_charts(config.get('charts', {}), result)
        self.validate_logging(config.get('logging', {}), result)

        return result

    def validate_data(self, config: Dict[str, Any], result: ValidationResult):
        """Validate data configuration."""
        if not config:
            result.add_error("Missing 'data' configuration section")
            return

        source = config.get('default_source')
        if source is not None and source not in DATA_SOURCES:
            result.add_error(f"'data.default_source' must be one of {list(DATA_SOURCES)}")

        years = config.get('default_lookback_years')
        if years is not None:
            if isinstance(years, bool) or not isinstance(years, int):
                result.add_error("'data.default_lookback_years' must be an integer")
            elif years < 1:
                result.add_error("'data.default_lookback_years' must be >= 1")

        if 'auto_adjust' in config and not isinstance(config['auto_adjust'], bool):
            result.add_error("'data.auto_adjust' must be a boolean")

        for key in ('crypto_exchange', 'crypto_timeframe'):
            if key in config and not isinstance(config[key], str):
                result.add_error(f"'data.{key}' must be a string")

    def validate_charts(self, config: Dict[str, Any], result: ValidationResult):
        """Validate chart configuration."""
        if not config:
            result.add_error("Missing 'charts' configuration section")
            return

        for key in ('color_up', 'color_down', 'fill_up', 'fill_down'):
            if key in config and not is_color_like(config[key]):
                result.add_error(f"'charts.{key}' is not a valid colour: {config[key]!r}")

        if 'linewidth' in config:
            self._check_positive(config['linewidth'], 'charts.linewidth', result)

        ma = config.get('moving_average', {})
        if ma:
            if 'color' in ma and not is_color_like(ma['color']):
                result.add_error(f"'charts.moving_average.color' is not a valid colour: {ma['color']!r}")
            if 'linestyle' in ma and ma['linestyle'] not in _LINESTYLES:
                result.add_error(f"'charts.moving_average.linestyle' must be one of {_LINESTYLES}")
            if 'linewidth' in ma:
                self._check_positive(ma['linewidth'], 'charts.moving_average.linewidth', result)

        bands = config.get('bbands', {})
        if bands:
            for key in ('color_ma', 'color_bands', 'fill'):
                if key in bands and not is_color_like(bands[key]):
                    result.add_error(f"'charts.bbands.{key}' is not a valid colour: {bands[key]!r}")
            alpha = bands.get('alpha')
            if alpha is not None:
                try:
                    if not 0.0 <= float(alpha) <= 1.0:
                        result.add_error("'charts.bbands.alpha' must be between 0 and 1")
                except (ValueError, TypeError):
                    result.add_error("'charts.bbands.alpha' must be a number")

    def validate_logging(self, config: Dict[str, Any], result: ValidationResult):
        """Validate logging configuration."""
        if not config:
            result.add_warning("Missing 'logging' configuration section; using defaults")
            return

        level = config.get('level')
        if level is not None and str(level).upper() not in _LOG_LEVELS:
            result.add_error(f"'logging.level' must be one of {_LOG_LEVELS}")

        fmt = config.get('format')
        if fmt is not None:
            try:
                logging.Formatter(fmt).format(logging.makeLogRecord({'msg': 'check'}))
            except (ValueError, KeyError, TypeError) as e:
                result.add_error(f"'logging.format' is invalid: {e}")

    def _check_positive(self, value: Any, name: str, result: ValidationResult):
        try:
            if float(value) <= 0:
                result.add_error(f"'{name}' must be > 0")
        except (ValueError, TypeError):
            result.add_error(f"'{name}' must be a number")
