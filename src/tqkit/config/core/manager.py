"""
Configuration manager module.

Facade that ties together loading, validation and typed access.
"""

import logging
from typing import Optional

from tqkit.config.core.accessor import ChartConfig, ConfigAccessor, DataConfig, LoggingConfig
from tqkit.config.core.exceptions import ConfigError
from tqkit.config.core.loader import ConfigLoader
from tqkit.config.core.validator import ConfigValidator

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Centralized configuration manager.

    Loads the domain files (data, charts, logging), applies an optional
    profile, validates the result and exposes typed sections.

    Quick Start:
        config = ConfigManager()                       # packaged defaults
        config = ConfigManager(profile_name='verbose')  # with overrides
        years = config.get_data_config().default_lookback_years
    """

    def __init__(self, config_dir: Optional[str] = None, profile_name: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Directory holding data.yaml, charts.yaml, logging.yaml
                        and an optional profiles/ folder
            profile_name: Optional profile name for configuration overrides

        Raises:
            ConfigError: If configuration files cannot be loaded or validated
        """
        self.loader = ConfigLoader(config_dir)
        self.config_dir = self.loader.config_dir
        self.profile_name = profile_name

        self.config = self.loader.load_all(profile_name)
        self._validate()
        self.accessor = ConfigAccessor(self.config)

    def _validate(self):
        result = ConfigValidator().validate(self.config)
        for warning in result.warnings:
            logger.warning(f"Config: {warning}")
        if not result.is_valid():
            raise ConfigError("Invalid configuration:\n  - " + "\n  - ".join(result.errors))

    def get_data_config(self) -> DataConfig:
        """Get data configuration."""
        return self.accessor.get_data_config()

    def get_chart_config(self) -> ChartConfig:
        """Get chart configuration."""
        return self.accessor.get_chart_config()

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.accessor.get_logging_config()
