"""
Configuration package.

Main entry point:
    from tqkit.config import get_config

    config = get_config()
    exchange = config.get_data_config().crypto_exchange

The active configuration is created lazily from the packaged defaults and can
be replaced with set_config() (the CLI does this for --config-dir/--profile).
"""

from typing import Optional

from tqkit.config.core import (
    ConfigError,
    ConfigManager,
    ConfigLoader,
    ConfigValidator,
    ValidationResult,
    ConfigAccessor,
)

_active_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Return the active configuration, loading the defaults on first use."""
    global _active_config
    if _active_config is None:
        _active_config = ConfigManager()
    return _active_config


def set_config(config: Optional[ConfigManager]) -> None:
    """Replace the active configuration (None resets to the defaults)."""
    global _active_config
    _active_config = config


__all__ = [
    'ConfigError',
    'ConfigManager',
    'ConfigLoader',
    'ConfigValidator',
    'ValidationResult',
    'ConfigAccessor',
    'get_config',
    'set_config',
]
