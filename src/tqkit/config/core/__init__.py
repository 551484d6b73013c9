"""
Configuration core modules.

Contains the main configuration management components:
- ConfigManager: Main facade for configuration access
- ConfigLoader: Loads and merges YAML files
- ConfigValidator: Validates configuration
- ConfigAccessor: Provides type-safe access
"""

from tqkit.config.core.exceptions import ConfigError
from tqkit.config.core.manager import ConfigManager
from tqkit.config.core.loader import ConfigLoader
from tqkit.config.core.validator import ConfigValidator, ValidationResult
from tqkit.config.core.accessor import ConfigAccessor

__all__ = [
    'ConfigError',
    'ConfigManager',
    'ConfigLoader',
    'ConfigValidator',
    'ValidationResult',
    'ConfigAccessor',
]
