"""
Configuration exceptions.
"""

from tqkit.exceptions import TqError


class ConfigError(TqError):
    """Raised when configuration cannot be loaded or is invalid."""
    pass
