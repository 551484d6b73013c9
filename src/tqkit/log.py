"""
Logging setup.

Library modules only create module loggers (``logging.getLogger(__name__)``);
applications call setup_logging() once to configure the root logger from the
'logging' section of the configuration.
"""

import logging
from typing import Optional

from tqkit.config import ConfigManager, get_config


def setup_logging(config: Optional[ConfigManager] = None, level: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        config: Configuration to read level and format from (active config when None)
        level: Level name overriding the configured one (e.g., 'DEBUG')
    """
    log_config = (config or get_config()).get_logging_config()
    level_name = (level or log_config.level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=log_config.format,
        force=True,
    )
    # Third-party HTTP clients are noisy at DEBUG
    for name in ('urllib3', 'ccxt', 'yfinance', 'matplotlib', 'peewee'):
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLogger().level))
