"""
Command-line entry point.

Run: tqkit --help   (or python -m tqkit --help)
"""

import logging
import sys
from typing import List, Optional

from tqkit.cli.commands import COMMANDS
from tqkit.cli.output import ConsoleOutput
from tqkit.cli.parser import parse_arguments
from tqkit.config import ConfigManager, set_config
from tqkit.exceptions import TqError
from tqkit.log import setup_logging

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command-line interface."""
    args = parse_arguments(argv)
    output = ConsoleOutput(verbose=args.verbose)

    try:
        config = ConfigManager(config_dir=args.config_dir, profile_name=args.profile)
    except TqError as e:
        output.error_message(e)
        return 2

    set_config(config)
    setup_logging(config, level='DEBUG' if args.verbose else None)
    logger.debug(f"Running '{args.command}' with profile={args.profile}")

    try:
        return COMMANDS[args.command](args, output)
    except (TqError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        output.error_message(e)
        return 1


if __name__ == '__main__':
    sys.exit(main())
