"""
Console output formatting module.

This module handles all user-facing console output: tables, the function
catalog, saved-file notices and error messages.
"""

import sys
from typing import Dict, List

import pandas as pd


class ConsoleOutput:
    """
    Handles all console output formatting for the command-line interface.
    """

    def __init__(self, verbose: bool = False, max_rows: int = 20):
        """
        Initialize console output handler.

        Args:
            verbose: If True, print extra detail
            max_rows: Rows shown when printing a table
        """
        self.verbose = verbose
        self.max_rows = max_rows

    def print_table(self, table: pd.DataFrame):
        """Print a table, truncated to max_rows."""
        with pd.option_context('display.max_rows', self.max_rows, 'display.width', 120):
            print(table)
        if self.verbose:
            print(f"\n{len(table)} rows x {len(table.columns)} columns")

    def print_saved(self, path: str, rows: int):
        """Print where a result was written."""
        print(f"Saved {rows} rows to {path}")

    def print_image_saved(self, path: str):
        """Print where a chart was written."""
        print(f"Chart saved to {path}")

    def print_catalog(self, options: Dict[str, List[str]]):
        """Print the function catalog grouped by category."""
        print("Available functions")
        print("=" * 60)
        for group, names in options.items():
            print(f"{group}:")
            print(f"  {', '.join(names)}")

    def error_message(self, error: Exception):
        """Print an error message to stderr."""
        print(f"❌ Error: {error}", file=sys.stderr)
