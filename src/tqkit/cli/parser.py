"""
Command-line argument parsing module.

This module handles parsing and validation of CLI arguments.
"""

import argparse
from typing import List, Optional

from tqkit.timeseries.periods import RETURN_TYPES


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser with one sub-command per task.

    Returns:
        argparse.ArgumentParser: Configured parser
    """
    parser = argparse.ArgumentParser(
        prog='tqkit',
        description='Tidy financial time series: retrieval, returns and charts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tqkit get AAPL MSFT --from 2020-01-01 -o prices.csv
  tqkit returns prices.csv --period monthly --select adjusted --group-by symbol
  tqkit chart prices.csv --symbol AAPL --type candlestick --ma 20 50 -o aapl.png
  tqkit functions
        """
    )

    parser.add_argument('--config-dir', default=None,
                        help='Directory with data.yaml, charts.yaml and logging.yaml')
    parser.add_argument('--profile', default=None,
                        help='Configuration profile to apply (e.g., verbose)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log at DEBUG level')

    commands = parser.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True

    get = commands.add_parser('get', help='Retrieve data for one or more symbols')
    get.add_argument('symbols', nargs='+', help='Symbols (e.g., AAPL MSFT or BTC/USD)')
    get.add_argument('--get', dest='source', default=None,
                     help='Data source (default from config, e.g., stock.prices)')
    get.add_argument('--from', dest='from_date', default=None, help='Start date (YYYY-MM-DD)')
    get.add_argument('--to', dest='to_date', default=None, help='End date (YYYY-MM-DD)')
    get.add_argument('--keep-na', action='store_true',
                     help='Keep a row of missing values for symbols that fail')
    get.add_argument('--progress', action='store_true', help='Show a progress bar')
    get.add_argument('-o', '--output', default=None, help='Write the table to this CSV file')

    returns = commands.add_parser('returns', help='Period returns from a tidy price CSV')
    returns.add_argument('input', help='Tidy CSV with a date column')
    returns.add_argument('--period', default='monthly',
                         help='daily, weekly, monthly, quarterly or yearly')
    returns.add_argument('--type', dest='return_type', choices=RETURN_TYPES, default='arithmetic')
    returns.add_argument('--select', default=None, help='Price column (e.g., adjusted)')
    returns.add_argument('--group-by', default=None, help='Grouping column (e.g., symbol)')
    returns.add_argument('-o', '--output', default=None, help='Write the table to this CSV file')

    chart = commands.add_parser('chart', help='Draw a bar or candlestick chart to an image')
    chart.add_argument('input', help='Tidy OHLC CSV with a date column')
    chart.add_argument('--type', dest='chart_type', choices=('candlestick', 'barchart'),
                       default='candlestick')
    chart.add_argument('--symbol', default=None,
                       help='Only chart rows whose symbol column equals this value')
    chart.add_argument('--ma', type=int, nargs='*', default=[],
                       help='Moving average windows to overlay')
    chart.add_argument('--ma-fun', default='SMA', help='Moving average function (SMA, EMA, WMA)')
    chart.add_argument('--bbands', action='store_true', help='Overlay Bollinger Bands (20, 2)')
    chart.add_argument('--from', dest='from_date', default=None, help='Zoom start date')
    chart.add_argument('--to', dest='to_date', default=None, help='Zoom end date')
    chart.add_argument('--title', default=None, help='Chart title')
    chart.add_argument('-o', '--output', required=True, help='Image file to write (e.g., chart.png)')

    commands.add_parser('functions', help='List the functions mutate/transmute accept')

    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        argparse.Namespace: Parsed arguments
    """
    return build_parser().parse_args(argv)
