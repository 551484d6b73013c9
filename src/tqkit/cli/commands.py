"""
Sub-command implementations.

Each command takes the parsed arguments and a ConsoleOutput and returns a
process exit code.
"""

import argparse
import logging

import pandas as pd

from tqkit.cli.output import ConsoleOutput
from tqkit.config import get_config
from tqkit.core.coercion import DEFAULT_DATE_COLUMN
from tqkit.exceptions import ColumnError

logger = logging.getLogger(__name__)


def read_table(path: str, date_col: str = DEFAULT_DATE_COLUMN) -> pd.DataFrame:
    """Read a tidy CSV, parsing the date column when present."""
    table = pd.read_csv(path)
    if date_col in table.columns:
        table[date_col] = pd.to_datetime(table[date_col])
    return table


def _write_or_print(table: pd.DataFrame, output_path, output: ConsoleOutput):
    if output_path:
        table.to_csv(output_path, index=False)
        output.print_saved(output_path, len(table))
    else:
        output.print_table(table)


def run_get(args: argparse.Namespace, output: ConsoleOutput) -> int:
    """Retrieve data for the requested symbols."""
    from tqkit.data import get

    source = args.source or get_config().get_data_config().default_source
    symbols = args.symbols[0] if len(args.symbols) == 1 else args.symbols

    table = get(
        symbols,
        get=source,
        from_date=args.from_date,
        to_date=args.to_date,
        complete_cases=not args.keep_na,
        progress=args.progress,
    )
    _write_or_print(table, args.output, output)
    return 0


def run_returns(args: argparse.Namespace, output: ConsoleOutput) -> int:
    """Compute period returns from a tidy CSV."""
    from tqkit.core.dispatch import transmute

    table = read_table(args.input)
    returns = transmute(
        table,
        'period_return',
        select=args.select,
        group_by=args.group_by,
        period=args.period,
        type=args.return_type,
    )
    _write_or_print(returns, args.output, output)
    return 0


def run_chart(args: argparse.Namespace, output: ConsoleOutput) -> int:
    """Draw a bar or candlestick chart to an image file."""
    import matplotlib
    matplotlib.use('Agg', force=True)
    import matplotlib.pyplot as plt

    from tqkit.charts import barchart, bbands, candlestick, moving_average, theme_tq, zoom_x_date

    table = read_table(args.input)
    title = args.title
    if args.symbol is not None:
        if 'symbol' not in table.columns:
            raise ColumnError(f"--symbol given but {args.input} has no 'symbol' column")
        table = table[table['symbol'] == args.symbol]
        if table.empty:
            raise ValueError(f"No rows for symbol {args.symbol!r} in {args.input}")
        title = title or args.symbol
    group = 'symbol' if 'symbol' in table.columns and table['symbol'].nunique() > 1 else None

    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        draw = candlestick if args.chart_type == 'candlestick' else barchart
        draw(ax, table, group=group)
        if args.ma:
            moving_average(ax, table, ma_fun=args.ma_fun, n=args.ma, group=group)
        if args.bbands:
            bbands(ax, table, group=group)
        theme_tq(ax)
        if args.from_date or args.to_date:
            zoom_x_date(ax, xlim=(args.from_date, args.to_date))
        if title:
            ax.set_title(title)
        fig.autofmt_xdate()
        fig.savefig(args.output, dpi=100, bbox_inches='tight')
    finally:
        plt.close(fig)

    logger.debug(f"Chart of {len(table)} rows written to {args.output}")
    output.print_image_saved(args.output)
    return 0


def run_functions(args: argparse.Namespace, output: ConsoleOutput) -> int:
    """Print the function catalog."""
    from tqkit.functions import function_options

    output.print_catalog(function_options())
    return 0


COMMANDS = {
    'get': run_get,
    'returns': run_returns,
    'chart': run_chart,
    'functions': run_functions,
}
