"""
Price field accessors.

Locates canonical OHLCV fields in a frame regardless of capitalisation or
provider naming ("Adj Close", "adj_close" and "adjusted" are the same field).
"""

from typing import Dict, List, Optional

import pandas as pd

from tqkit.exceptions import ColumnError


OHLC_FIELDS = ['open', 'high', 'low', 'close']

FIELD_ALIASES: Dict[str, List[str]] = {
    'open': ['open', 'op'],
    'high': ['high', 'hi'],
    'low': ['low', 'lo'],
    'close': ['close', 'cl'],
    'volume': ['volume', 'vo', 'vol'],
    'adjusted': ['adjusted', 'adj close', 'adj_close', 'adjclose', 'ad'],
}


def _normalize(name) -> str:
    return str(name).strip().lower().replace('.', ' ')


def find_field(frame: pd.DataFrame, field: str) -> Optional[str]:
    """
    Find the column holding a canonical price field.

    Args:
        frame: DataFrame to search
        field: Canonical field name ('open', 'high', 'low', 'close', 'volume', 'adjusted')

    Returns:
        Actual column name, or None if the field is absent
    """
    aliases = FIELD_ALIASES.get(field, [field])
    lookup = {_normalize(col): col for col in frame.columns}
    for alias in aliases:
        if alias in lookup:
            return lookup[alias]
    return None


def price_column(frame: pd.DataFrame, field: str) -> str:
    """
    Return the column holding ``field`` or raise.

    Raises:
        ColumnError: If the field cannot be found
    """
    column = find_field(frame, field)
    if column is None:
        raise ColumnError(
            f"Column for '{field}' not found. Available columns: {list(frame.columns)}"
        )
    return column


def has_ohlc(frame: pd.DataFrame) -> bool:
    """Check whether all four OHLC fields are present."""
    return all(find_field(frame, field) is not None for field in OHLC_FIELDS)


def has_hlc(frame: pd.DataFrame) -> bool:
    """Check whether high, low and close are present."""
    return all(find_field(frame, field) is not None for field in ('high', 'low', 'close'))


def pick_price(frame: pd.DataFrame) -> pd.Series:
    """
    Choose the price series an operation should act on.

    A single-column frame is used as is; otherwise the close column is used.

    Raises:
        ColumnError: If the frame has several columns and none is a close price
    """
    if frame.shape[1] == 1:
        return frame.iloc[:, 0]

    column = find_field(frame, 'close')
    if column is None:
        raise ColumnError(
            f"Cannot choose a price column from {list(frame.columns)}; "
            f"select a single column or include 'close'"
        )
    return frame[column]


def typical_price(frame: pd.DataFrame) -> pd.Series:
    """Return (high + low + close) / 3, or the single price series when H/L/C are absent."""
    if not has_hlc(frame):
        return pick_price(frame)
    high = frame[price_column(frame, 'high')]
    low = frame[price_column(frame, 'low')]
    close = frame[price_column(frame, 'close')]
    return (high + low + close) / 3.0
