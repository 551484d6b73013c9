"""
Core glue: shape coercion, price field lookup, grouped dispatch and
bad-apple error isolation.
"""

from tqkit.core.coercion import (
    as_timeseries,
    as_tidy,
    to_wide,
    to_long,
    find_date_column,
    split_groups,
)
from tqkit.core.ohlc import find_field, price_column, has_ohlc, pick_price
from tqkit.core.bad_apple import map_identifiers

__all__ = [
    'as_timeseries',
    'as_tidy',
    'to_wide',
    'to_long',
    'find_date_column',
    'split_groups',
    'find_field',
    'price_column',
    'has_ohlc',
    'pick_price',
    'map_identifiers',
]
