"""
Period parser for periodicity conversion.

Parses period names (e.g., "monthly", "months", "3M") into a canonical unit,
a pandas period frequency and a bucket multiplier.
"""

import re
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from tqkit.exceptions import PeriodError


# Canonical unit -> pandas Period frequency alias
PERIOD_FREQUENCIES: Dict[str, str] = {
    'seconds': 's',
    'minutes': 'min',
    'hours': 'h',
    'days': 'D',
    'weeks': 'W-SUN',
    'months': 'M',
    'quarters': 'Q',
    'years': 'Y',
}

# Adjective form used for return column names
RETURN_NAMES: Dict[str, str] = {
    'seconds': 'secondly',
    'minutes': 'minutely',
    'hours': 'hourly',
    'days': 'daily',
    'weeks': 'weekly',
    'months': 'monthly',
    'quarters': 'quarterly',
    'years': 'yearly',
}

_ALIASES: Dict[str, str] = {
    'second': 'seconds', 'secs': 'seconds', 'sec': 'seconds', 's': 'seconds',
    'minute': 'minutes', 'mins': 'minutes', 'min': 'minutes', 'minutely': 'minutes',
    'hour': 'hours', 'h': 'hours', 'hourly': 'hours',
    'day': 'days', 'd': 'days', 'daily': 'days',
    'week': 'weeks', 'w': 'weeks', 'weekly': 'weeks',
    'month': 'months', 'm': 'months', 'monthly': 'months',
    'quarter': 'quarters', 'q': 'quarters', 'quarterly': 'quarters',
    'year': 'years', 'y': 'years', 'yearly': 'years', 'annually': 'years', 'annual': 'years',
}


@dataclass(frozen=True)
class Period:
    """
    A parsed period specification.

    Attributes:
        unit: Canonical unit name (e.g., 'months')
        k: Number of consecutive calendar buckets folded into one output row
    """
    unit: str
    k: int = 1

    @property
    def freq(self) -> str:
        """pandas Period frequency alias for the unit."""
        return PERIOD_FREQUENCIES[self.unit]

    @property
    def return_name(self) -> str:
        """Column name used for returns over this period."""
        return f"{RETURN_NAMES[self.unit]}_returns"


def normalize_unit(name: str) -> str:
    """
    Map a period name or alias onto its canonical unit.

    Args:
        name: Period name such as 'monthly', 'Month', 'months' or 'M'

    Returns:
        Canonical unit name

    Raises:
        PeriodError: If the name is not recognised
    """
    if not isinstance(name, str) or not name.strip():
        raise PeriodError(f"Invalid period: {name!r}")

    key = name.strip().lower()
    if key in PERIOD_FREQUENCIES:
        return key
    if key in _ALIASES:
        return _ALIASES[key]
    raise PeriodError(
        f"Unknown period: {name!r}. Supported: {', '.join(PERIOD_FREQUENCIES)}"
    )


def parse_period(period_str: str, k: int = 1) -> Period:
    """
    Parse period notation into a Period.

    Args:
        period_str: Period notation like "months", "monthly", "3 months" or "2W".
                    A leading integer multiplies ``k``.
        k: Bucket multiplier applied on top of any leading integer

    Returns:
        Parsed Period

    Raises:
        PeriodError: If the notation is invalid
        ValueError: If k is not a positive integer

    Examples:
        >>> parse_period("monthly")
        Period(unit='months', k=1)
        >>> parse_period("3M")
        Period(unit='months', k=3)
        >>> parse_period("weeks", k=2)
        Period(unit='weeks', k=2)
    """
    if isinstance(period_str, Period):
        return Period(period_str.unit, period_str.k * _check_k(k))

    k = _check_k(k)
    if not isinstance(period_str, str):
        raise PeriodError(f"Invalid period: {period_str!r}")

    match = re.match(r'^\s*(\d+)?\s*([A-Za-z]+)\s*$', period_str)
    if not match:
        raise PeriodError(f"Invalid period format: {period_str!r}")

    multiplier = int(match.group(1)) if match.group(1) else 1
    if multiplier < 1:
        raise PeriodError(f"Period multiplier must be positive: {period_str!r}")

    return Period(normalize_unit(match.group(2)), multiplier * k)


def validate_period(period_str: str) -> bool:
    """
    Validate that a period string is in correct format.

    Args:
        period_str: Period notation to validate

    Returns:
        True if valid, False otherwise
    """
    try:
        parse_period(period_str)
        return True
    except PeriodError:
        return False


def _check_k(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 1:
        raise ValueError(f"k must be a positive integer, got {k!r}")
    return int(k)


def list_periods() -> Tuple[str, ...]:
    """Return the canonical period units."""
    return tuple(PERIOD_FREQUENCIES)
