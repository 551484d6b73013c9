"""Date-aware axis zoom."""

from typing import Optional, Sequence

import matplotlib.dates as mdates
import pandas as pd
from matplotlib.axes import Axes


def _date_number(value) -> float:
    stamp = pd.Timestamp(value)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert(None)
    return float(mdates.date2num(stamp.to_pydatetime()))


def zoom_x_date(ax: Axes, xlim: Optional[Sequence] = None,
                ylim: Optional[Sequence[float]] = None) -> Axes:
    """
    Zoom a date axis without dropping data (the lines outside stay drawn).

    Args:
        ax: Axes to zoom
        xlim: (start, end) dates as strings, dates or timestamps; either may be None
        ylim: (bottom, top) numeric limits

    Returns:
        The axes, for chaining

    Raises:
        ValueError: If a limit pair does not have two entries or start > end
    """
    if xlim is not None:
        if len(xlim) != 2:
            raise ValueError(f"xlim must be a (start, end) pair, got {xlim!r}")
        left, right = (None if value is None else _date_number(value) for value in xlim)
        if left is not None and right is not None and left > right:
            raise ValueError(f"xlim start {xlim[0]} is after end {xlim[1]}")
        ax.set_xlim(left=left, right=right)

    if ylim is not None:
        if len(ylim) != 2:
            raise ValueError(f"ylim must be a (bottom, top) pair, got {ylim!r}")
        ax.set_ylim(bottom=ylim[0], top=ylim[1])

    return ax
