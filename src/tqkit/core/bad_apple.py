"""
Error isolation when mapping a function over many identifiers.

One failing identifier (a "bad apple") must not spoil the whole batch: the
failure is logged and reported as a warning, and the remaining identifiers
are processed normally.

Quick Start:
    from tqkit.core.bad_apple import map_identifiers

    prices = map_identifiers(['AAPL', 'MSFT', 'NOT_A_TICKER'], fetch_one)
    # UserWarning: Failed to process 'NOT_A_TICKER': ...
    # -> rows for AAPL and MSFT only

    prices = map_identifiers(symbols, fetch_one, complete_cases=False)
    # -> one NaN row kept for NOT_A_TICKER
"""

import logging
import warnings
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

import pandas as pd
from tqdm import tqdm

from tqkit.exceptions import TqError

logger = logging.getLogger(__name__)

Identifiers = Union[str, Iterable[str], pd.DataFrame]


def normalize_identifiers(identifiers: Identifiers) -> Tuple[List[str], Optional[pd.DataFrame]]:
    """
    Turn the accepted identifier inputs into a list of unique identifiers.

    Args:
        identifiers: A single identifier, an iterable of identifiers, or a
                     DataFrame whose first column holds identifiers

    Returns:
        Tuple of (unique identifiers in input order, extra columns frame or None).
        The extra columns frame is indexed by identifier.

    Raises:
        TqError: If no identifiers are given
    """
    extras = None
    if isinstance(identifiers, pd.DataFrame):
        if identifiers.shape[1] == 0:
            raise TqError("Identifier table has no columns")
        id_values = identifiers.iloc[:, 0].astype(str).tolist()
        if identifiers.shape[1] > 1:
            extras = identifiers.drop_duplicates(subset=identifiers.columns[0]).copy()
            extras.index = extras.iloc[:, 0].astype(str)
            extras = extras.iloc[:, 1:]
    elif isinstance(identifiers, str):
        id_values = [identifiers]
    else:
        id_values = [str(value) for value in identifiers]

    unique = list(dict.fromkeys(id_values))
    if not unique:
        raise TqError("No identifiers given")
    if len(unique) < len(id_values):
        logger.info(f"Ignoring {len(id_values) - len(unique)} duplicate identifiers")
    return unique, extras


def map_identifiers(identifiers: Identifiers, func: Callable[..., pd.DataFrame], *,
                    id_col: str = 'symbol', complete_cases: bool = True,
                    progress: bool = False, **kwargs: Any) -> pd.DataFrame:
    """
    Call ``func`` for every identifier and stack the results.

    A call that raises, or returns None, an empty frame or anything other
    than a DataFrame, is a bad apple: it is logged, reported with a
    UserWarning and the batch continues.

    Args:
        identifiers: Identifier(s), or a DataFrame whose first column holds
                     identifiers (its other columns are copied onto every
                     output row of that identifier)
        func: Callable taking (identifier, **kwargs) and returning a tidy DataFrame
        id_col: Name of the identifier column added to the output
        complete_cases: If True, drop bad apples; if False, keep one row of NaN
                        values for each of them
        progress: Show a tqdm progress bar
        **kwargs: Forwarded to func

    Returns:
        DataFrame with the identifier column (and extra columns) first, then
        the columns returned by func
    """
    ids, extras = normalize_identifiers(identifiers)

    results: List[Tuple[str, Optional[pd.DataFrame]]] = []
    failures: List[str] = []

    lead_cols = [id_col] + (list(extras.columns) if extras is not None else [])

    iterator = tqdm(ids, desc='Processing', unit=id_col, disable=not progress)
    for identifier in iterator:
        try:
            frame = func(identifier, **kwargs)
        except Exception as e:
            logger.warning(f"Failed to process '{identifier}': {e}")
            warnings.warn(f"Failed to process '{identifier}': {e}", UserWarning, stacklevel=2)
            failures.append(identifier)
            results.append((identifier, None))
            continue

        if frame is not None and not isinstance(frame, pd.DataFrame):
            logger.warning(f"Expected a DataFrame for '{identifier}', got {type(frame).__name__}")
            warnings.warn(f"Expected a DataFrame for '{identifier}', got {type(frame).__name__}",
                          UserWarning, stacklevel=2)
            failures.append(identifier)
            results.append((identifier, None))
            continue

        if frame is None or len(frame) == 0:
            logger.warning(f"No data returned for '{identifier}'")
            warnings.warn(f"No data returned for '{identifier}'", UserWarning, stacklevel=2)
            failures.append(identifier)
            results.append((identifier, None))
            continue

        results.append((identifier, frame))

    if failures and complete_cases:
        warnings.warn(
            f"{len(failures)} identifier(s) removed from the result: {failures}",
            UserWarning,
            stacklevel=2,
        )

    pieces = []
    for identifier, frame in results:
        if frame is None:
            if complete_cases:
                continue
            frame = pd.DataFrame(index=[0])
        else:
            frame = frame.reset_index(drop=True)
            clashes = [col for col in lead_cols if col in frame.columns]
            if clashes:
                frame = frame.drop(columns=clashes)

        frame.insert(0, id_col, identifier)
        if extras is not None:
            for position, col in enumerate(extras.columns, start=1):
                frame.insert(position, col, extras.at[identifier, col])
        pieces.append(frame)

    if not pieces:
        logger.warning("Every identifier failed; returning an empty result")
        return pd.DataFrame(columns=lead_cols)

    combined = pd.concat(pieces, ignore_index=True, sort=False)
    ordered = lead_cols + [col for col in combined.columns if col not in lead_cols]
    return combined[ordered]
