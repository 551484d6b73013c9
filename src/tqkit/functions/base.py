"""
Base classes and registry for mutate functions.

A mutate function takes a time-indexed DataFrame (the selected columns of a
tidy table) plus keyword parameters, and returns a Series or DataFrame indexed
by time. The dispatch layer handles the tidy <-> time-series coercion around it.

Quick Start:
    from tqkit.functions.base import register_function, get_function

    def volume_sma(frame, n=20):
        return frame['volume'].rolling(window=n).mean().rename('volume_sma')

    register_function('VOLUME_SMA', volume_sma)
    get_function('VOLUME_SMA').compute(ts, n=10)

Extending:
    To add a function:
    1. Define a callable taking (frame, **params) returning a Series/DataFrame
    2. Register it with register_function(name, func, group=...)
    3. Refer to it by name in mutate()/transmute(), or pass the callable directly

    Functions that compare two columns (x and y) are registered with
    needs_xy=True and receive a frame whose first column is x and second is y.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import pandas as pd

from tqkit.exceptions import UnknownFunctionError


FunctionResult = Union[pd.Series, pd.DataFrame]
ComputeFunc = Callable[..., FunctionResult]


@dataclass(frozen=True)
class MutateFunction:
    """
    A named function that can be dispatched over tidy tables.

    Attributes:
        name: Unique name used to look the function up
        func: Callable taking (frame, **params)
        group: Catalog group (e.g. 'ta', 'periodicity', 'returns')
        needs_xy: Whether the function requires both an x and a y column
        description: One-line summary shown by function_options()
    """
    name: str
    func: ComputeFunc
    group: str = 'custom'
    needs_xy: bool = False
    description: str = ''

    def __post_init__(self):
        """Validate specification."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("name must be a non-empty string")
        if not callable(self.func):
            raise ValueError("func must be callable")

    def compute(self, frame: pd.DataFrame, **params: Any) -> FunctionResult:
        """
        Run the function.

        Args:
            frame: Time-indexed DataFrame
            **params: Function parameters

        Returns:
            Series or DataFrame indexed by time
        """
        if self.needs_xy and frame.shape[1] < 2:
            raise ValueError(f"Function '{self.name}' requires both x and y columns")
        return self.func(frame, **params)


# Registry of mutate functions, keyed by name
_functions: Dict[str, MutateFunction] = {}


def register_function(name: str, func: ComputeFunc, group: str = 'custom',
                      needs_xy: bool = False, description: str = '') -> MutateFunction:
    """
    Register a mutate function.

    Args:
        name: Unique name for the function
        func: Callable taking (frame, **params)
        group: Catalog group
        needs_xy: Whether the function requires x and y columns
        description: One-line summary

    Returns:
        The registered MutateFunction

    Raises:
        ValueError: If the name is already registered
    """
    if name in _functions:
        raise ValueError(f"Function '{name}' is already registered")

    entry = MutateFunction(name, func, group=group, needs_xy=needs_xy, description=description)
    _functions[name] = entry
    return entry


def unregister_function(name: str) -> None:
    """Remove a registered function (no-op if absent)."""
    _functions.pop(name, None)


def get_function(name_or_func: Union[str, ComputeFunc, MutateFunction]) -> MutateFunction:
    """
    Resolve a function name or callable into a MutateFunction.

    Args:
        name_or_func: Registered name, a MutateFunction, or any callable

    Returns:
        MutateFunction

    Raises:
        UnknownFunctionError: If a name is not registered
    """
    if isinstance(name_or_func, MutateFunction):
        return name_or_func
    if isinstance(name_or_func, str):
        entry = _functions.get(name_or_func)
        if entry is None:
            raise UnknownFunctionError(
                f"Unknown function: {name_or_func}. Valid options: {', '.join(sorted(_functions))}. "
                f"Use register_function() to add custom functions."
            )
        return entry
    if callable(name_or_func):
        name = getattr(name_or_func, '__name__', None) or type(name_or_func).__name__
        return MutateFunction(name, name_or_func)
    raise UnknownFunctionError(f"Expected a function name or callable, got {type(name_or_func).__name__}")


def list_functions() -> List[str]:
    """
    List all registered function names.

    Returns:
        List of names
    """
    return list(_functions.keys())


def function_options(group: Optional[str] = None) -> Dict[str, List[str]]:
    """
    Catalog of registered functions grouped by category.

    Args:
        group: If given, only that group is returned

    Returns:
        Dictionary mapping group name to function names
    """
    options: Dict[str, List[str]] = {}
    for entry in _functions.values():
        if group is not None and entry.group != group:
            continue
        options.setdefault(entry.group, []).append(entry.name)
    return options
