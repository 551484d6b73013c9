"""
Mutate Function Catalog

This package provides the named functions that mutate()/transmute() dispatch
to. Built-ins wrap the 'ta' library, pandas time-series methods and the
periodicity helpers; custom functions can be registered at runtime.

Quick Start:
    from tqkit.functions import function_options, register_function

    function_options()
    # {'ta': ['SMA', 'EMA', ...], 'periodicity': [...], 'returns': [...], ...}

Package Contents:
    - MutateFunction: Dataclass describing a registered function
    - register_function(): Register your own function
    - get_function(): Resolve a name or callable
    - function_options(): Catalog grouped by category
"""

from tqkit.functions.base import (
    MutateFunction,
    register_function,
    unregister_function,
    get_function,
    list_functions,
    function_options,
)
from tqkit.functions import library  # noqa: F401  registers the built-ins

__all__ = [
    'MutateFunction',
    'register_function',
    'unregister_function',
    'get_function',
    'list_functions',
    'function_options',
]
