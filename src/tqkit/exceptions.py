"""
Exception hierarchy for tqkit.

All errors raised deliberately by the package derive from TqError so callers
can catch them in one place.
"""


class TqError(Exception):
    """Base exception for tqkit errors."""
    pass


class CoercionError(TqError):
    """Raised when a table cannot be converted between tidy and time-series shape."""
    pass


class ColumnError(CoercionError, KeyError):
    """Raised when a column required by an operation is missing."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep the plain text
        return Exception.__str__(self)


class UnknownFunctionError(TqError, ValueError):
    """Raised when a mutate function name is not in the catalog."""
    pass


class PeriodError(TqError, ValueError):
    """Raised when a period name cannot be parsed."""
    pass


class FetchError(TqError):
    """Raised when data retrieval fails."""
    pass


class SymbolNotFoundError(FetchError):
    """Raised when a provider returns no data for a symbol."""
    pass
