"""Exception hierarchy for evds-frame.

Inference anomalies never surface as exceptions; everything here is raised
for storage, access, conversion and transport failures so callers can branch
per unit of work (one index).
"""

from typing import Any


class EvdsError(Exception):
    """Base class for all evds-frame errors."""


class ColumnNotFound(EvdsError, KeyError):
    """Raised when a column name was never added to a DataFrame."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Column not found: {self.name!r}"


class InvalidConversion(EvdsError, ValueError):
    """Raised when a cell cannot be extracted as the requested type.

    Attributes:
        series: Name of the series being extracted
        position: Row index of the offending cell
        cell: The offending cell
        target: Name of the requested type ('float', 'int')
    """

    def __init__(self, series: str, position: int, cell: Any, target: str):
        self.series = series
        self.position = position
        self.cell = cell
        self.target = target
        super().__init__(
            f"Cannot convert {cell!r} at row {position} of {series!r} to {target}"
        )


class ResponseFormatError(EvdsError, ValueError):
    """Raised when a response body is not an EVDS items document."""


class StorageError(EvdsError, OSError):
    """Raised when a file cannot be opened, read or written."""


class CacheError(StorageError):
    """Raised when a cache entry exists but cannot be read or written."""


class FetchError(EvdsError):
    """Raised when the remote service cannot be reached or rejects a request."""


class CredentialsNotFound(EvdsError):
    """Raised when no EVDS API key is configured."""
