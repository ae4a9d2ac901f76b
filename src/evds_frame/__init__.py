"""evds-frame: fetch EVDS time series into typed tables and export them as CSV."""

from .cache import ResultCache
from .config import Config
from .errors import (
    CacheError,
    ColumnNotFound,
    CredentialsNotFound,
    EvdsError,
    FetchError,
    InvalidConversion,
    ResponseFormatError,
    StorageError,
)
from .frame import DataFrame, Series, frame_from_response, infer_cell, parse_item

__version__ = "0.1.0"

__all__ = [
    "CacheError",
    "ColumnNotFound",
    "Config",
    "CredentialsNotFound",
    "DataFrame",
    "EvdsError",
    "FetchError",
    "InvalidConversion",
    "ResponseFormatError",
    "ResultCache",
    "Series",
    "StorageError",
    "frame_from_response",
    "infer_cell",
    "parse_item",
]
