"""EVDS service glue: index templates, URLs and the HTTP client."""

from .client import EvdsClient, export_series, get_api_key, get_series
from .index import Index, parse_index_args, short_filename
from .urls import UrlBuilder

__all__ = [
    "EvdsClient",
    "Index",
    "UrlBuilder",
    "export_series",
    "get_api_key",
    "get_series",
    "parse_index_args",
    "short_filename",
]
