"""Typed tabular model: cells, columns, DataFrame and Series."""

from .cells import (
    NULL,
    DateCell,
    FloatCell,
    IntegerCell,
    NullCell,
    TextCell,
    ValueCell,
    as_cell,
    render_cell,
)
from .codec import TypeInferencer, frame_from_response, infer_cell, parse_item
from .dataframe import Column, DataFrame
from .series import Series

__all__ = [
    "NULL",
    "Column",
    "DataFrame",
    "DateCell",
    "FloatCell",
    "IntegerCell",
    "NullCell",
    "Series",
    "TextCell",
    "TypeInferencer",
    "ValueCell",
    "as_cell",
    "frame_from_response",
    "infer_cell",
    "parse_item",
    "render_cell",
]
