"""Tagged scalar cells stored in DataFrame columns.

A cell is exactly one of:

- NullCell: absent or unsupported value
- IntegerCell: signed 64-bit integer
- FloatCell: IEEE double
- TextCell: free text
- DateCell: date text in canonical 'DD-MM-YYYY' form

Cells are frozen; converting a value always produces a new cell.
"""

import math
from dataclasses import dataclass
from typing import Any, Union

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class NullCell:
    """Absent value."""

    @property
    def value(self) -> None:
        return None


@dataclass(frozen=True)
class IntegerCell:
    value: int

    def __post_init__(self) -> None:
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"Integer out of 64-bit range: {self.value}")


@dataclass(frozen=True)
class FloatCell:
    value: float


@dataclass(frozen=True)
class TextCell:
    value: str


@dataclass(frozen=True)
class DateCell:
    """Date kept as text in 'DD-MM-YYYY' form."""

    value: str


ValueCell = Union[NullCell, IntegerCell, FloatCell, TextCell, DateCell]

CELL_TYPES = (NullCell, IntegerCell, FloatCell, TextCell, DateCell)

NULL = NullCell()


def is_cell(value: Any) -> bool:
    return isinstance(value, CELL_TYPES)


def as_cell(value: Any) -> ValueCell:
    """Wrap a plain Python value in a cell without any string inference.

    Never raises: integers outside the 64-bit range become text, and values
    with no scalar representation (booleans, containers, objects) become Null.

    Args:
        value: A cell, None, int, float or str

    Returns:
        The matching cell
    """
    if is_cell(value):
        return value
    if value is None:
        return NULL
    # bool is an int subclass; booleans are not part of the model
    if isinstance(value, bool):
        return NULL
    if isinstance(value, int):
        if INT64_MIN <= value <= INT64_MAX:
            return IntegerCell(value)
        return TextCell(str(value))
    if isinstance(value, float):
        return FloatCell(value)
    if isinstance(value, str):
        return TextCell(value)
    return NULL


def render_cell(cell: ValueCell, float_precision: int = 6) -> str:
    """Render a cell the way it appears in a CSV field.

    Floats use fixed notation with '.' as decimal separator regardless of
    locale; Null renders as an empty string.
    """
    if isinstance(cell, NullCell):
        return ""
    if isinstance(cell, IntegerCell):
        return str(cell.value)
    if isinstance(cell, FloatCell):
        if math.isnan(cell.value):
            return "nan"
        return f"{cell.value:.{float_precision}f}"
    if isinstance(cell, (TextCell, DateCell)):
        return cell.value
    raise TypeError(f"Unknown cell type: {type(cell).__name__}")


def cell_kind(cell: ValueCell) -> str:
    """Short variant name used in summaries and log messages."""
    if isinstance(cell, NullCell):
        return "null"
    if isinstance(cell, IntegerCell):
        return "integer"
    if isinstance(cell, FloatCell):
        return "float"
    if isinstance(cell, TextCell):
        return "text"
    if isinstance(cell, DateCell):
        return "date"
    raise TypeError(f"Unknown cell type: {type(cell).__name__}")
