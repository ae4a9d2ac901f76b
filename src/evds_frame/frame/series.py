"""Read-only typed view over one column."""

import math
from collections import Counter
from typing import Iterator

import numpy as np
import pandas as pd

from ..errors import InvalidConversion
from .cells import (
    DateCell,
    FloatCell,
    IntegerCell,
    NullCell,
    TextCell,
    ValueCell,
    cell_kind,
)

_ERROR_MODES = ("raise", "coerce")


class Series:
    """Named snapshot of a column taken at access time.

    Typed extraction mirrors pandas' `errors=` convention: text or date
    cells in a numeric extraction raise InvalidConversion by default, or
    become NaN / NA with errors="coerce".
    """

    # Written for Null and non-text cells by as_text()
    TEXT_SENTINEL = "NaN"

    def __init__(self, name: str, cells: tuple[ValueCell, ...]):
        self._name = name
        self._cells = tuple(cells)

    @property
    def name(self) -> str:
        return self._name

    @property
    def cells(self) -> tuple[ValueCell, ...]:
        return self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[ValueCell]:
        return iter(self._cells)

    def __getitem__(self, position: int) -> ValueCell:
        return self._cells[position]

    def __repr__(self) -> str:
        return f"Series({self._name!r}, length={len(self._cells)})"

    def _check_errors(self, errors: str) -> None:
        if errors not in _ERROR_MODES:
            raise ValueError(f"errors must be one of {_ERROR_MODES}, got {errors!r}")

    def as_float(self, errors: str = "raise") -> pd.Series:
        """Extract as float64; Null becomes NaN, integers are widened.

        Args:
            errors: 'raise' to reject text/date cells, 'coerce' to map them to NaN

        Raises:
            InvalidConversion: On a text/date cell with errors='raise'
        """
        self._check_errors(errors)
        out = np.empty(len(self._cells), dtype="float64")
        for position, cell in enumerate(self._cells):
            if isinstance(cell, NullCell):
                out[position] = np.nan
            elif isinstance(cell, (IntegerCell, FloatCell)):
                out[position] = float(cell.value)
            elif isinstance(cell, (TextCell, DateCell)):
                if errors == "raise":
                    raise InvalidConversion(self._name, position, cell, "float")
                out[position] = np.nan
            else:
                raise TypeError(f"Unknown cell type: {type(cell).__name__}")
        return pd.Series(out, name=self._name)

    def as_int(self, errors: str = "raise") -> pd.Series:
        """Extract as nullable Int64; Null becomes pd.NA.

        Floats are accepted only when integral (e.g. 3.0).

        Args:
            errors: 'raise' to reject unconvertible cells, 'coerce' to map them to NA

        Raises:
            InvalidConversion: On a text/date or fractional float cell with errors='raise'
        """
        self._check_errors(errors)
        out: list = []
        for position, cell in enumerate(self._cells):
            if isinstance(cell, NullCell):
                out.append(pd.NA)
            elif isinstance(cell, IntegerCell):
                out.append(cell.value)
            elif isinstance(cell, FloatCell):
                if math.isfinite(cell.value) and cell.value.is_integer():
                    out.append(int(cell.value))
                elif errors == "raise":
                    raise InvalidConversion(self._name, position, cell, "int")
                else:
                    out.append(pd.NA)
            elif isinstance(cell, (TextCell, DateCell)):
                if errors == "raise":
                    raise InvalidConversion(self._name, position, cell, "int")
                out.append(pd.NA)
            else:
                raise TypeError(f"Unknown cell type: {type(cell).__name__}")
        return pd.Series(out, dtype="Int64", name=self._name)

    def as_text(self) -> pd.Series:
        """Extract as strings; text and dates pass through verbatim.

        Null and numeric cells become TEXT_SENTINEL.
        """
        out: list[str] = []
        for cell in self._cells:
            if isinstance(cell, (TextCell, DateCell)):
                out.append(cell.value)
            elif isinstance(cell, (NullCell, IntegerCell, FloatCell)):
                out.append(self.TEXT_SENTINEL)
            else:
                raise TypeError(f"Unknown cell type: {type(cell).__name__}")
        return pd.Series(out, dtype=object, name=self._name)

    def as_type(self, kind: type, errors: str = "raise") -> pd.Series:
        """Dispatch to as_float / as_int / as_text by Python type."""
        if kind is float:
            return self.as_float(errors=errors)
        if kind is int:
            return self.as_int(errors=errors)
        if kind is str:
            return self.as_text()
        raise TypeError(f"Unsupported extraction type: {kind!r}")

    def values(self) -> np.ndarray:
        """Numeric values with NaN for anything non-numeric."""
        return self.as_float(errors="coerce").to_numpy()

    def dtype_summary(self) -> dict[str, int]:
        """Count of cells per variant, e.g. {'float': 10, 'null': 2}."""
        return dict(Counter(cell_kind(cell) for cell in self._cells))
