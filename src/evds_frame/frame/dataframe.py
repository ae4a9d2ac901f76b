"""Columnar table of cells with record-aligned ingestion and CSV export."""

import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Union

import pandas as pd

from ..errors import ColumnNotFound, StorageError
from .cells import (
    NULL,
    FloatCell,
    IntegerCell,
    NullCell,
    ValueCell,
    as_cell,
    render_cell,
)
from .series import Series

logger = logging.getLogger(__name__)


class Column:
    """Ordered cells of one named field."""

    def __init__(self, name: str, cells: Optional[list[ValueCell]] = None):
        self.name = name
        self._cells: list[ValueCell] = list(cells) if cells else []

    def append(self, cell: ValueCell) -> None:
        self._cells.append(cell)

    def pad_to(self, length: int) -> None:
        """Append Null cells until the column holds `length` cells."""
        missing = length - len(self._cells)
        if missing > 0:
            self._cells.extend([NULL] * missing)

    def cell_at(self, position: int) -> ValueCell:
        """Cell at a row index; rows past the end read as Null."""
        if position < len(self._cells):
            return self._cells[position]
        return NULL

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[ValueCell]:
        return iter(self._cells)

    def __repr__(self) -> str:
        return f"Column({self.name!r}, length={len(self._cells)})"


class DataFrame:
    """Insertion-ordered mapping of column name to Column.

    Records are added with add_record(), which keeps every column the same
    length: a column first seen at record k is back-filled with k Null cells,
    and a column missing from a record receives Null for it. add_value()
    appends a single cell positionally without closing a record; the next
    add_record() realigns all columns first.

    Example:
        >>> df = DataFrame()
        >>> df.add_record({"Tarih": "01-01-2021", "TP_DK_USD_A": 3.45})
        1
        >>> df.add_record({"Tarih": "01-02-2021"})
        2
        >>> df["TP_DK_USD_A"].as_float().tolist()
        [3.45, nan]
    """

    def __init__(self) -> None:
        self._columns: dict[str, Column] = {}
        self._n_records = 0

    # ========== Ingestion ==========

    def _column(self, name: str) -> Column:
        column = self._columns.get(name)
        if column is None:
            column = Column(name)
            column.pad_to(self._n_records)
            self._columns[name] = column
            if self._n_records:
                logger.debug(
                    f"Column {name!r} first seen at record {self._n_records}, "
                    f"back-filled with Null"
                )
        return column

    def add_value(self, name: str, value: Any) -> None:
        """Append one cell to the named column, creating it on first use.

        Args:
            name: Column name
            value: A cell, or a plain value wrapped without inference; values
                with no cell representation are stored as Null or text
        """
        self._column(name).append(as_cell(value))

    def add_record(self, fields: Mapping[str, Any]) -> int:
        """Append one row built from a field mapping.

        Args:
            fields: Column name to cell (or plain value) for this record

        Returns:
            Number of rows after the record was added
        """
        # Realign anything left uneven by loose add_value() calls
        start = max(self._n_records, self._longest())
        for column in self._columns.values():
            column.pad_to(start)
        self._n_records = start

        for name, value in fields.items():
            self._column(name).append(as_cell(value))

        self._n_records = start + 1
        for column in self._columns.values():
            column.pad_to(self._n_records)
        return self._n_records

    def _longest(self) -> int:
        return max((len(c) for c in self._columns.values()), default=0)

    # ========== Access ==========

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    @property
    def shape(self) -> tuple[int, int]:
        return len(self), len(self._columns)

    @property
    def empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        return max(self._n_records, self._longest())

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __getitem__(self, name: str) -> Series:
        return self.series(name)

    def column_length(self, name: str) -> int:
        if name not in self._columns:
            raise ColumnNotFound(name)
        return len(self._columns[name])

    def series(self, name: str) -> Series:
        """Snapshot of a column as a read-only Series.

        Raises:
            ColumnNotFound: If the name was never added
        """
        column = self._columns.get(name)
        if column is None:
            raise ColumnNotFound(name)
        return Series(name, tuple(column))

    def values(self, name: str, kind: type = float) -> pd.Series:
        """Typed values of a column; see Series.as_type()."""
        return self.series(name).as_type(kind)

    def rows(self) -> Iterator[tuple[ValueCell, ...]]:
        """Iterate over rows; short columns read as Null past their end."""
        columns = list(self._columns.values())
        for position in range(len(self)):
            yield tuple(column.cell_at(position) for column in columns)

    # ========== Export ==========

    def to_pandas(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame with one dtype per column.

        Integer-only columns become nullable Int64, numeric columns float64,
        and anything holding text or dates becomes object with rendered
        strings and None for Null.
        """
        length = len(self)
        data: dict[str, pd.Series] = {}
        for name, column in self._columns.items():
            cells = [column.cell_at(i) for i in range(length)]
            data[name] = _column_to_pandas(name, cells)
        return pd.DataFrame(data, columns=list(self._columns))

    def to_csv(
        self,
        path: Union[str, Path],
        delimiter: str = ",",
        float_precision: int = 6,
    ) -> Path:
        """Write the table as CSV.

        The first line holds the column names in insertion order, followed by
        one line per row. Null renders as an empty field, floats in fixed
        notation. Fields containing the delimiter, a quote or a newline are
        quoted. A row consisting of a single empty field (a Null row of a
        one-column table) is written as '""' so the row is not lost; CSV
        readers parse it back as an empty field.

        Args:
            path: Destination file, overwritten if it exists
            delimiter: Field separator
            float_precision: Decimals written for float cells

        Returns:
            The written path

        Raises:
            StorageError: If the destination cannot be written
        """
        path = Path(path)
        names = self.columns
        rendered = pd.DataFrame(
            [
                [
                    None if isinstance(cell, NullCell) else render_cell(cell, float_precision)
                    for cell in row
                ]
                for row in self.rows()
            ],
            columns=names,
            dtype=object,
        )

        try:
            rendered.to_csv(
                path,
                sep=delimiter,
                index=False,
                na_rep="",
                encoding="utf-8",
                lineterminator="\n",
            )
        except OSError as e:
            raise StorageError(f"Could not write CSV to {path}: {e}") from e

        logger.info(f"Wrote {len(rendered)} rows x {len(names)} columns to {path}")
        return path

    def __repr__(self) -> str:
        return f"DataFrame(rows={len(self)}, columns={self.columns})"


def _column_to_pandas(name: str, cells: list[ValueCell]) -> pd.Series:
    non_null = [c for c in cells if not isinstance(c, NullCell)]

    if non_null and all(isinstance(c, IntegerCell) for c in non_null):
        return pd.Series(
            [c.value if isinstance(c, IntegerCell) else pd.NA for c in cells],
            dtype="Int64",
            name=name,
        )
    if non_null and all(isinstance(c, (IntegerCell, FloatCell)) for c in non_null):
        return pd.Series(
            [float("nan") if isinstance(c, NullCell) else float(c.value) for c in cells],
            dtype="float64",
            name=name,
        )
    return pd.Series(
        [None if isinstance(c, NullCell) else render_cell(c) for c in cells],
        dtype=object,
        name=name,
    )
