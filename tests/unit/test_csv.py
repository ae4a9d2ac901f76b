"""Unit tests for CSV serialization."""

import csv

import pytest

from evds_frame.errors import StorageError
from evds_frame.frame.cells import DateCell, FloatCell, TextCell, render_cell, NULL, IntegerCell
from evds_frame.frame.codec import parse_item
from evds_frame.frame.dataframe import DataFrame


def read_rows(path, delimiter=","):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f, delimiter=delimiter))


class TestRenderCell:
    """Test per-variant rendering."""

    def test_float_fixed_notation(self):
        assert render_cell(FloatCell(3.45)) == "3.450000"
        assert render_cell(FloatCell(1e20)) == "100000000000000000000.000000"
        assert render_cell(FloatCell(2.5), float_precision=2) == "2.50"

    def test_integer_digits(self):
        assert render_cell(IntegerCell(-42)) == "-42"

    def test_null_empty(self):
        assert render_cell(NULL) == ""

    def test_text_and_date_verbatim(self):
        assert render_cell(TextCell("a b")) == "a b"
        assert render_cell(DateCell("01-05-2021")) == "01-05-2021"


class TestToCsv:
    """Test writing DataFrames to CSV."""

    @pytest.fixture
    def df(self):
        """DataFrame ingested from heterogeneous items."""
        df = DataFrame()
        items = [
            {"Tarih": "2021-1", "USD": "7.3405", "N": "3"},
            {"Tarih": "2021-2", "USD": None},
            {"Tarih": "2021-3", "USD": "7.5", "Note": "revised"},
        ]
        for item in items:
            parse_item(item, df)
        return df

    def test_round_trip(self, df, tmp_path):
        """Row count equals record count; fields equal the renderings."""
        path = df.to_csv(tmp_path / "out.csv")
        rows = read_rows(path)

        assert rows[0] == ["Tarih", "USD", "N", "Note"]
        assert len(rows) - 1 == len(df)
        assert rows[1] == ["01-01-2021", "7.340500", "3", ""]
        assert rows[2] == ["01-02-2021", "", "", ""]
        assert rows[3] == ["01-03-2021", "7.500000", "", "revised"]

    def test_custom_delimiter(self, df, tmp_path):
        path = df.to_csv(tmp_path / "out.csv", delimiter=";")
        rows = read_rows(path, delimiter=";")

        assert rows[0] == ["Tarih", "USD", "N", "Note"]
        assert rows[1][1] == "7.340500"

    def test_lines_use_newline(self, df, tmp_path):
        path = df.to_csv(tmp_path / "out.csv")
        content = path.read_bytes()

        assert b"\r\n" not in content
        assert content.decode("utf-8").splitlines()[0] == "Tarih,USD,N,Note"

    def test_overwrites_existing(self, df, tmp_path):
        path = tmp_path / "out.csv"
        path.write_text("stale\n" * 100, encoding="utf-8")

        df.to_csv(path)

        assert len(read_rows(path)) == len(df) + 1

    def test_quotes_delimiter_and_newline(self, tmp_path):
        """Text containing the delimiter, quotes or newlines is quoted."""
        df = DataFrame()
        df.add_record({"A": TextCell("a,b"), "B": TextCell('say "hi"'), "C": TextCell("x\ny")})

        rows = read_rows(df.to_csv(tmp_path / "out.csv"))

        assert rows[1] == ["a,b", 'say "hi"', "x\ny"]

    def test_short_columns_render_empty(self, tmp_path):
        """Loose add_value() calls leave short columns; they pad with empty fields."""
        df = DataFrame()
        df.add_value("A", 1)
        df.add_value("A", 2)
        df.add_value("B", "x")

        rows = read_rows(df.to_csv(tmp_path / "out.csv"))

        assert rows == [["A", "B"], ["1", "x"], ["2", ""]]

    def test_single_column_null_row(self, tmp_path):
        """A lone empty field is quoted but still reads back as empty."""
        df = DataFrame()
        df.add_record({"A": 1})
        df.add_record({"A": None})

        path = df.to_csv(tmp_path / "out.csv")

        assert path.read_text(encoding="utf-8") == 'A\n1\n""\n'
        assert read_rows(path) == [["A"], ["1"], [""]]

    def test_utf8_text(self, tmp_path):
        df = DataFrame()
        df.add_record({"Açıklama": TextCell("Döviz kuru")})

        rows = read_rows(df.to_csv(tmp_path / "out.csv"))

        assert rows == [["Açıklama"], ["Döviz kuru"]]

    def test_unwritable_destination_raises(self, df, tmp_path):
        with pytest.raises(StorageError):
            df.to_csv(tmp_path / "missing" / "dir" / "out.csv")

    def test_storage_error_is_os_error(self, df, tmp_path):
        with pytest.raises(OSError):
            df.to_csv(tmp_path / "missing" / "out.csv")
