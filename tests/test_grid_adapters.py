import io
from datetime import datetime

import pandas as pd
import pytest
import xlrd

from tablereader.errors import SetupError
from tablereader.grid import workbook as wbmod
from tablereader.grid.rows import RowsGrid
from tablereader.grid.workbook import WorkbookReader, grid_from_dataframe
from tablereader.table.reader import TableReader


class DummyCell:
    def __init__(self, ctype, value):
        self.ctype = ctype
        self.value = value


class DummySheet:
    def __init__(self, name, rows):
        self.name = name
        self._rows = rows
        self.nrows = len(rows)

    def row(self, r):
        return self._rows[r]


class DummyBook:
    datemode = 0

    def __init__(self, sheets):
        self._sheets = sheets
        self.released = False

    def sheets(self):
        return self._sheets

    def release_resources(self):
        self.released = True


def _text(v):
    return DummyCell(xlrd.XL_CELL_TEXT, v)


def _num(v):
    return DummyCell(xlrd.XL_CELL_NUMBER, v)


def _xls_book():
    return DummyBook([
        DummySheet("Legacy", [
            [_text("Name"), _text("Joined"), _text("Active"), _text("Score")],
            [_text("ann"), DummyCell(xlrd.XL_CELL_DATE, 45000.0), DummyCell(xlrd.XL_CELL_BOOLEAN, 1), _num(3.0)],
            [_text("bob"), DummyCell(xlrd.XL_CELL_EMPTY, ""), DummyCell(xlrd.XL_CELL_BOOLEAN, 0), _num(2.5)],
        ]),
    ])


def test_xls_opened_with_xlrd_first(monkeypatch, tmp_path):
    path = tmp_path / "legacy.xls"
    path.write_bytes(b"")

    called = {"xlrd": False, "openpyxl": False}
    book = _xls_book()

    def fake_open_workbook(file_path):
        called["xlrd"] = True
        return book

    def fake_load_workbook(*args, **kwargs):
        called["openpyxl"] = True
        raise AssertionError("openpyxl should not be called for .xls")

    monkeypatch.setattr(xlrd, "open_workbook", fake_open_workbook)
    monkeypatch.setattr(wbmod, "load_workbook", fake_load_workbook)

    reader = TableReader(file=path, fields=["name", "joined", "active", "score"])
    assert reader.all_as_sequences() == [
        ["ann", datetime(2023, 3, 15), True, 3],
        ["bob", None, False, 2.5],
    ]
    assert called == {"xlrd": True, "openpyxl": False}
    assert book.released is True


def test_xlsx_falls_back_to_xlrd(monkeypatch, tmp_path):
    path = tmp_path / "mislabelled.xlsx"
    path.write_bytes(b"")

    def fake_load_workbook(*args, **kwargs):
        raise ValueError("not a zip file")

    monkeypatch.setattr(wbmod, "load_workbook", fake_load_workbook)
    monkeypatch.setattr(xlrd, "open_workbook", lambda file_path: _xls_book())

    assert WorkbookReader().list_sheet_names(path) == ["Legacy"]


def test_all_engines_failing_raises_setup_error(monkeypatch, tmp_path):
    path = tmp_path / "data.xls"
    path.write_bytes(b"")

    def fail(*args, **kwargs):
        raise ValueError("boom")

    monkeypatch.setattr(xlrd, "open_workbook", fail)
    monkeypatch.setattr(wbmod, "load_workbook", fail)

    with pytest.raises(SetupError, match="xlrd: boom; openpyxl: boom"):
        WorkbookReader().open(path)


def test_csv_file(tmp_path):
    path = tmp_path / "people.csv"
    path.write_text("Export,,\n,,\nName,Age,City\nann,31,Oslo\nbob,,Rome\n", encoding="utf-8")
    (grid,) = WorkbookReader().open(path)
    assert grid.name() == "people"
    assert grid.row_range() == (0, 4)

    reader = TableReader(file=path, fields=["name", "age", {"name": "city", "required": False}])
    assert reader.table_location.header_row == 2
    assert reader.all_as_mappings() == [
        {"name": "ann", "age": "31", "city": "Oslo"},
        {"name": "bob", "age": None, "city": "Rome"},
    ]


def test_csv_custom_delimiter(tmp_path):
    path = tmp_path / "people.txt"
    path.write_text("Name;Age\nann;31\n", encoding="utf-8")
    (grid,) = WorkbookReader(csv_delimiter=";").open(path)
    assert grid.get_cell(1, 1) == "31"


def test_stream_source(make_xlsx):
    data = make_xlsx({"First": [["Name"], ["ann"]], "Second": [["x"]]}).read_bytes()
    grids = WorkbookReader().open(io.BytesIO(data))
    assert [g.name() for g in grids] == ["First", "Second"]
    assert grids[0].get_cell(1, 0) == "ann"


def test_dataframe_grid_with_column_header():
    df = pd.DataFrame({"Name": ["ann", "bob"], "Score": [3.0, float("nan")]})
    grid = grid_from_dataframe(df, name="Frame", include_columns=True)
    assert grid.name() == "Frame"
    assert grid.row_values(0) == ["Name", "Score"]
    assert grid.get_cell(1, 1) == 3.0
    assert grid.get_cell(2, 1) is None
    assert grid.row_range() == (0, 2)


def test_rows_grid_bounds_skip_absent_cells():
    grid = RowsGrid("S", [[None, ""], [None, "x", None], [], [None, None, None, 0]])
    assert grid.row_range() == (1, 3)
    assert grid.col_range() == (1, 3)
    assert grid.get_cell(3, 3) == 0
    assert grid.get_cell(0, 0) is None
    assert len(grid) == 2
    assert grid.row_values(1) == [None, "x", None, None]


def test_unknown_sheet_object_rejected():
    with pytest.raises(SetupError):
        WorkbookReader.as_grid(object())
