"""
Pytest configuration and shared fixtures.
"""
import os
import sys
import pytest

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from openpyxl import Workbook

from tablereader.grid.rows import RowsGrid


@pytest.fixture
def books_rows():
    """A table with a title line, a blank line and a header on row 2 (zero-based)."""
    return [
        ["Book inventory"],
        [],
        ["ISBN", "Author", "Title", "Notes"],
        [9780141439518, "Austen", "Emma", None],
        [9780141441146, "  Bronte ", "Jane Eyre", "worn"],
        [9780140449136, "Dostoevsky", "Crime and Punishment", ""],
    ]


@pytest.fixture
def make_grid():
    """Factory building an in-memory grid from a list of rows."""
    def _make(rows, name="Sheet1", origin=(0, 0)):
        return RowsGrid(name, rows, origin=origin)
    return _make


@pytest.fixture
def make_xlsx(tmp_path):
    """
    Factory writing an ``.xlsx`` file with openpyxl.

    ``sheets`` maps sheet name to a list of rows; ``None`` cells stay empty.
    """
    def _make(sheets, filename="book.xlsx"):
        wb = Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title=title)
            for r, row in enumerate(rows, start=1):
                for c, value in enumerate(row, start=1):
                    if value is not None:
                        ws.cell(row=r, column=c, value=value)
        path = tmp_path / filename
        wb.save(path)
        return path
    return _make
