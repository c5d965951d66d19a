"""
Cell-grid subpackage.

Public API:
  - CellGrid        (abstract sheet interface)
  - RowsGrid        (in-memory sparse sheet)
  - WorkbookReader  (file I/O, engine selection)
  - grid_from_openpyxl / grid_from_xlrd / grid_from_dataframe
"""

from tablereader.grid.base import CellGrid
from tablereader.grid.rows import RowsGrid
from tablereader.grid.workbook import (
    WorkbookReader,
    grid_from_dataframe,
    grid_from_openpyxl,
    grid_from_xlrd,
)

__all__ = [
    "CellGrid",
    "RowsGrid",
    "WorkbookReader",
    "grid_from_dataframe",
    "grid_from_openpyxl",
    "grid_from_xlrd",
]
