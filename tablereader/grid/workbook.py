"""
WorkbookReader: file I/O and engine selection for cell grids.

Encapsulates:
- openpyxl vs xlrd vs pandas (csv) engine selection, extension-first with
  fallback to the other engines (file names can lie)
- turning workbook / worksheet / DataFrame objects into :class:`CellGrid`s
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

import pandas as pd
import xlrd
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from tablereader.errors import SetupError
from tablereader.grid.base import CellGrid
from tablereader.grid.rows import RowsGrid
from tablereader.logger import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Object → grid conversion
# ---------------------------------------------------------------------------

def grid_from_openpyxl(ws: Any) -> RowsGrid:
    """Materialise an openpyxl worksheet (regular or read-only) into a grid."""
    rows = ws.iter_rows(
        min_row=1,
        max_row=ws.max_row,
        min_col=1,
        max_col=ws.max_column,
        values_only=True,
    )
    return RowsGrid(ws.title, rows)


def _xlrd_cell_value(cell: Any, datemode: int) -> Any:
    ctype = cell.ctype
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
        except (xlrd.xldate.XLDateError, ValueError, OverflowError):
            return cell.value
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "#ERR")
    if ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
        return int(cell.value)
    return cell.value


def grid_from_xlrd(sheet: Any, datemode: int = 0) -> RowsGrid:
    """Materialise an xlrd sheet into a grid, decoding date cells."""
    rows = (
        [_xlrd_cell_value(cell, datemode) for cell in sheet.row(r)]
        for r in range(sheet.nrows)
    )
    return RowsGrid(sheet.name, rows)


def grid_from_dataframe(
    df: pd.DataFrame,
    name: str = "Sheet1",
    include_columns: bool = False,
) -> RowsGrid:
    """
    Wrap a DataFrame as a grid.

    Frames read with ``header=None`` carry the header row as data already;
    pass ``include_columns=True`` to emit ``df.columns`` as row 0 instead.
    """
    rows: List[List[Any]] = []
    if include_columns:
        rows.append([str(c) for c in df.columns])
    rows.extend(df.astype(object).where(pd.notna(df), None).values.tolist())
    return RowsGrid(name, rows)


# ---------------------------------------------------------------------------
# WorkbookReader
# ---------------------------------------------------------------------------

class WorkbookReader:
    """Open spreadsheet files and expose their sheets as :class:`CellGrid`s."""

    _XLS_SUFFIXES = {".xls"}
    _CSV_SUFFIXES = {".csv", ".txt"}

    def __init__(self, csv_delimiter: Optional[str] = None):
        self._csv_delimiter = csv_delimiter

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def open(self, source: Any) -> List[CellGrid]:
        """
        Load every sheet of *source* (path, path-like or binary file object).

        Each engine is tried in turn, the one matching the file extension
        first.  Raises :class:`SetupError` when no engine can parse it.
        """
        label, data = self._read_source(source)
        errors: List[str] = []
        for engine, loader in self._engines_for(label):
            try:
                grids = loader(data)
            except Exception as e:
                logger.debug("Engine %s failed on %s: %s", engine, label, e)
                errors.append(f"{engine}: {e}")
                continue
            logger.info("Opened %s with %s (%d sheets)", label, engine, len(grids))
            return grids
        raise SetupError(f"Can't parse file '{label}' ({'; '.join(errors)})")

    def load(self, file: Any) -> List[CellGrid]:
        """Sheets of *file*: an opened workbook object, a path or a stream."""
        if self.is_workbook(file):
            return self.grids_from_workbook(file)
        return self.open(file)

    @staticmethod
    def is_workbook(obj: Any) -> bool:
        return isinstance(obj, (Workbook, xlrd.Book)) or callable(getattr(obj, "worksheets", None))

    def grids_from_workbook(self, workbook: Any) -> List[CellGrid]:
        """Sheets of an already-opened openpyxl / xlrd / custom workbook."""
        if isinstance(workbook, Workbook):
            return [grid_from_openpyxl(ws) for ws in workbook.worksheets]
        if isinstance(workbook, xlrd.Book):
            return [grid_from_xlrd(sh, workbook.datemode) for sh in workbook.sheets()]
        worksheets = getattr(workbook, "worksheets", None)
        if callable(worksheets):
            sheets = list(worksheets())
            return [self.as_grid(s) for s in sheets]
        raise SetupError(f"Unknown type of workbook: {type(workbook).__name__}")

    @staticmethod
    def as_grid(sheet: Any) -> CellGrid:
        """Coerce a single sheet-like object into a :class:`CellGrid`."""
        if isinstance(sheet, CellGrid):
            return sheet
        if isinstance(sheet, Worksheet) or hasattr(sheet, "iter_rows"):
            return grid_from_openpyxl(sheet)
        if isinstance(sheet, pd.DataFrame):
            return grid_from_dataframe(sheet)
        raise SetupError(f"Can't use {type(sheet).__name__} as a worksheet")

    @staticmethod
    def is_sheet_like(obj: Any) -> bool:
        return isinstance(obj, (CellGrid, Worksheet, pd.DataFrame))

    def list_sheet_names(self, source: Any) -> List[str]:
        return [g.name() for g in self.open(source)]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _read_source(source: Any) -> Tuple[str, Any]:
        """Return ``(label, data)``: a path string, or the bytes of a file object."""
        read = getattr(source, "read", None)
        if callable(read):
            data = read()
            if isinstance(data, str):
                data = data.encode("utf-8")
            return getattr(source, "name", "<stream>"), data
        path = Path(source).expanduser()
        if not path.exists():
            raise SetupError(f"File not found: {path}")
        return str(path), str(path)

    def _engines_for(self, label: str) -> Sequence[Tuple[str, Callable[[Any], List[CellGrid]]]]:
        suffix = Path(str(label)).suffix.lower()
        if suffix in self._CSV_SUFFIXES:
            return [("pandas_csv", self._load_csv)]
        engines = [("openpyxl", self._load_xlsx), ("xlrd", self._load_xls)]
        if suffix in self._XLS_SUFFIXES:
            engines.reverse()
        return engines

    @staticmethod
    def _load_xlsx(data: Any) -> List[CellGrid]:
        target = io.BytesIO(data) if isinstance(data, bytes) else data
        wb = load_workbook(target, read_only=False, data_only=True)
        try:
            return [grid_from_openpyxl(ws) for ws in wb.worksheets]
        finally:
            wb.close()

    @staticmethod
    def _load_xls(data: Any) -> List[CellGrid]:
        if isinstance(data, bytes):
            wb = xlrd.open_workbook(file_contents=data)
        else:
            wb = xlrd.open_workbook(data)
        try:
            return [grid_from_xlrd(sh, wb.datemode) for sh in wb.sheets()]
        finally:
            wb.release_resources()

    def _load_csv(self, data: Any) -> List[CellGrid]:
        target = io.BytesIO(data) if isinstance(data, bytes) else data
        df = pd.read_csv(
            target,
            header=None,
            dtype=str,
            keep_default_na=False,
            sep=self._csv_delimiter or ",",
            skip_blank_lines=False,
        )
        name = Path(data).stem if isinstance(data, str) else "Sheet1"
        return [grid_from_dataframe(df, name=name)]
