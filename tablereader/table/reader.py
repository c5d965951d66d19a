"""
TableReader: find a table somewhere within a spreadsheet and read it.

Users exchange files, add rows or columns and otherwise rearrange the
layout.  The reader uses the header patterns of the fields to locate the
header row, then pulls the data rows below it until the first blank row
(or the end of the sheet).  Columns may appear in any order, unknown
columns are ignored, and optional fields may be missing.

    reader = TableReader(
        file="books.xlsx",
        sheet=re.compile("inventory", re.I),   # optional; all sheets otherwise
        fields=[
            {"name": "isbn", "header": re.compile("isbn", re.I), "isa": "integer"},
            "author",
            "title",
            {"name": "publisher", "header": re.compile("publish", re.I), "required": False},
        ],
    )
    rows = reader.all_as_mappings()
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from tablereader.errors import ExtractionError, SetupError, TableNotFoundError
from tablereader.grid.base import CellGrid
from tablereader.grid.workbook import WorkbookReader
from tablereader.logger import get_logger
from tablereader.table.config import DEFAULT_CONFIG, ReaderConfig
from tablereader.table.fields import FieldSpec, coerce_fields
from tablereader.table.iterator import RecordIterator
from tablereader.table.location import TableLocation
from tablereader.table.locator import TableLocator

logger = get_logger(__name__)


class TableReader:
    """
    Args:
        file: path, binary stream, openpyxl ``Workbook``, xlrd ``Book`` or any
            object whose ``worksheets()`` returns grids.  Not needed when
            *sheet* is itself a worksheet.
        sheet: sheet name, compiled regex matched against sheet names,
            predicate over grids, or a worksheet / grid / DataFrame.  All
            sheets are searched when omitted.
        fields: list of field names, dicts or :class:`FieldSpec` objects.
        config: :class:`ReaderConfig` with iterator defaults and scan depth.

    Raises :class:`SetupError` right away when there is no sheet to search.
    """

    def __init__(
        self,
        file: Any = None,
        sheet: Any = None,
        fields: Optional[Sequence[Any]] = None,
        config: ReaderConfig = DEFAULT_CONFIG,
        workbook_reader: Optional[WorkbookReader] = None,
    ):
        self.file = file
        self.sheet = sheet
        self._cfg = config
        self._fields: List[FieldSpec] = coerce_fields(fields)
        self._wb_reader = workbook_reader or WorkbookReader()
        # Errors getting the searchable worksheets surface at construction time
        self._sheets: List[CellGrid] = self._build_sheets()
        self._location: Optional[TableLocation] = None
        self._searched = False

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    @property
    def fields(self) -> List[FieldSpec]:
        return list(self._fields)

    @property
    def sheets(self) -> List[CellGrid]:
        return list(self._sheets)

    @property
    def config(self) -> ReaderConfig:
        return self._cfg

    # ------------------------------------------------------------------
    # Sheet selection
    # ------------------------------------------------------------------

    def _build_sheets(self) -> List[CellGrid]:
        # A worksheet given directly needs no file at all
        if self.sheet is not None and (
            WorkbookReader.is_sheet_like(self.sheet) or hasattr(self.sheet, "iter_rows")
        ):
            return [self._wb_reader.as_grid(self.sheet)]

        if self.file is None:
            raise SetupError("Either 'file' or a worksheet 'sheet' is required")

        sheets = self._wb_reader.load(self.file)
        if not sheets:
            raise SetupError("No worksheets in file?")

        spec = self.sheet
        if spec is not None:
            if isinstance(spec, re.Pattern):
                sheets = [s for s in sheets if spec.search(s.name())]
            elif isinstance(spec, str):
                sheets = [s for s in sheets if s.name() == spec]
            elif callable(spec):
                sheets = [s for s in sheets if spec(s)]
            else:
                raise SetupError(f"Unknown type of sheet specification: {spec!r}")
        if not sheets:
            raise SetupError("No worksheets match the specification")
        return sheets

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def find_table(self) -> bool:
        """
        Search for the header row, replacing any earlier result.

        Returns ``True`` when a table was located.  After this call the
        data-reading methods pull from the located region.
        """
        locator = TableLocator(self._fields, max_scan_rows=self._cfg.header_scan_rows)
        self._location = locator.locate(self._sheets)
        self._searched = True
        if self._location is None:
            logger.info(
                "No header row for fields %s in %d sheet(s)",
                [f.name for f in self._fields], len(self._sheets),
            )
            return False
        loc = self._location
        logger.info(
            "Table found on sheet '%s' header row %d (%s:%s), columns %s",
            loc.sheet_name, loc.header_row, loc.start_cell, loc.end_cell, loc.field_col,
        )
        return True

    def _ensure_location(self) -> Optional[TableLocation]:
        if not self._searched:
            self.find_table()
        return self._location

    @property
    def table_location(self) -> Optional[TableLocation]:
        """Copy of the located table, searching on first access; ``None`` if absent."""
        loc = self._ensure_location()
        return loc.snapshot() if loc is not None else None

    def record_count(self) -> int:
        """
        Rows between the header and the sheet's last row.

        The iterator may return fewer when it stops or skips at blank rows.
        """
        loc = self._ensure_location()
        return loc.record_count if loc is not None else 0

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def iterator(
        self,
        as_mapping: bool = False,
        blank_row: Optional[str] = None,
        on_error: Optional[str] = None,
    ) -> RecordIterator:
        """
        Return a fresh :class:`RecordIterator`.

        Args:
            as_mapping: yield ``{field: value}`` dicts instead of lists
            blank_row: ``"end"`` (default), ``"skip"`` or ``"keep"``
            on_error: ``"raise"`` (default), ``"skip"`` or ``"mark"``
        """
        loc = self._ensure_location()
        if loc is None:
            raise TableNotFoundError("No match for table header in excel file")
        return RecordIterator(
            loc,
            self._fields,
            as_mapping=as_mapping,
            blank_row=blank_row or self._cfg.blank_row,
            on_error=on_error or self._cfg.on_error,
        )

    def all_as_mappings(
        self, blank_row: Optional[str] = None, on_error: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """All records as dicts."""
        return list(self.iterator(as_mapping=True, blank_row=blank_row, on_error=on_error))

    def all_as_sequences(
        self, blank_row: Optional[str] = None, on_error: Optional[str] = None
    ) -> List[List[Any]]:
        """All records as lists, values ordered like the field definitions."""
        return list(self.iterator(as_mapping=False, blank_row=blank_row, on_error=on_error))

    def to_dataframe(
        self, blank_row: Optional[str] = None, on_error: Optional[str] = None
    ) -> pd.DataFrame:
        """Records as a DataFrame; rows marked as errors are left out."""
        it = self.iterator(as_mapping=False, blank_row=blank_row, on_error=on_error)
        rows = [rec for rec in it if not isinstance(rec, ExtractionError)]
        return pd.DataFrame(rows, columns=it.keys)

    def __repr__(self) -> str:
        return (
            f"<TableReader fields={[f.name for f in self._fields]} "
            f"sheets={[s.name() for s in self._sheets]}>"
        )
