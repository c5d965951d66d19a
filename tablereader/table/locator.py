"""
TableLocator: find the header row of a table somewhere in a set of sheets.

Rows are scanned top-down across all sheets at once (row 0 of every sheet,
then row 1 of every sheet, ...) since headers are most likely near the top
of a document.  A cheap count of cells matching *any* field's header
rejects most rows before the per-field column resolution runs.

Worst case is O(rows × fields × cols) per sheet, which only happens when
nearly every row almost matches (extremely lax header patterns).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from tablereader.data_cleaner import DataCleaner
from tablereader.errors import SetupError, cell_name
from tablereader.grid.base import CellGrid
from tablereader.logger import get_logger
from tablereader.table.column_resolver import ColumnResolver
from tablereader.table.fields import FieldSpec, coerce_fields
from tablereader.table.location import TableLocation

logger = get_logger(__name__)


class TableLocator:
    """
    Searches *sheets* for a row satisfying *fields*.

    ``max_scan_rows`` (0 / ``None`` = unlimited) caps how deep the header
    search goes.
    """

    def __init__(
        self,
        fields: Sequence[FieldSpec],
        max_scan_rows: Optional[int] = None,
    ):
        self._fields = coerce_fields(fields)
        self._resolver = ColumnResolver(self._fields)
        self._num_required = sum(1 for f in self._fields if f.required)
        self._max_scan_rows = max_scan_rows or None

    # -----------------------------------------------------------------
    # Header tests
    # -----------------------------------------------------------------

    def matches_any_header(self, text: str) -> bool:
        return any(f.matches_header(text) for f in self._fields)

    def match_count(self, row_values: Sequence[str]) -> int:
        return sum(1 for v in row_values if self.matches_any_header(v))

    @staticmethod
    def row_text(sheet: CellGrid, row: int, max_col: int) -> List[str]:
        return [DataCleaner.cell_text(v) for v in sheet.row_values(row, max_col)]

    # -----------------------------------------------------------------
    # Search
    # -----------------------------------------------------------------

    def locate(self, sheets: Sequence[CellGrid]) -> Optional[TableLocation]:
        """
        Return the first matching table, or ``None`` when there is none.

        Raises :class:`SetupError` when *sheets* is empty.
        """
        if not sheets:
            raise SetupError("No worksheets to search")
        bounds = [(s, s.row_range(), s.col_range()) for s in sheets]
        bounds = [(s, rr, cr) for s, rr, cr in bounds if rr is not None and cr is not None]
        if not bounds:
            logger.debug("No sheet has any data")
            return None

        last_row = max(rr[1] for _, rr, _ in bounds)
        if self._max_scan_rows is not None:
            last_row = min(last_row, self._max_scan_rows - 1)
        trace = logger.isEnabledFor(logging.DEBUG)

        for row in range(0, last_row + 1):
            for sheet, (rmin, rmax), (_, cmax) in bounds:
                if row < rmin or row > rmax:
                    continue
                row_vals = self.row_text(sheet, row, cmax)
                match_count = self.match_count(row_vals)
                if trace:
                    logger.debug(
                        "row %d sheet %s match_count=%d values=%s",
                        row, sheet.name(), match_count, row_vals,
                    )
                if match_count < self._num_required:
                    continue
                field_col = self._resolver.resolve(row_vals, row=row)
                if field_col:
                    return self._build_location(sheet, row, rmax, field_col, row_vals)

        logger.debug("No row matched the header of %s", [f.name for f in self._fields])
        return None

    @staticmethod
    def _build_location(
        sheet: CellGrid,
        header_row: int,
        sheet_max_row: int,
        field_col: dict,
        row_vals: List[str],
    ) -> TableLocation:
        cols_used = sorted(field_col.values())
        min_row = header_row + 1
        # Sheet bound, not the last row holding data in our columns
        max_row = sheet_max_row
        min_col, max_col = cols_used[0], cols_used[-1]
        return TableLocation(
            sheet=sheet,
            sheet_name=sheet.name(),
            header_row=header_row,
            min_row=min_row,
            max_row=max_row,
            min_col=min_col,
            max_col=max_col,
            field_col=field_col,
            header=list(row_vals),
            start_cell=cell_name(min_row, min_col),
            end_cell=cell_name(max(min_row, max_row), max_col),
        )


def locate(
    sheets: Sequence[CellGrid],
    fields: Sequence[FieldSpec],
    max_scan_rows: Optional[int] = None,
) -> Optional[TableLocation]:
    """Functional shortcut for :meth:`TableLocator.locate`."""
    return TableLocator(fields, max_scan_rows=max_scan_rows).locate(sheets)
