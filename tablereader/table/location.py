"""
TableLocation: where a table was found.

Produced once per successful search and never mutated afterwards;
:meth:`TableLocation.snapshot` hands callers a copy whose ``field_col``
and ``header`` can be modified freely.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, model_validator

from tablereader.grid.base import CellGrid


class TableLocation(BaseModel):
    """
    Attributes:
        sheet: the grid the table lives on (borrowed, never copied)
        sheet_name: ``sheet.name()`` at search time
        header_row: zero-based row of the header
        min_row, max_row: inclusive data-row bounds; ``max_row`` is the
            sheet's last row, so trailing blank rows are counted
        min_col, max_col: inclusive bounds of the resolved columns
        field_col: field name → column index
        header: text of the header row cells
        start_cell, end_cell: A1 addresses of the first / last data cell
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    sheet: CellGrid
    sheet_name: str
    header_row: int
    min_row: int
    max_row: int
    min_col: int
    max_col: int
    field_col: Dict[str, int]
    header: List[str] = []
    start_cell: str = ""
    end_cell: str = ""

    @model_validator(mode="after")
    def _check_bounds(self) -> "TableLocation":
        if self.header_row >= self.min_row:
            raise ValueError("header_row must be above min_row")
        if not self.field_col:
            raise ValueError("field_col must not be empty")
        cols = list(self.field_col.values())
        if len(set(cols)) != len(cols):
            raise ValueError("two fields share a column")
        if any(c < self.min_col or c > self.max_col for c in cols):
            raise ValueError("field column outside [min_col, max_col]")
        return self

    @property
    def record_count(self) -> int:
        return max(0, self.max_row - self.min_row + 1)

    def snapshot(self) -> "TableLocation":
        """Copy sharing the grid but not the mutable containers."""
        return self.model_copy(update={"field_col": dict(self.field_col), "header": list(self.header)})

    def as_dict(self) -> Dict[str, Any]:
        """JSON-friendly view (the grid replaced by its name)."""
        data = self.model_dump(exclude={"sheet"})
        data["record_count"] = self.record_count
        return data
