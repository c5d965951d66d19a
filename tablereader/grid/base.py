"""
Cell-grid interface consumed by the table locator and the record iterator.

A grid is one sheet: a sparse, read-only 2D region of cell values with
zero-based, inclusive row / column bounds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

Bounds = Optional[Tuple[int, int]]


class CellGrid(ABC):
    """Interface every sheet adapter implements."""

    @abstractmethod
    def name(self) -> str:
        """Sheet name, used by sheet selectors."""
        ...

    @abstractmethod
    def row_range(self) -> Bounds:
        """``(min_row, max_row)`` inclusive, or ``None`` for a sheet without data."""
        ...

    @abstractmethod
    def col_range(self) -> Bounds:
        """``(min_col, max_col)`` inclusive, or ``None`` for a sheet without data."""
        ...

    @abstractmethod
    def get_cell(self, row: int, col: int) -> Any:
        """
        Value at ``(row, col)``, or ``None`` when the cell is absent.

        Absent and empty-string cells are equivalent to the table core.
        """
        ...

    def row_values(self, row: int, max_col: Optional[int] = None) -> List[Any]:
        """Values of columns ``0..max_col`` of *row*; defaults to the sheet's last column."""
        if max_col is None:
            cols = self.col_range()
            if cols is None:
                return []
            max_col = cols[1]
        return [self.get_cell(row, col) for col in range(max_col + 1)]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name()!r} rows={self.row_range()} cols={self.col_range()}>"
