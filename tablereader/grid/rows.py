"""
RowsGrid: in-memory sheet built from a sequence of row sequences.

Every file adapter materialises its sheet into one of these at load time,
so cell lookups never touch (or mutate) the underlying workbook object.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from tablereader.data_cleaner import DataCleaner
from tablereader.grid.base import Bounds, CellGrid


class RowsGrid(CellGrid):
    """
    Sparse grid holding only the non-absent cells of *rows*.

    ``origin`` is the ``(row, col)`` of ``rows[0][0]``, for callers that
    materialise a window of a larger sheet.
    """

    def __init__(
        self,
        name: str,
        rows: Iterable[Optional[Sequence[Any]]],
        origin: Tuple[int, int] = (0, 0),
    ):
        self._name = str(name)
        self._cells: Dict[Tuple[int, int], Any] = {}
        row0, col0 = origin
        for r, row in enumerate(rows):
            for c, value in enumerate(row or ()):
                if DataCleaner.is_absent(value):
                    continue
                self._cells[(row0 + r, col0 + c)] = value
        self._row_bounds: Bounds = None
        self._col_bounds: Bounds = None
        if self._cells:
            row_idx = [r for r, _ in self._cells]
            col_idx = [c for _, c in self._cells]
            self._row_bounds = (min(row_idx), max(row_idx))
            self._col_bounds = (min(col_idx), max(col_idx))

    def name(self) -> str:
        return self._name

    def row_range(self) -> Bounds:
        return self._row_bounds

    def col_range(self) -> Bounds:
        return self._col_bounds

    def get_cell(self, row: int, col: int) -> Any:
        return self._cells.get((row, col))

    def __len__(self) -> int:
        return len(self._cells)
