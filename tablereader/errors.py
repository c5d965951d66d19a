"""
Exception types raised by the table reader.

``TableNotFoundError`` is only raised when records are requested from a
reader whose search came up empty; :func:`tablereader.table.locator.locate`
and :meth:`TableReader.find_table` report that outcome as ``None`` / ``False``.
"""

from typing import Any, Optional

from openpyxl.utils import get_column_letter


def cell_name(row: int, col: int) -> str:
    """Zero-based ``(row, col)`` to an A1-style address."""
    return f"{get_column_letter(col + 1)}{row + 1}"


class TableReaderError(Exception):
    """Base class for every error raised by this package."""


class SetupError(TableReaderError):
    """The reader cannot be built: unreadable file, no sheets, bad selector."""


class FieldSpecError(SetupError):
    """The field definitions are invalid."""


class TableNotFoundError(TableReaderError):
    """No row in any candidate sheet satisfies the field definitions."""


class ExtractionError(TableReaderError):
    """A field validator rejected the value of one cell."""

    def __init__(
        self,
        field: str,
        row: int,
        col: int,
        value: Any = None,
        expected: Optional[str] = None,
    ):
        self.field = field
        self.row = row
        self.col = col
        self.value = value
        self.expected = expected or "valid value"
        self.cell = cell_name(row, col)
        super().__init__(f"Not a {self.expected} at cell {self.cell} (field '{field}')")
