"""
tablereader: locate a table somewhere within a spreadsheet and extract it.

    from tablereader import TableReader

    reader = TableReader(file="roster.xlsx", fields=["name", "email"])
    for rec in reader.iterator(as_mapping=True):
        ...
"""

from tablereader.errors import (
    ExtractionError,
    FieldSpecError,
    SetupError,
    TableNotFoundError,
    TableReaderError,
)
from tablereader.grid import CellGrid, RowsGrid, WorkbookReader
from tablereader.table import (
    FieldSpec,
    LiteralMatcher,
    PredicateMatcher,
    ReaderConfig,
    RecordIterator,
    RegexMatcher,
    TableLocation,
    TableReader,
    coerce_fields,
    locate,
)

__version__ = "0.3.0"

__all__ = [
    "CellGrid",
    "ExtractionError",
    "FieldSpec",
    "FieldSpecError",
    "LiteralMatcher",
    "PredicateMatcher",
    "ReaderConfig",
    "RecordIterator",
    "RegexMatcher",
    "RowsGrid",
    "SetupError",
    "TableLocation",
    "TableNotFoundError",
    "TableReader",
    "TableReaderError",
    "WorkbookReader",
    "coerce_fields",
    "locate",
]
