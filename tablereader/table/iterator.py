"""
RecordIterator: lazy, forward-only stream of records below a located header.

    it = reader.iterator(as_mapping=True)
    for rec in it:
        ...

or, tolerating invalid data:

    it = reader.iterator(on_error="mark")
    for rec in it:
        if isinstance(rec, ExtractionError):
            logger.warning("Error on row %d, but continuing", it.row)
            continue
        ...

States: ready (cursor at ``min_row - 1``) → emitting → ended.  Ended is
terminal until :meth:`RecordIterator.rewind`.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Sequence, Tuple, Union

from tablereader.data_cleaner import DataCleaner
from tablereader.errors import ExtractionError
from tablereader.grid.base import CellGrid
from tablereader.logger import get_logger
from tablereader.table.config import BLANK_ROW_POLICIES, ON_ERROR_POLICIES
from tablereader.table.fields import FieldSpec
from tablereader.table.location import TableLocation

logger = get_logger(__name__)

Record = Union[Dict[str, Any], List[Any]]
Extractor = Callable[[int], Tuple[Any, bool]]


class RecordIterator:
    """
    Iterator over the data rows of one :class:`TableLocation`.

    Each instance keeps its own cursor; any number of iterators can run
    over the same location and grid.
    """

    def __init__(
        self,
        location: TableLocation,
        fields: Sequence[FieldSpec],
        as_mapping: bool = False,
        blank_row: str = "end",
        on_error: str = "raise",
    ):
        if blank_row not in BLANK_ROW_POLICIES:
            raise ValueError(f"blank_row must be one of {sorted(BLANK_ROW_POLICIES)}, got {blank_row!r}")
        if on_error not in ON_ERROR_POLICIES:
            raise ValueError(f"on_error must be one of {sorted(ON_ERROR_POLICIES)}, got {on_error!r}")

        self._location = location
        self._sheet = location.sheet
        self._as_mapping = bool(as_mapping)
        self._blank_row = blank_row
        self._on_error = on_error

        field_col = location.field_col
        self._fields = [f for f in fields if f.name in field_col]
        self._cols = [field_col[f.name] for f in self._fields]
        self._keys = [f.name for f in self._fields]
        self._extractors: List[Extractor] = [
            self._make_extractor(self._sheet, f, c) for f, c in zip(self._fields, self._cols)
        ]
        self._validations = [
            (i, f, c) for i, (f, c) in enumerate(zip(self._fields, self._cols)) if f.validator is not None
        ]

        self._row = location.min_row - 1
        self._col = location.min_col
        self._remaining = location.record_count

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    @staticmethod
    def _make_extractor(sheet: CellGrid, field: FieldSpec, col: int) -> Extractor:
        """Closure returning ``(value, is_real)`` for one field of a row."""
        blank = field.blank
        if field.trim:
            def extract(row: int) -> Tuple[Any, bool]:
                v = sheet.get_cell(row, col)
                if DataCleaner.is_missing(v):
                    return blank, False
                v = DataCleaner.trim(v)
                if isinstance(v, str) and not v:
                    return blank, False
                return v, True
        else:
            def extract(row: int) -> Tuple[Any, bool]:
                v = sheet.get_cell(row, col)
                if DataCleaner.is_absent(v):
                    return blank, False
                return v, True
        return extract

    def _validate(self, values: List[Any]) -> None:
        # Blank substitutes are validated like any other extracted value
        for idx, field, col in self._validations:
            if field.validator.test(values[idx]):
                continue
            # so that .col reports the column of the error
            self._col = col
            raise ExtractionError(
                field=field.name,
                row=self._row,
                col=col,
                value=values[idx],
                expected=field.validator.name,
            )

    # ------------------------------------------------------------------
    # Iterator protocol
    # ------------------------------------------------------------------

    def __iter__(self) -> "RecordIterator":
        return self

    def __next__(self) -> Union[Record, ExtractionError]:
        while True:
            if self._remaining <= 0:
                raise StopIteration
            self._row += 1
            self._col = self._location.min_col
            self._remaining -= 1

            values: List[Any] = []
            real: List[bool] = []
            for extract in self._extractors:
                v, is_real = extract(self._row)
                values.append(v)
                real.append(is_real)

            if not any(real):
                if self._blank_row == "skip":
                    continue
                if self._blank_row == "end":
                    self._remaining = 0
                    raise StopIteration

            try:
                self._validate(values)
            except ExtractionError as e:
                if self._on_error == "raise":
                    raise
                logger.warning("%s; row %d %s", e, self._row, "skipped" if self._on_error == "skip" else "marked")
                if self._on_error == "skip":
                    continue
                return e

            if self._as_mapping:
                return dict(zip(self._keys, values))
            return values

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def sheet(self) -> CellGrid:
        return self._sheet

    @property
    def location(self) -> TableLocation:
        return self._location

    @property
    def row(self) -> int:
        """Row of the record last produced (``min_row - 1`` before the first)."""
        return self._row

    @property
    def col(self) -> int:
        """First table column, or the failing column after a validation error."""
        return self._col

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def keys(self) -> List[str]:
        """Names of the fields present in each record, in declaration order."""
        return list(self._keys)

    def rewind(self) -> bool:
        """Return the cursor to the first data row."""
        self._row = self._location.min_row - 1
        self._col = self._location.min_col
        self._remaining = self._location.record_count
        return True

    def __repr__(self) -> str:
        return (
            f"<RecordIterator sheet={self._location.sheet_name!r} row={self._row} "
            f"remaining={self._remaining}>"
        )
