"""
ColumnResolver: assign every field to exactly one column of a candidate
header row.

A header cell may match several fields and a field may match several
cells.  Fields with a single available column claim it first; fields with
several candidates are pushed to the back of the work list until earlier
claims narrow them down.  A full pass without progress means the row is
ambiguous and is rejected.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence

from tablereader.errors import cell_name
from tablereader.logger import get_logger
from tablereader.table.fields import FieldSpec

logger = get_logger(__name__)


class ColumnResolver:
    """Stateless per call; holds only the ordered field list."""

    def __init__(self, fields: Sequence[FieldSpec]):
        self._fields = list(fields)

    def candidates(self, row_values: Sequence[str]) -> Dict[str, List[int]]:
        """Columns whose non-empty text matches each field's header, ascending."""
        found: Dict[str, List[int]] = {}
        for col, text in enumerate(row_values):
            if not text:
                continue
            for field in self._fields:
                if field.matches_header(text):
                    found.setdefault(field.name, []).append(col)
        return found

    def resolve(self, row_values: Sequence[str], row: Optional[int] = None) -> Optional[Dict[str, int]]:
        """
        Return ``{field_name: col}`` or ``None`` when the row cannot be
        resolved to a unique assignment covering every required field.
        """
        found = self.candidates(row_values)
        debug = logger.isEnabledFor(logging.DEBUG)

        def _addr(cols: Sequence[int]) -> str:
            if row is None:
                return ",".join(str(c) for c in cols)
            return ",".join(cell_name(row, c) for c in cols)

        col_map: Dict[int, str] = {}
        ambiguous = 0
        todo: Deque[FieldSpec] = deque(self._fields)
        while todo:
            field = todo.popleft()
            possible = found.get(field.name)
            if not possible:
                continue
            available = [c for c in possible if c not in col_map]
            if debug:
                logger.debug(
                    "ambiguous=%d : field %s could be %s and %s are available",
                    ambiguous, field.name, _addr(possible), _addr(available),
                )
            if not available:
                # Two fields claim the same columns and this one is required
                if field.required:
                    if debug:
                        logger.debug(
                            "Field %s and %s would both claim %s",
                            field.name, col_map[possible[0]], _addr(possible[:1]),
                        )
                    return None
            elif len(available) > 1:
                # Defer: a more specific field may claim one of the options
                ambiguous += 1
                if ambiguous > len(todo):
                    if debug:
                        logger.debug(
                            "Can't decide between %s for field %s",
                            _addr(available), field.name,
                        )
                    return None
                todo.append(field)
            else:
                col_map[available[0]] = field.name
                ambiguous = 0

        field_col = {name: col for col, name in col_map.items()}
        if not field_col:
            return None
        missing = [f.name for f in self._fields if f.required and f.name not in field_col]
        if missing:
            if debug:
                logger.debug("Row %s lacks required fields %s", row, missing)
            return None
        return field_col


def resolve_columns(
    row_values: Sequence[str],
    fields: Sequence[FieldSpec],
    row: Optional[int] = None,
) -> Optional[Dict[str, int]]:
    """Functional shortcut for :meth:`ColumnResolver.resolve`."""
    return ColumnResolver(fields).resolve(row_values, row=row)
