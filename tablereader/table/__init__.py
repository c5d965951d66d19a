"""
Table subpackage.

Public API:
  - TableReader      (orchestrator: sheet selection, cached location, bulk reads)
  - TableLocator     (header-row search across sheets)
  - ColumnResolver   (field → column assignment)
  - RecordIterator   (record stream)
  - FieldSpec / coerce_fields
  - ReaderConfig     (tunable defaults)
"""

from tablereader.table.column_resolver import ColumnResolver, resolve_columns
from tablereader.table.config import DEFAULT_CONFIG, ReaderConfig
from tablereader.table.fields import FieldSpec, coerce_fields
from tablereader.table.iterator import RecordIterator
from tablereader.table.location import TableLocation
from tablereader.table.locator import TableLocator, locate
from tablereader.table.matchers import LiteralMatcher, Matcher, PredicateMatcher, RegexMatcher
from tablereader.table.reader import TableReader

__all__ = [
    "ColumnResolver",
    "DEFAULT_CONFIG",
    "FieldSpec",
    "LiteralMatcher",
    "Matcher",
    "PredicateMatcher",
    "ReaderConfig",
    "RecordIterator",
    "RegexMatcher",
    "TableLocation",
    "TableLocator",
    "TableReader",
    "coerce_fields",
    "locate",
    "resolve_columns",
]
