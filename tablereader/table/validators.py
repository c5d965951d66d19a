"""
Built-in field validators and coercion of validator declarations.

A validator declaration may be a :class:`Matcher`, a compiled regex, a
callable, a Python type or one of the names in :data:`NAMED_VALIDATORS`
(handy in YAML profiles, e.g. ``isa: integer``).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

import pandas as pd

from tablereader.data_cleaner import DataCleaner
from tablereader.table.config import BOOL_TEXT, DATE_LIKE_RE, INTEGER_RE, NUMBER_RE
from tablereader.table.matchers import Matcher, PredicateMatcher, as_matcher


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, (float, Decimal)):
        return value == value and float(value).is_integer()
    if isinstance(value, str):
        return INTEGER_RE.match(value) is not None
    return False


def is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    if isinstance(value, str):
        return NUMBER_RE.match(value) is not None
    return False


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_date(value: Any) -> bool:
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return True
    if isinstance(value, str):
        return DATE_LIKE_RE.match(value) is not None
    return False


def is_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return value.strip().lower() in BOOL_TEXT
    return False


def is_nonblank(value: Any) -> bool:
    return not DataCleaner.is_empty(value)


NAMED_VALIDATORS: Dict[str, Matcher] = {
    "int": PredicateMatcher(is_integer, "integer"),
    "integer": PredicateMatcher(is_integer, "integer"),
    "number": PredicateMatcher(is_number, "number"),
    "num": PredicateMatcher(is_number, "number"),
    "float": PredicateMatcher(is_number, "number"),
    "str": PredicateMatcher(is_string, "string"),
    "string": PredicateMatcher(is_string, "string"),
    "date": PredicateMatcher(is_date, "date"),
    "datetime": PredicateMatcher(is_date, "date"),
    "bool": PredicateMatcher(is_bool, "boolean"),
    "boolean": PredicateMatcher(is_bool, "boolean"),
    "nonblank": PredicateMatcher(is_nonblank, "non-blank value"),
}

_TYPE_VALIDATORS = {
    int: "integer",
    float: "number",
    str: "string",
    bool: "boolean",
    date: "date",
    datetime: "date",
}


def as_validator(spec: Any) -> Optional[Matcher]:
    """Coerce a validator declaration; ``None`` means "no validation"."""
    if spec is None:
        return None
    if isinstance(spec, str):
        key = spec.strip().lower()
        if key in NAMED_VALIDATORS:
            return NAMED_VALIDATORS[key]
        raise ValueError(
            f"Unknown validator {spec!r}; expected one of {sorted(NAMED_VALIDATORS)} "
            "or a compiled pattern"
        )
    if isinstance(spec, type):
        if spec in _TYPE_VALIDATORS:
            return NAMED_VALIDATORS[_TYPE_VALIDATORS[spec]]
        return PredicateMatcher(lambda v, t=spec: isinstance(v, t), spec.__name__)
    return as_matcher(spec)
