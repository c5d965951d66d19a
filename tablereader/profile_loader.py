"""
Profile Loader Module
=====================

Loads table definitions from YAML profile files: sheet selection, field
list and iterator defaults.

    profile_id: books
    sheet: Inventory              # or {regex: "^inv", ignore_case: true}
    header_scan_rows: 50
    iterator:
      blank_row: skip             # end | skip | keep
      on_error: raise             # raise | skip | mark
    fields:
      - isbn
      - name: author
        header: "(?i)auth"        # regex; {literal: "Author"} for exact text
        required: false
        blank: ""
        isa: string
"""

import re
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from tablereader.errors import FieldSpecError
from tablereader.table.config import BLANK_ROW_POLICIES, DEFAULT_CONFIG, ON_ERROR_POLICIES, ReaderConfig
from tablereader.table.fields import FieldSpec, coerce_fields
from tablereader.table.matchers import LiteralMatcher
from tablereader.table.reader import TableReader

_FIELD_KEYS = {"name", "header", "required", "trim", "blank", "validator", "isa"}


def _ensure_dict(value: Any) -> Dict[str, Any]:
    """Return *value* if it is a dict, else an empty dict."""
    if isinstance(value, dict):
        return value
    return {}


def _ensure_list(value: Any) -> List[Any]:
    """Return *value* if it is a list, else an empty list."""
    if isinstance(value, list):
        return value
    return []


def _choice(value: Any, allowed, default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return default


def _parse_sheet(value: Any) -> Any:
    """``str`` → exact name, ``{regex: ..., ignore_case: bool}`` → compiled pattern."""
    if isinstance(value, str) and value.strip() and value.strip().lower() != "auto":
        return value.strip()
    sheet = _ensure_dict(value)
    pattern = sheet.get("regex")
    if isinstance(pattern, str) and pattern:
        flags = re.IGNORECASE if sheet.get("ignore_case") else 0
        return re.compile(pattern, flags)
    return None


def _parse_header(value: Any) -> Any:
    header = _ensure_dict(value)
    if "literal" in header:
        return LiteralMatcher(
            str(header["literal"]),
            ignore_case=bool(header.get("ignore_case", True)),
            strip=bool(header.get("strip", True)),
        )
    if "regex" in header:
        flags = re.IGNORECASE if header.get("ignore_case") else 0
        return re.compile(str(header["regex"]), flags)
    return value


def _parse_field(item: Any, idx: int) -> Any:
    if isinstance(item, str):
        return item
    if not isinstance(item, dict):
        raise FieldSpecError(f"field #{idx + 1}: expected a name or a mapping, got {item!r}")
    unknown = set(item) - _FIELD_KEYS
    if unknown:
        raise FieldSpecError(f"field #{idx + 1}: unknown keys {sorted(unknown)}")
    args = dict(item)
    if "header" in args:
        args["header"] = _parse_header(args["header"])
    return args


def load_profile(profile_path: str, base_config: ReaderConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
    """
    Load a table profile from YAML.

    Args:
        profile_path: path of the profile file
        base_config: config whose values are kept where the profile is silent

    Returns:
        ``{"profile_id", "sheet", "fields", "iterator", "config"}`` where
        ``fields`` is a list of :class:`FieldSpec`.

    Raises:
        FileNotFoundError: the profile does not exist
        FieldSpecError: the field list is missing or invalid
    """
    path = Path(profile_path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"profile not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    data = _ensure_dict(raw)

    items = _ensure_list(data.get("fields"))
    if not items:
        raise FieldSpecError(f"profile {path.name}: 'fields' must be a non-empty list")
    fields: List[FieldSpec] = coerce_fields([_parse_field(item, i) for i, item in enumerate(items)])

    iterator_raw = _ensure_dict(data.get("iterator"))
    blank_row = _choice(iterator_raw.get("blank_row", data.get("blank_row")), BLANK_ROW_POLICIES, base_config.blank_row)
    on_error = _choice(iterator_raw.get("on_error", data.get("on_error")), ON_ERROR_POLICIES, base_config.on_error)
    as_mapping = iterator_raw.get("as_mapping")
    if not isinstance(as_mapping, bool):
        as_mapping = True

    scan_rows = data.get("header_scan_rows")
    if not isinstance(scan_rows, int) or isinstance(scan_rows, bool) or scan_rows < 0:
        scan_rows = base_config.header_scan_rows

    return {
        "profile_id": data.get("profile_id"),
        "sheet": _parse_sheet(data.get("sheet")),
        "fields": fields,
        "iterator": {"as_mapping": as_mapping, "blank_row": blank_row, "on_error": on_error},
        "config": replace(base_config, blank_row=blank_row, on_error=on_error, header_scan_rows=scan_rows),
    }


def reader_from_profile(file: Any, profile_path: str, sheet: Optional[Any] = None) -> TableReader:
    """Build a :class:`TableReader` for *file* from a profile; *sheet* overrides the profile's."""
    profile = load_profile(profile_path)
    return TableReader(
        file=file,
        sheet=sheet if sheet is not None else profile["sheet"],
        fields=profile["fields"],
        config=profile["config"],
    )
