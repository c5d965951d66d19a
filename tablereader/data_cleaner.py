"""
DataCleaner: value normalisation utilities shared by the grid adapters and
the table core.

Responsibilities:
- Absent-cell detection (``None`` / NaN / empty string)
- Cell-level string conversion, raw (``cell_text``) and stripped (``cell_to_str``)
- Whitespace trimming of extracted values
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pandas as pd


class DataCleaner:
    """Stateless helper that normalises raw cell values."""

    # ----- absent / empty --------------------------------------------------

    @staticmethod
    def is_missing(value: Any) -> bool:
        """``None`` or a pandas / float NaN."""
        if value is None:
            return True
        try:
            return bool(pd.isna(value))
        except (TypeError, ValueError):
            return False

    @staticmethod
    def is_absent(value: Any) -> bool:
        """A cell that holds nothing at all: missing or the empty string."""
        if DataCleaner.is_missing(value):
            return True
        return isinstance(value, str) and value == ""

    @staticmethod
    def is_empty(value: Any) -> bool:
        if DataCleaner.is_missing(value):
            return True
        return DataCleaner.cell_text(value).strip() == ""

    # ----- cell → string ---------------------------------------------------

    @staticmethod
    def cell_text(value: Any) -> str:
        """
        Convert a cell value to text without altering whitespace.

        Header matchers see exactly this text, so a pattern such as
        ``^\\s*Name\\s*$`` can still decide how to treat padding.
        """
        if DataCleaner.is_missing(value):
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, (datetime, date, pd.Timestamp)):
            try:
                if isinstance(value, datetime):
                    return value.isoformat(sep=" ", timespec="seconds")
                return value.isoformat()
            except Exception:
                return str(value)
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        # Rich-text objects from openpyxl may expose .plain or .text
        plain_attr = getattr(value, "plain", None)
        if isinstance(plain_attr, str):
            return plain_attr
        text_attr = getattr(value, "text", None)
        if isinstance(text_attr, str):
            return text_attr
        return str(value)

    @staticmethod
    def cell_to_str(value: Any) -> str:
        """Convert an arbitrary cell value to a clean, stripped string."""
        text = DataCleaner.cell_text(value).strip()
        if text.lower() in {"nan", "nat"}:
            return ""
        return text

    # ----- extraction ------------------------------------------------------

    @staticmethod
    def trim(value: Any) -> Any:
        """Strip leading / trailing whitespace from strings; other types pass through."""
        if isinstance(value, str):
            return value.strip()
        return value
