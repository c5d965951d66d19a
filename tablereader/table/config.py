"""
Centralised configuration for table location and record extraction.

Regex patterns shared by the validators and the tunable defaults of the
reader live here so the rest of the code stays free of hard-coded values.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import FrozenSet


# ---------------------------------------------------------------------------
# Environment helpers
# ---------------------------------------------------------------------------

def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)).strip())
    except Exception:
        return default


def _env_choice(name: str, default: str, allowed: FrozenSet[str]) -> str:
    value = os.getenv(name, "").strip().lower()
    return value if value in allowed else default


# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (shared across modules)
# ---------------------------------------------------------------------------

INTEGER_RE = re.compile(r"^\s*[-+]?\d+\s*$")
NUMBER_RE = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?\s*$")
DATE_LIKE_RE = re.compile(
    r"^\s*\d{4}[-/.]\d{1,2}[-/.]\d{1,2}(?:[ T]\d{1,2}:\d{2}(?::\d{2})?)?\s*$"
)
BOOL_TEXT: FrozenSet[str] = frozenset({"true", "false", "yes", "no", "y", "n", "1", "0"})


# ---------------------------------------------------------------------------
# Option vocabularies
# ---------------------------------------------------------------------------

BLANK_ROW_POLICIES: FrozenSet[str] = frozenset({"end", "skip", "keep"})
ON_ERROR_POLICIES: FrozenSet[str] = frozenset({"raise", "skip", "mark"})


# ---------------------------------------------------------------------------
# ReaderConfig: tunable defaults
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReaderConfig:
    """Immutable bag of defaults used by :class:`TableReader`."""

    # Iterator defaults when the caller passes no option
    blank_row: str = _env_choice("TABLEREADER_BLANK_ROW", "end", BLANK_ROW_POLICIES)
    on_error: str = _env_choice("TABLEREADER_ON_ERROR", "raise", ON_ERROR_POLICIES)

    # Header search depth; 0 scans every row of every sheet
    header_scan_rows: int = _env_int("TABLEREADER_HEADER_SCAN_ROWS", 0)

    def __post_init__(self):
        if self.blank_row not in BLANK_ROW_POLICIES:
            raise ValueError(f"blank_row must be one of {sorted(BLANK_ROW_POLICIES)}, got {self.blank_row!r}")
        if self.on_error not in ON_ERROR_POLICIES:
            raise ValueError(f"on_error must be one of {sorted(ON_ERROR_POLICIES)}, got {self.on_error!r}")
        if self.header_scan_rows < 0:
            raise ValueError("header_scan_rows must be >= 0")


# Singleton default config
DEFAULT_CONFIG = ReaderConfig()
