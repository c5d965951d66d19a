import argparse
import json
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import pandas as pd

from tablereader.config import get_settings
from tablereader.errors import ExtractionError, SetupError, TableNotFoundError
from tablereader.grid.workbook import WorkbookReader
from tablereader.logger import get_logger, set_format, set_level
from tablereader.profile_loader import load_profile
from tablereader.table.config import BLANK_ROW_POLICIES, DEFAULT_CONFIG, ON_ERROR_POLICIES
from tablereader.table.reader import TableReader

logger = get_logger("tablereader.cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Locate a table inside a spreadsheet and dump its records."
    )
    parser.add_argument("file", help="Spreadsheet (.xlsx, .xlsm, .xls or .csv).")
    parser.add_argument(
        "--profile",
        default=None,
        help="YAML profile with the field definitions.",
    )
    parser.add_argument(
        "--field",
        action="append",
        default=[],
        metavar="NAME",
        help="Required field matched by its name; repeat for more fields.",
    )
    parser.add_argument("--sheet", default=None, help="Exact sheet name to search.")
    parser.add_argument(
        "--sheet-regex",
        default=None,
        help="Case-insensitive regex selecting the sheets to search.",
    )
    parser.add_argument("--blank-row", choices=sorted(BLANK_ROW_POLICIES), default=None)
    parser.add_argument("--on-error", choices=sorted(ON_ERROR_POLICIES), default=None)
    parser.add_argument("--format", choices=["json", "csv"], default="json")
    parser.add_argument(
        "--output",
        default=None,
        help="Output file (default: stdout).",
    )
    parser.add_argument(
        "--list-sheets",
        action="store_true",
        help="Print the sheet names of FILE and exit.",
    )
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL.")
    return parser.parse_args(argv)


def _records_to_rows(records: List[Any]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for rec in records:
        if isinstance(rec, ExtractionError):
            rows.append({"error": str(rec), "cell": rec.cell, "field": rec.field})
        else:
            rows.append(rec)
    return rows


def write_output(rows: List[Dict[str, Any]], fmt: str, output: Optional[str], encoding: str) -> None:
    if fmt == "csv":
        text = pd.DataFrame(rows).to_csv(index=False)
    else:
        text = json.dumps(rows, ensure_ascii=False, indent=2, default=str) + "\n"
    if output:
        out_path = Path(output).expanduser().resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding=encoding)
    else:
        sys.stdout.write(text)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    set_format(settings.LOG_FORMAT)
    set_level(args.log_level or settings.LOG_LEVEL)

    if args.list_sheets:
        try:
            for name in WorkbookReader().list_sheet_names(args.file):
                print(name)
        except SetupError as e:
            print(f"[error] {e}", file=sys.stderr)
            return 1
        return 0

    sheet: Any = args.sheet
    if args.sheet_regex:
        sheet = re.compile(args.sheet_regex, re.IGNORECASE)

    config = DEFAULT_CONFIG
    try:
        if args.profile:
            profile = load_profile(args.profile)
            logger.debug("Loaded profile %s (%d fields)", profile["profile_id"] or args.profile, len(profile["fields"]))
            fields = profile["fields"] + list(args.field)
            config = profile["config"]
            if sheet is None:
                sheet = profile["sheet"]
        else:
            fields = list(args.field)
        reader = TableReader(file=args.file, sheet=sheet, fields=fields, config=config)
    except (SetupError, FileNotFoundError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    if not reader.find_table():
        print("[error] no matching header row found", file=sys.stderr)
        return 1

    loc = reader.table_location
    print(
        f"[table] sheet={loc.sheet_name} header_row={loc.header_row + 1} "
        f"range={loc.start_cell}:{loc.end_cell} records<={reader.record_count()}",
        file=sys.stderr,
    )

    try:
        records = list(
            reader.iterator(as_mapping=True, blank_row=args.blank_row, on_error=args.on_error)
        )
    except ExtractionError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2
    except TableNotFoundError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    write_output(_records_to_rows(records), args.format, args.output, settings.OUTPUT_ENCODING)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
