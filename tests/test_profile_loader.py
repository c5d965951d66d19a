import re

import pytest

from tablereader.errors import FieldSpecError
from tablereader.profile_loader import load_profile, reader_from_profile
from tablereader.table.config import DEFAULT_CONFIG
from tablereader.table.matchers import LiteralMatcher, RegexMatcher

PROFILE = """
profile_id: books
sheet:
  regex: "^inv"
  ignore_case: true
header_scan_rows: 20
iterator:
  blank_row: skip
  on_error: mark
fields:
  - isbn
  - name: author
    header: "(?i)auth"
    required: false
    blank: ""
    isa: string
  - name: title
    header:
      literal: "Book Title"
"""


def _write(tmp_path, text, name="profile.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_load_profile(tmp_path):
    profile = load_profile(str(_write(tmp_path, PROFILE)))
    assert profile["profile_id"] == "books"
    assert isinstance(profile["sheet"], re.Pattern)
    assert profile["sheet"].search("Inventory")

    isbn, author, title = profile["fields"]
    assert isinstance(isbn.header, LiteralMatcher)
    assert isinstance(author.header, RegexMatcher)
    assert author.required is False
    assert author.blank == ""
    assert author.validator.test("Austen")
    assert title.matches_header(" book title ")
    assert not title.matches_header("Title")

    assert profile["iterator"] == {"as_mapping": True, "blank_row": "skip", "on_error": "mark"}
    assert profile["config"].header_scan_rows == 20
    assert profile["config"].blank_row == "skip"


def test_top_level_policies_and_plain_sheet_name(tmp_path):
    text = "sheet: Data\nblank_row: keep\nfields: [name]\n"
    profile = load_profile(str(_write(tmp_path, text)))
    assert profile["sheet"] == "Data"
    assert profile["config"].blank_row == "keep"
    assert profile["config"].on_error == DEFAULT_CONFIG.on_error


def test_invalid_choices_fall_back_to_defaults(tmp_path):
    text = "sheet: auto\niterator: {blank_row: stop, on_error: 3}\nheader_scan_rows: -1\nfields: [name]\n"
    profile = load_profile(str(_write(tmp_path, text)))
    assert profile["sheet"] is None
    assert profile["config"] == DEFAULT_CONFIG


def test_missing_profile(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_profile(str(tmp_path / "absent.yaml"))


@pytest.mark.parametrize(
    "text",
    [
        "profile_id: empty\n",
        "fields: []\n",
        "fields: [{name: isbn, colour: red}]\n",
        "fields: [[isbn]]\n",
        "fields: [isbn, isbn]\n",
    ],
)
def test_bad_field_lists(tmp_path, text):
    with pytest.raises(FieldSpecError):
        load_profile(str(_write(tmp_path, text)))


def test_reader_from_profile(tmp_path, make_xlsx):
    path = make_xlsx({
        "Notes": [["ISBN", "Book Title"]],
        "Inventory": [[], ["ISBN", "Book Title"], [1, "Emma"], [None, None], [2, "Persuasion"]],
    })
    reader = reader_from_profile(path, str(_write(tmp_path, PROFILE)))
    assert [s.name() for s in reader.sheets] == ["Inventory"]
    assert reader.all_as_mappings() == [
        {"isbn": 1, "title": "Emma"},
        {"isbn": 2, "title": "Persuasion"},
    ]

    override = reader_from_profile(path, str(_write(tmp_path, PROFILE)), sheet="Notes")
    assert override.table_location.sheet_name == "Notes"
