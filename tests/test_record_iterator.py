import pytest

from tablereader.errors import ExtractionError
from tablereader.table.fields import coerce_fields
from tablereader.table.iterator import RecordIterator
from tablereader.table.locator import locate


def _iterator(make_grid, rows, fields, **opts):
    fields = coerce_fields(fields)
    loc = locate([make_grid(rows)], fields)
    assert loc is not None
    return RecordIterator(loc, fields, **opts)


BLANK_ROWS = [["Name"], ["A"], ["B"], [], ["C"]]


@pytest.mark.parametrize(
    "policy, expected",
    [
        ("end", [["A"], ["B"]]),
        ("skip", [["A"], ["B"], ["C"]]),
        ("keep", [["A"], ["B"], [None], ["C"]]),
    ],
)
def test_blank_row_policies(make_grid, policy, expected):
    it = _iterator(make_grid, BLANK_ROWS, ["name"], blank_row=policy)
    assert list(it) == expected


def test_records_follow_sheet_order_as_mappings(make_grid, books_rows):
    it = _iterator(make_grid, books_rows, ["title", "isbn"], as_mapping=True)
    records = list(it)
    assert [r["title"] for r in records] == ["Emma", "Jane Eyre", "Crime and Punishment"]
    assert list(records[0]) == ["title", "isbn"]
    assert it.keys == ["title", "isbn"]


def test_sequences_follow_declaration_order(make_grid, books_rows):
    it = _iterator(make_grid, books_rows, ["title", "isbn"])
    assert next(it) == ["Emma", 9780141439518]


def test_trim_and_blank_substitution(make_grid):
    rows = [
        ["Author", "Note"],
        ["  Austen ", "  x "],
        ["   ", " "],
        ["Bronte", None],
    ]
    fields = [
        {"name": "author", "blank": "n/a"},
        {"name": "note", "trim": False, "blank": "-"},
    ]
    assert list(_iterator(make_grid, rows, fields)) == [
        ["Austen", "  x "],
        ["n/a", " "],
        ["Bronte", "-"],
    ]


def test_whitespace_only_row_is_blank_when_trimming(make_grid):
    rows = [["Name"], ["A"], ["   "], ["B"]]
    assert list(_iterator(make_grid, rows, ["name"])) == [["A"]]


def test_missing_optional_field_is_not_emitted(make_grid, books_rows):
    fields = ["isbn", {"name": "publisher", "required": False}]
    it = _iterator(make_grid, books_rows, fields, as_mapping=True)
    assert it.keys == ["isbn"]
    assert next(it) == {"isbn": 9780141439518}


VALIDATED_ROWS = [
    ["Title", "ISBN"],
    ["Emma", 9780141439518],
    ["Jane Eyre", "unknown"],
    ["Persuasion", 9780141439686],
]
VALIDATED_FIELDS = ["title", {"name": "isbn", "isa": "integer"}]


def test_validator_raises_at_exact_cell(make_grid):
    it = _iterator(make_grid, VALIDATED_ROWS, VALIDATED_FIELDS)
    assert next(it) == ["Emma", 9780141439518]
    with pytest.raises(ExtractionError) as excinfo:
        next(it)
    err = excinfo.value
    assert (err.row, err.col) == (2, 1)
    assert err.cell == "B3"
    assert err.field == "isbn"
    assert err.value == "unknown"
    assert "B3" in str(err)
    assert (it.row, it.col) == (2, 1)
    # The failing row has been consumed
    assert next(it) == ["Persuasion", 9780141439686]
    assert it.col == 0


def test_validator_skip_policy(make_grid):
    it = _iterator(make_grid, VALIDATED_ROWS, VALIDATED_FIELDS, on_error="skip")
    assert [r[0] for r in it] == ["Emma", "Persuasion"]


def test_validator_mark_policy(make_grid):
    it = _iterator(make_grid, VALIDATED_ROWS, VALIDATED_FIELDS, on_error="mark")
    records = list(it)
    assert len(records) == 3
    assert isinstance(records[1], ExtractionError)
    assert records[1].cell == "B3"
    assert records[2] == ["Persuasion", 9780141439686]


def test_blank_substitute_is_validated(make_grid):
    rows = [["Title", "ISBN"], ["Emma", None]]
    fields = ["title", {"name": "isbn", "isa": "integer"}]
    it = _iterator(make_grid, rows, fields)
    with pytest.raises(ExtractionError) as excinfo:
        next(it)
    assert excinfo.value.cell == "B2"
    assert excinfo.value.value is None


def test_blank_substitute_passing_validator(make_grid):
    rows = [["Title", "ISBN"], ["Emma", None]]
    fields = ["title", {"name": "isbn", "isa": "integer", "blank": 0}]
    assert list(_iterator(make_grid, rows, fields)) == [["Emma", 0]]


def test_validator_raising_is_marked_not_propagated(make_grid):
    rows = [["Code"], ["12"], [12], ["7"]]
    fields = [{"name": "code", "validator": lambda v: v.isdigit()}]
    records = list(_iterator(make_grid, rows, fields, on_error="mark"))
    assert records[0] == ["12"]
    assert isinstance(records[1], ExtractionError)
    assert records[1].cell == "A3"
    assert records[2] == ["7"]


def test_rewind_restarts_from_first_data_row(make_grid, books_rows):
    it = _iterator(make_grid, books_rows, ["title"])
    assert len(list(it)) == 3
    assert it.remaining == 0
    with pytest.raises(StopIteration):
        next(it)
    assert it.rewind() is True
    assert it.row == 2
    assert next(it) == ["Emma"]


def test_iterators_are_independent(make_grid, books_rows):
    fields = coerce_fields(["title"])
    loc = locate([make_grid(books_rows)], fields)
    first = RecordIterator(loc, fields)
    second = RecordIterator(loc, fields)
    assert next(first) == ["Emma"]
    assert next(first) == ["Jane Eyre"]
    assert next(second) == ["Emma"]
    assert first.row == 4
    assert second.row == 3


def test_end_policy_stops_for_good(make_grid):
    it = _iterator(make_grid, BLANK_ROWS, ["name"])
    assert len(list(it)) == 2
    assert it.remaining == 0
    assert list(it) == []


@pytest.mark.parametrize("opts", [{"blank_row": "stop"}, {"on_error": "ignore"}])
def test_unknown_policy_rejected(make_grid, opts):
    with pytest.raises(ValueError):
        _iterator(make_grid, BLANK_ROWS, ["name"], **opts)
