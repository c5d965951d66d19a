"""
FieldSpec: immutable description of one logical output column, and
coercion of user-supplied field lists.

    # This
    fields = ["isbn"]

    # becomes this
    fields = [FieldSpec(
        name="isbn",
        header=LiteralMatcher("isbn", ignore_case=True, strip=True),
        required=True,
        trim=True,
        blank=None,
    )]
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from tablereader.errors import FieldSpecError
from tablereader.table.matchers import LiteralMatcher, Matcher, as_matcher
from tablereader.table.validators import as_validator


class FieldSpec(BaseModel):
    """
    One field of a table definition.

    Attributes:
        name: unique identifier within the table definition
        header: matcher deciding "this cell could be this field's header"
        required: the table search fails unless this field gets a column
        trim: strip leading / trailing whitespace from extracted strings
        blank: substitute for empty cells (including whitespace-only when trimming)
        validator: optional matcher applied to every extracted value, blank substitutes included
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    name: str
    header: Matcher
    required: bool = True
    trim: bool = True
    blank: Any = None
    validator: Optional[Matcher] = None

    @model_validator(mode="before")
    @classmethod
    def _default_header(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("header") is None and isinstance(data.get("name"), str):
            data = dict(data)
            data["header"] = LiteralMatcher(data["name"])
        return data

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("field name must be a non-empty string")
        return v

    @field_validator("header", mode="before")
    @classmethod
    def _coerce_header(cls, v: Any) -> Matcher:
        matcher = as_matcher(v)
        if matcher.is_empty():
            raise ValueError("header pattern must not be empty")
        return matcher

    @field_validator("validator", mode="before")
    @classmethod
    def _coerce_validator(cls, v: Any) -> Optional[Matcher]:
        return as_validator(v)

    def matches_header(self, text: str) -> bool:
        return self.header.test(text)


def _field_from_item(item: Any) -> FieldSpec:
    if isinstance(item, FieldSpec):
        return item
    if isinstance(item, str):
        return FieldSpec(name=item)
    if isinstance(item, dict):
        args: Dict[str, Any] = dict(item)
        # "isa" is an alias for the validator attribute
        isa = args.pop("isa", None)
        if args.get("validator") is None and isa is not None:
            args["validator"] = isa
        return FieldSpec(**args)
    raise FieldSpecError(f"Can't coerce {item!r} to a FieldSpec")


def coerce_fields(items: Optional[Sequence[Any]]) -> List[FieldSpec]:
    """
    Build the ordered field list from strings, dicts or ``FieldSpec``s.

    The caller's list is never modified.  Raises :class:`FieldSpecError`
    for an empty list, malformed items or duplicate names.
    """
    if items is None or isinstance(items, (str, bytes, dict)) or not isinstance(items, Sequence):
        raise FieldSpecError("'fields' must be a non-empty list")
    if len(items) == 0:
        raise FieldSpecError("'fields' must be a non-empty list")

    fields: List[FieldSpec] = []
    for item in items:
        try:
            fields.append(_field_from_item(item))
        except (ValidationError, ValueError, TypeError) as e:
            raise FieldSpecError(f"Invalid field definition {item!r}: {e}") from e

    seen = set()
    for f in fields:
        if f.name in seen:
            raise FieldSpecError(f"Duplicate field name '{f.name}'")
        seen.add(f.name)
    return fields
