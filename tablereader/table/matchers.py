"""
Matchers: the closed set of value tests used for header patterns and
field validators.

Every matcher answers ``test(value) -> bool`` and carries a short ``name``
used in log lines and error messages:

  - LiteralMatcher  : text equality, optionally ignoring case / padding
  - RegexMatcher    : ``re.search`` against the value's text
  - PredicateMatcher: arbitrary callable; exceptions count as "no match"
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Pattern, Union

from tablereader.data_cleaner import DataCleaner


class Matcher(ABC):
    """Uniform ``test(value) -> bool`` interface."""

    kind: str = "matcher"

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def test(self, value: Any) -> bool:
        ...

    def is_empty(self) -> bool:
        """``True`` when the matcher has nothing to match against."""
        return False

    def __call__(self, value: Any) -> bool:
        return self.test(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class LiteralMatcher(Matcher):
    kind = "literal"

    def __init__(self, text: str, ignore_case: bool = True, strip: bool = True):
        super().__init__(text)
        self.text = text
        self.ignore_case = ignore_case
        self.strip = strip
        self._expected = self._normalise(text)

    def _normalise(self, text: str) -> str:
        if self.strip:
            text = text.strip()
        if self.ignore_case:
            text = text.casefold()
        return text

    def test(self, value: Any) -> bool:
        return self._normalise(DataCleaner.cell_text(value)) == self._expected

    def is_empty(self) -> bool:
        return self._expected == ""


class RegexMatcher(Matcher):
    kind = "regex"

    def __init__(self, pattern: Union[str, Pattern[str]], name: Optional[str] = None):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        super().__init__(name or self.pattern.pattern)

    def test(self, value: Any) -> bool:
        return self.pattern.search(DataCleaner.cell_text(value)) is not None

    def is_empty(self) -> bool:
        return self.pattern.pattern == ""


class PredicateMatcher(Matcher):
    kind = "predicate"

    def __init__(self, fn: Callable[[Any], Any], name: Optional[str] = None):
        super().__init__(name or getattr(fn, "__name__", "value"))
        self.fn = fn

    def test(self, value: Any) -> bool:
        try:
            return bool(self.fn(value))
        except Exception:
            return False


def as_matcher(spec: Any, name: Optional[str] = None) -> Matcher:
    """
    Coerce *spec* into a matcher.

    ``Matcher`` → itself, ``re.Pattern`` / ``str`` → :class:`RegexMatcher`,
    callable → :class:`PredicateMatcher`.
    """
    if isinstance(spec, Matcher):
        return spec
    if isinstance(spec, (str, re.Pattern)):
        try:
            return RegexMatcher(spec, name=name)
        except re.error as e:
            raise ValueError(f"invalid pattern {spec!r}: {e}") from e
    if callable(spec):
        return PredicateMatcher(spec, name=name)
    raise TypeError(f"Can't build a matcher from {type(spec).__name__}")
