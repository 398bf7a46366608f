"""
domain/postal_code.py
──────────────────────────────────────────────────────────────────────────────
Postal code matching against included / excluded patterns.

Two pattern syntaxes are supported:

  Regular expression   "/(35|38)[0-9]{3}/"
      Wrapped in slashes.  Searched anywhere in the postal code.

  Code list            "98, 100:200, 250"
      Comma-separated literal codes and inclusive A:B ranges.  When both
      bounds are numeric the postal code is compared as an integer, so
      zero-padded codes ("01000:01999") work as expected.  Otherwise the
      bounds are compared lexicographically.

Precedence:
  1. excluded matches → False (regardless of included)
  2. included given   → whether it matches
  3. neither          → True

A pattern string is parsed ONCE into a tagged variant (RegexPattern or
CodeListPattern) and memoised, so repeated matching never re-sniffs or
recompiles it.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from addressing.domain.exceptions import PatternError

logger = logging.getLogger(__name__)

_REGEX_DELIMITER = "/"
_LIST_SEPARATOR = ","
_RANGE_SEPARATOR = ":"


def _is_ascii_number(value: str) -> bool:
    # str.isdigit() also accepts superscripts and other digits int() rejects.
    return value.isascii() and value.isdigit()


# ── Parsed pattern variants ────────────────────────────────────────────────

@dataclass(frozen=True)
class RegexPattern:
    """A compiled regular-expression pattern."""

    regex: re.Pattern

    def matches(self, postal_code: str) -> bool:
        return self.regex.search(postal_code) is not None


@dataclass(frozen=True)
class CodeRange:
    """An inclusive A:B range of postal codes."""

    start: str
    end: str

    @property
    def numeric(self) -> bool:
        return _is_ascii_number(self.start) and _is_ascii_number(self.end)

    def contains(self, postal_code: str) -> bool:
        if self.numeric:
            if not _is_ascii_number(postal_code):
                return False
            return int(self.start) <= int(postal_code) <= int(self.end)
        return self.start <= postal_code <= self.end


@dataclass(frozen=True)
class CodeListPattern:
    """A comma-separated list of literal codes and ranges."""

    codes: frozenset[str]
    ranges: tuple[CodeRange, ...]

    def matches(self, postal_code: str) -> bool:
        if postal_code in self.codes:
            return True
        return any(r.contains(postal_code) for r in self.ranges)


PostalCodePattern = Union[RegexPattern, CodeListPattern]


# ── Parsing ────────────────────────────────────────────────────────────────

@lru_cache(maxsize=512)
def parse_postal_code_pattern(pattern: str) -> PostalCodePattern:
    """Parse a pattern string into its tagged variant.

    Args:
        pattern: "/regex/" or a comma-separated code/range list.

    Returns:
        RegexPattern or CodeListPattern.

    Raises:
        PatternError: If the regex does not compile, or a range token is
                      malformed (e.g. "1:2:3" or ":5").

    Examples:
        >>> parse_postal_code_pattern("98, 100:200").matches("150")
        True
        >>> parse_postal_code_pattern("/^35/").matches("35123")
        True
    """
    stripped = pattern.strip()
    if (
        len(stripped) >= 2
        and stripped.startswith(_REGEX_DELIMITER)
        and stripped.endswith(_REGEX_DELIMITER)
    ):
        try:
            regex = re.compile(stripped[1:-1])
        except re.error as exc:
            raise PatternError(f"Invalid postal code regex {pattern!r}: {exc}") from exc
        return RegexPattern(regex=regex)

    codes: set[str] = set()
    ranges: list[CodeRange] = []
    for token in stripped.split(_LIST_SEPARATOR):
        token = token.strip()
        if not token:
            continue
        if _RANGE_SEPARATOR not in token:
            codes.add(token)
            continue
        bounds = [b.strip() for b in token.split(_RANGE_SEPARATOR)]
        if len(bounds) != 2 or not all(bounds):
            raise PatternError(
                f"Invalid postal code range {token!r} in pattern {pattern!r}"
            )
        ranges.append(CodeRange(start=bounds[0], end=bounds[1]))

    logger.debug(
        "Parsed postal code list | codes=%d ranges=%d", len(codes), len(ranges)
    )
    return CodeListPattern(codes=frozenset(codes), ranges=tuple(ranges))


# ── Pure function: matching ────────────────────────────────────────────────

def match_postal_code(
    postal_code: str | None,
    included: str | None = None,
    excluded: str | None = None,
) -> bool:
    """Check a postal code against included / excluded patterns.

    An empty postal code only passes when there is no constraint at all.

    Raises:
        PatternError: If either pattern is malformed.
    """
    if not included and not excluded:
        return True
    if not postal_code:
        return False

    # Exclusion has priority.
    if excluded and parse_postal_code_pattern(excluded).matches(postal_code):
        return False
    if included:
        return parse_postal_code_pattern(included).matches(postal_code)
    return True
