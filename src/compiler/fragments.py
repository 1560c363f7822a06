# src/compiler/fragments.py

"""
Typed fragments produced by the query compiler.

A fragment is one recognized phrase of the user's query, e.g. "rated above 7",
already converted into a typed value and a short label for display:

    Fragment(kind=FragmentKind.RATING_MIN, value=RatingRange(min=7.0), label="Rating: 7+")

Fragments are immutable and only live for one compile-and-reduce cycle.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class FragmentKind(str, Enum):
    CONTENT_TYPE = "content_type"
    YEAR_FROM = "year_from"
    YEAR_TO = "year_to"
    YEAR_EXACT = "year_exact"
    YEAR_RANGE = "year_range"
    RATING_MIN = "rating_min"
    RATING_MAX = "rating_max"
    RATING_FLOOR = "rating_floor"
    RATING_RANGE = "rating_range"
    PROVIDER = "provider"
    GENRE = "genre"
    GENRE_EXCLUDE = "genre_exclude"
    COUNTRY = "country"


YEAR_KINDS = frozenset({
    FragmentKind.YEAR_FROM,
    FragmentKind.YEAR_TO,
    FragmentKind.YEAR_EXACT,
    FragmentKind.YEAR_RANGE,
})

RATING_KINDS = frozenset({
    FragmentKind.RATING_MIN,
    FragmentKind.RATING_MAX,
    FragmentKind.RATING_FLOOR,
    FragmentKind.RATING_RANGE,
})


@dataclass(frozen=True)
class DateRange:
    """Year bounds as four-digit strings, either side optional."""
    start: Optional[str] = None
    end: Optional[str] = None

    def to_dict(self) -> dict:
        out = {}
        if self.start is not None:
            out["start"] = self.start
        if self.end is not None:
            out["end"] = self.end
        return out


@dataclass(frozen=True)
class RatingRange:
    """Vote-average bounds on the catalog's 0-10 scale."""
    min: Optional[float] = None
    max: Optional[float] = None

    def to_dict(self) -> dict:
        out = {}
        if self.min is not None:
            out["min"] = self.min
        if self.max is not None:
            out["max"] = self.max
        return out


FragmentValue = Union[str, int, Tuple[int, ...], DateRange, RatingRange]


@dataclass(frozen=True)
class Fragment:
    id: str
    kind: FragmentKind
    value: FragmentValue
    label: str
    source_span: str
    offsets: Tuple[int, ...] = ()
    removable: bool = True

    @property
    def start(self) -> int:
        return self.offsets[0] if self.offsets else -1

    @property
    def end(self) -> int:
        return self.offsets[-1] + 1 if self.offsets else -1

    def signature(self) -> tuple:
        """Everything except the id; equal for re-parses of the same text."""
        return (self.kind, self.value, self.label, self.source_span)


def format_number(value: float) -> str:
    """
    Render a rating the way it was typed: 7.0 -> "7", 7.5 -> "7.5".
    """
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def build_label(kind: FragmentKind, value: FragmentValue, match: re.Match) -> str:
    """
    Human-readable description of what the fragment will do to the filters.

    Falls back to the matched text when the value carries nothing to show.
    """
    if kind is FragmentKind.CONTENT_TYPE:
        return "Movies" if value == "movie" else "TV Shows"

    if kind in YEAR_KINDS:
        start, end = value.start, value.end
        if kind is FragmentKind.YEAR_EXACT and start is not None:
            return f"Year: {start}"
        if kind is FragmentKind.YEAR_RANGE and start is not None and end is not None:
            return f"Years: {start}-{end}"
        if kind is FragmentKind.YEAR_FROM and start is not None:
            return f"Since: {start}"
        if kind is FragmentKind.YEAR_TO and end is not None:
            return f"Until: {end}"

    if kind in RATING_KINDS:
        low, high = value.min, value.max
        if kind is FragmentKind.RATING_RANGE and low is not None and high is not None:
            return f"Rating: {format_number(low)}-{format_number(high)}"
        if kind in (FragmentKind.RATING_MIN, FragmentKind.RATING_FLOOR) and low is not None:
            return f"Rating: {format_number(low)}+"
        if kind is FragmentKind.RATING_MAX and high is not None:
            return f"Rating: <{format_number(high)}"

    if kind is FragmentKind.PROVIDER:
        return f"On: {match.group(1)}"

    if kind is FragmentKind.GENRE:
        return f"Genre: {match.group(0)}"

    if kind is FragmentKind.GENRE_EXCLUDE:
        return f"Exclude: {match.group(1)}"

    if kind is FragmentKind.COUNTRY:
        return f"Region: {value}"

    return match.group(0)
