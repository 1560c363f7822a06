# src/compiler/reducer.py

"""
Fold accepted fragments into one filter-state patch.

The patch uses the catalog's discover-API field names:

    {
        "content_type": "movie",
        "primary_release_date": {"start": "2015", "end": "2020"},
        "vote_average": {"min": 7},
        "with_watch_providers": [8],
        "with_genres": [28],
        "watch_region": "US"
    }

Scalars have exactly one writer (the last fragment wins), range objects merge
their bounds independently, and list fields only ever grow.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, List, Optional

from src.compiler.fragments import DateRange, Fragment, FragmentKind, RatingRange

CONTENT_TYPES = ("movie", "tv")

DATE_FIELDS: Dict[str, str] = {
    "movie": "primary_release_date",
    "tv": "first_air_date",
}


@dataclass
class FilterPatch:
    content_type: Optional[str] = None
    primary_release_date: Optional[DateRange] = None
    first_air_date: Optional[DateRange] = None
    vote_average: Optional[RatingRange] = None
    with_watch_providers: List[int] = field(default_factory=list)
    with_genres: List[int] = field(default_factory=list)
    without_genres: List[int] = field(default_factory=list)
    watch_region: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        """
        Only the fields this patch actually sets.
        """
        out: Dict[str, Any] = {}

        if self.content_type is not None:
            out["content_type"] = self.content_type

        for name in ("primary_release_date", "first_air_date", "vote_average"):
            rng = getattr(self, name)
            if rng is not None:
                out[name] = rng.to_dict()

        for name in ("with_watch_providers", "with_genres", "without_genres"):
            values = getattr(self, name)
            if values:
                out[name] = list(values)

        if self.watch_region is not None:
            out["watch_region"] = self.watch_region

        return out


def _merge_date(old: Optional[DateRange], new: DateRange) -> DateRange:
    if old is None:
        return new
    return replace(
        old,
        start=new.start if new.start is not None else old.start,
        end=new.end if new.end is not None else old.end,
    )


def _merge_rating(old: Optional[RatingRange], new: RatingRange) -> RatingRange:
    if old is None:
        return new
    return replace(
        old,
        min=new.min if new.min is not None else old.min,
        max=new.max if new.max is not None else old.max,
    )


def _append_unique(target: List[int], values: Iterable[int]) -> None:
    for v in values:
        if v not in target:
            target.append(v)


# ------------------- Per-kind merge rules -------------------

def _apply_content_type(patch: FilterPatch, fragment: Fragment, content_type: str) -> None:
    patch.content_type = fragment.value


def _apply_year(patch: FilterPatch, fragment: Fragment, content_type: str) -> None:
    # A content type set earlier in the same patch decides the target field.
    target = DATE_FIELDS[patch.content_type or content_type]
    setattr(patch, target, _merge_date(getattr(patch, target), fragment.value))


def _apply_rating(patch: FilterPatch, fragment: Fragment, content_type: str) -> None:
    patch.vote_average = _merge_rating(patch.vote_average, fragment.value)


def _apply_provider(patch: FilterPatch, fragment: Fragment, content_type: str) -> None:
    _append_unique(patch.with_watch_providers, fragment.value)


def _apply_genre(patch: FilterPatch, fragment: Fragment, content_type: str) -> None:
    _append_unique(patch.with_genres, [fragment.value])


def _apply_genre_exclude(patch: FilterPatch, fragment: Fragment, content_type: str) -> None:
    _append_unique(patch.without_genres, [fragment.value])


def _apply_country(patch: FilterPatch, fragment: Fragment, content_type: str) -> None:
    patch.watch_region = fragment.value


Merger = Callable[[FilterPatch, Fragment, str], None]

_MERGERS: Dict[FragmentKind, Merger] = {
    FragmentKind.CONTENT_TYPE: _apply_content_type,
    FragmentKind.YEAR_FROM: _apply_year,
    FragmentKind.YEAR_TO: _apply_year,
    FragmentKind.YEAR_EXACT: _apply_year,
    FragmentKind.YEAR_RANGE: _apply_year,
    FragmentKind.RATING_MIN: _apply_rating,
    FragmentKind.RATING_MAX: _apply_rating,
    FragmentKind.RATING_FLOOR: _apply_rating,
    FragmentKind.RATING_RANGE: _apply_rating,
    FragmentKind.PROVIDER: _apply_provider,
    FragmentKind.GENRE: _apply_genre,
    FragmentKind.GENRE_EXCLUDE: _apply_genre_exclude,
    FragmentKind.COUNTRY: _apply_country,
}

_unhandled = set(FragmentKind) - set(_MERGERS)
if _unhandled:
    raise RuntimeError(f"No reducer rule for fragment kinds: {sorted(k.value for k in _unhandled)}")


# ------------------- Public API -------------------

def reduce_fragments(fragments: Iterable[Fragment], current_content_type: str = "movie") -> FilterPatch:
    """
    Fold fragments, in list order, into a fresh patch.

    Parameters
    ----------
    fragments : iterable of Fragment
        Usually the compiler output minus whatever the user removed.
    current_content_type : {"movie", "tv"}
        Active search context; decides whether years land on the release-date
        or the first-air-date range.

    Returns
    -------
    FilterPatch
        Same input always gives the same patch.
    """
    if current_content_type not in CONTENT_TYPES:
        raise ValueError(
            f"Unknown content type {current_content_type!r}, expected one of {CONTENT_TYPES}"
        )

    patch = FilterPatch()
    for fragment in fragments:
        _MERGERS[fragment.kind](patch, fragment, current_content_type)
    return patch


def remove_fragment(fragments: Iterable[Fragment], fragment_id: str) -> List[Fragment]:
    return [f for f in fragments if f.id != fragment_id]


def merge_patch(state: Optional[Dict[str, Any]], patch: FilterPatch) -> Dict[str, Any]:
    """
    Shallow-merge a patch into a filter-state dict and return the new state.

    Patch scalars and range objects replace what the state had; patch lists
    are unioned into the existing lists, keeping their order. The input state
    is left untouched.
    """
    merged: Dict[str, Any] = dict(state or {})

    for key, value in patch.to_dict().items():
        if isinstance(value, list):
            existing = list(merged.get(key) or [])
            _append_unique(existing, value)
            merged[key] = existing
        else:
            merged[key] = value

    return merged
