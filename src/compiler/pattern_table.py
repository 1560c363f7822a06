# src/compiler/pattern_table.py

"""
Declarative pattern table for the natural-language filter compiler.

Every phrase shape the compiler understands is declared here, in one place,
as a rule pairing a regular expression with a fragment kind and a way to get
a value out of the match.

Currently supports:
- Content type:  "movies", "films", "tv shows", "series"
- Years:         "from 2015", "before 2010", "in 2020", "2010-2019"
- Ratings:       "rated above 7", "rated under 5", "rated between 6 and 8",
                 "rating of at least 7", "rated 8+"
- Providers:     "on Netflix", "on Disney+", "on Prime", "on HBO", ...
- Genres:        "action", "comedies", "sci-fi", "no horror", ...
- Regions:       "in the US", "in UK", "in Japan", ...

Rule order matters: the compiler runs rules top to bottom and every accepted
match removes its text from the query, so earlier rules win overlaps.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from src.compiler.fragments import DateRange, FragmentKind, FragmentValue, RatingRange


class PatternTableError(ValueError):
    """Raised when the pattern table itself is malformed."""


class DuplicateRuleError(PatternTableError):
    """Raised when two rules share the same kind and the same matcher."""


Extractor = Callable[[re.Match], Optional[FragmentValue]]


@dataclass(frozen=True)
class PatternRule:
    """
    One recognizable phrase shape.

    The extractor returns None to reject a match that is syntactically fine
    but carries no usable value (unknown genre word, rating out of scale...).
    Rules without an extractor always produce `static_value`.
    """
    matcher: re.Pattern
    kind: FragmentKind
    extractor: Optional[Extractor] = None
    static_value: Optional[FragmentValue] = None

    def extract(self, match: re.Match) -> Optional[FragmentValue]:
        if self.extractor is not None:
            return self.extractor(match)
        return self.static_value


class PatternTable:
    """
    Immutable, ordered collection of pattern rules.

    Construction fails fast on programming errors in the table:
    duplicated rules or rules that can never produce a value.
    """

    def __init__(self, rules: Iterable[PatternRule]):
        rules = tuple(rules)
        seen: Dict[Tuple[FragmentKind, str, int], int] = {}

        for index, rule in enumerate(rules):
            if rule.extractor is None and rule.static_value is None:
                raise PatternTableError(
                    f"Rule #{index} ({rule.kind.value}) has neither an extractor nor a static value."
                )

            key = (rule.kind, rule.matcher.pattern, rule.matcher.flags)
            if key in seen:
                raise DuplicateRuleError(
                    f"Rule #{index} duplicates rule #{seen[key]}: "
                    f"{rule.kind.value} /{rule.matcher.pattern}/"
                )
            seen[key] = index

        self._rules: Tuple[PatternRule, ...] = rules

    @property
    def rules(self) -> Tuple[PatternRule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[PatternRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index: int) -> PatternRule:
        return self._rules[index]

    def describe(self) -> List[Dict[str, Any]]:
        """
        Plain rows describing each rule, in table order (used by the UI).
        """
        rows: List[Dict[str, Any]] = []
        for index, rule in enumerate(self._rules):
            rows.append({
                "order": index,
                "kind": rule.kind.value,
                "pattern": rule.matcher.pattern,
                "value": "" if rule.static_value is None else str(rule.static_value),
            })
        return rows


# ------------------- Lookup maps -------------------

GENRE_IDS: Dict[str, int] = {
    "action": 28,
    "thriller": 53,
    "comedy": 35,
    "drama": 18,
    "horror": 27,
    "scifi": 878,
    "science fiction": 878,
    "romance": 10749,
    "documentary": 99,
    "animation": 16,
    "animated": 16,
    "crime": 80,
    "family": 10751,
    "fantasy": 14,
    "history": 36,
    "music": 10402,
    "mystery": 9648,
    "war": 10752,
    "western": 37,
}

GENRE_WORDS = (
    r"science\s+fiction|sci-?fi|action|thrillers?|comed(?:y|ies)|dramas?|horror|"
    r"romances?|documentar(?:y|ies)|animation|animated|crime|family|fantasy|"
    r"history|music|myster(?:y|ies)|war|westerns?"
)

PROVIDER_IDS: Dict[str, int] = {
    "netflix": 8,
    "disney_plus": 337,
    "amazon_prime_video": 119,
    "hbo_max": 384,
    "hulu": 15,
    "apple_tv_plus": 350,
}

SAMPLE_QUERIES: List[str] = [
    "action movies from 2020 on Netflix rated above 7",
    "comedy series since 2010 with high ratings",
    "thriller movies on HBO rated 8+",
    "animated films on Disney+ rated above 6",
    "sci-fi shows since 2015 on Amazon Prime",
    "documentaries in 2020 in the US",
    "drama series in Korea rated above 8",
    "horror movies before 2010 rated 7+",
]

_NUMBER = r"(\d+(?:\.\d+)?)"


# ------------------- Extractors -------------------

def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_float(value: Optional[str]) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_year(value: Optional[str]) -> Optional[str]:
    """
    Keep the year as typed ("2015") but only if it really is a 4-digit number.
    """
    if value is None or len(value) != 4 or _parse_int(value) is None:
        return None
    return value


def _parse_rating(value: Optional[str]) -> Optional[float]:
    v = _parse_float(value)
    if v is None or not 0.0 <= v <= 10.0:
        return None
    return v


def normalize_genre(text: str) -> str:
    """
    Fold a matched genre word onto its lookup key:
    "Comedies" -> "comedy", "Sci-Fi" -> "scifi", "Thrillers" -> "thriller".
    """
    key = re.sub(r"\s+", " ", (text or "").strip().casefold())
    key = key.replace("-", "")
    key = re.sub(r"ies$", "y", key)
    key = re.sub(r"s$", "", key)
    return key


def _year_from(match: re.Match) -> Optional[DateRange]:
    start = _parse_year(match.group(2))
    return DateRange(start=start) if start else None


def _year_to(match: re.Match) -> Optional[DateRange]:
    end = _parse_year(match.group(2))
    return DateRange(end=end) if end else None


def _year_exact(match: re.Match) -> Optional[DateRange]:
    year = _parse_year(match.group(1))
    return DateRange(start=year, end=year) if year else None


def _year_range(match: re.Match) -> Optional[DateRange]:
    start = _parse_year(match.group(1))
    end = _parse_year(match.group(2))
    if not start or not end or start > end:
        return None
    return DateRange(start=start, end=end)


def _rating_min(match: re.Match) -> Optional[RatingRange]:
    v = _parse_rating(match.group(match.lastindex))
    return RatingRange(min=v) if v is not None else None


def _rating_max(match: re.Match) -> Optional[RatingRange]:
    v = _parse_rating(match.group(match.lastindex))
    return RatingRange(max=v) if v is not None else None


def _rating_range(match: re.Match) -> Optional[RatingRange]:
    low = _parse_rating(match.group(1))
    high = _parse_rating(match.group(2))
    if low is None or high is None or low > high:
        return None
    return RatingRange(min=low, max=high)


def _genre(match: re.Match) -> Optional[int]:
    return GENRE_IDS.get(normalize_genre(match.group(match.lastindex or 0)))


# ------------------- Table -------------------

def _rule(
    pattern: str,
    kind: FragmentKind,
    extractor: Optional[Extractor] = None,
    value: Optional[FragmentValue] = None,
) -> PatternRule:
    return PatternRule(
        matcher=re.compile(pattern, re.IGNORECASE),
        kind=kind,
        extractor=extractor,
        static_value=value,
    )


def build_default_rules() -> List[PatternRule]:
    """
    The rules of record, in evaluation order.
    """
    K = FragmentKind

    return [
        # content type
        _rule(r"\b(movies?|films?)\b", K.CONTENT_TYPE, value="movie"),
        _rule(r"\b(tv\s+shows?|tv\s+series|series|television|shows)\b", K.CONTENT_TYPE, value="tv"),

        # years
        _rule(r"\b(from|since|after)\s+(\d{4})\b", K.YEAR_FROM, _year_from),
        _rule(r"\b(before|until)\s+(\d{4})\b", K.YEAR_TO, _year_to),
        _rule(r"\bin\s+(\d{4})\b", K.YEAR_EXACT, _year_exact),
        _rule(r"\b(\d{4})-(\d{4})\b", K.YEAR_RANGE, _year_range),

        # ratings
        _rule(rf"\brated?\s+(above|over|more than|>)\s*{_NUMBER}\b", K.RATING_MIN, _rating_min),
        _rule(rf"\brated?\s+(below|under|less than|<)\s*{_NUMBER}\b", K.RATING_MAX, _rating_max),
        _rule(
            rf"\brated?\s+(?:between\s+)?{_NUMBER}\s*(?:-|to|and)\s*{_NUMBER}\b",
            K.RATING_RANGE,
            _rating_range,
        ),
        _rule(
            rf"\b(?:rated|rating)\s+(?:of\s+)?(at least|minimum(?:\s+of)?)\s+{_NUMBER}\b",
            K.RATING_FLOOR,
            _rating_min,
        ),
        _rule(rf"\brated?\s*{_NUMBER}\+", K.RATING_MIN, _rating_min),

        # streaming providers
        _rule(r"\bon\s+(netflix)\b", K.PROVIDER, value=(PROVIDER_IDS["netflix"],)),
        _rule(
            r"\bon\s+(disney\s*(?:\+|plus)|disney)(?!\w)",
            K.PROVIDER,
            value=(PROVIDER_IDS["disney_plus"],),
        ),
        _rule(
            r"\bon\s+(amazon\s+prime\s+video|amazon\s+prime|prime\s+video|amazon|prime)\b",
            K.PROVIDER,
            value=(PROVIDER_IDS["amazon_prime_video"],),
        ),
        _rule(r"\bon\s+(hbo\s+max|hbo)\b", K.PROVIDER, value=(PROVIDER_IDS["hbo_max"],)),
        _rule(r"\bon\s+(hulu)\b", K.PROVIDER, value=(PROVIDER_IDS["hulu"],)),
        _rule(
            r"\bon\s+(apple\s+tv\s*(?:\+|plus)|apple\s+tv)(?!\w)",
            K.PROVIDER,
            value=(PROVIDER_IDS["apple_tv_plus"],),
        ),

        # genres, exclusions first so "no horror" is not read as horror
        _rule(rf"\b(?:no|without|not|except)\s+({GENRE_WORDS})\b", K.GENRE_EXCLUDE, _genre),
        _rule(rf"\b({GENRE_WORDS})\b", K.GENRE, _genre),

        # regions
        _rule(r"\bin\s+(?:the\s+)?(usa|us|america|united\s+states)\b", K.COUNTRY, value="US"),
        _rule(
            r"\bin\s+(?:the\s+)?(uk|great\s+britain|britain|united\s+kingdom)\b",
            K.COUNTRY,
            value="GB",
        ),
        _rule(r"\bin\s+(india)\b", K.COUNTRY, value="IN"),
        _rule(r"\bin\s+(japan)\b", K.COUNTRY, value="JP"),
        _rule(r"\bin\s+(south\s+korea|korea)\b", K.COUNTRY, value="KR"),
        _rule(r"\bin\s+(france)\b", K.COUNTRY, value="FR"),
        _rule(r"\bin\s+(germany)\b", K.COUNTRY, value="DE"),
        _rule(r"\bin\s+(canada)\b", K.COUNTRY, value="CA"),
    ]


DEFAULT_PATTERN_TABLE = PatternTable(build_default_rules())
