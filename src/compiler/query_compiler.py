# src/compiler/query_compiler.py

"""
Compile a free-text query into an ordered list of typed filter fragments.

    compile_query("action movies on Netflix rated above 7")
    -> [Movies, Rating: 7+, On: Netflix, Genre: action]

Rules run in table order against a working copy of the text. Each accepted
match is cut out of the working copy, so later rules never see characters an
earlier rule already claimed. The compiler keeps no state between calls.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import List, Optional, Sequence, Tuple

from src.compiler.fragments import Fragment, build_label
from src.compiler.pattern_table import DEFAULT_PATTERN_TABLE, PatternRule, PatternTable

logger = logging.getLogger(__name__)


def _new_id(rule: PatternRule, rule_index: int) -> str:
    return f"{rule.kind.value}-{rule_index}-{uuid.uuid4().hex[:8]}"


def _excise(
    remaining: str,
    positions: List[int],
    spans: Sequence[Tuple[int, int]],
) -> Tuple[str, List[int]]:
    """
    Drop the given (non-overlapping) spans from the working text, keeping
    `positions` aligned so every remaining character still knows its index
    in the original query.
    """
    keep_text: List[str] = []
    keep_positions: List[int] = []
    cursor = 0

    for start, end in sorted(spans):
        keep_text.append(remaining[cursor:start])
        keep_positions.extend(positions[cursor:start])
        cursor = end

    keep_text.append(remaining[cursor:])
    keep_positions.extend(positions[cursor:])

    return "".join(keep_text), keep_positions


class QueryCompiler:
    """
    Pattern table + excision = fragments.

    The table is passed in explicitly so tests (or other catalogs) can use
    their own rules; it defaults to the process-wide table.
    """

    def __init__(self, table: Optional[PatternTable] = None):
        self.table = table if table is not None else DEFAULT_PATTERN_TABLE

    def _build_fragment(
        self,
        rule: PatternRule,
        rule_index: int,
        match: re.Match,
        positions: List[int],
    ) -> Optional[Fragment]:
        try:
            value = rule.extract(match)
            if value is None:
                return None
            label = build_label(rule.kind, value, match)
        except Exception as e:
            logger.warning(
                "Rule #%d (%s) failed on %r, skipping match: %s",
                rule_index, rule.kind.value, match.group(0), e,
            )
            return None

        return Fragment(
            id=_new_id(rule, rule_index),
            kind=rule.kind,
            value=value,
            label=label,
            source_span=match.group(0),
            offsets=tuple(positions[match.start():match.end()]),
        )

    def compile(self, text: Optional[str]) -> List[Fragment]:
        """
        Extract every recognizable phrase from `text`.

        Parameters
        ----------
        text : str
            Raw user input. None or blank input yields no fragments.

        Returns
        -------
        List[Fragment]
            Fragments in creation order: table order first, then left to
            right within a rule. Never raises; noise gives [].
        """
        if not isinstance(text, str) or not text.strip():
            return []

        remaining = text
        positions = list(range(len(text)))
        fragments: List[Fragment] = []

        for rule_index, rule in enumerate(self.table):
            claimed: List[Tuple[int, int]] = []

            for match in rule.matcher.finditer(remaining):
                if match.end() == match.start():
                    continue

                fragment = self._build_fragment(rule, rule_index, match, positions)
                if fragment is None:
                    continue

                fragments.append(fragment)
                claimed.append(match.span())

            if claimed:
                remaining, positions = _excise(remaining, positions, claimed)

        logger.debug(
            "Compiled %d fragment(s) from %r: %s",
            len(fragments), text, [f.label for f in fragments],
        )
        return fragments


def compile_query(text: Optional[str], table: Optional[PatternTable] = None) -> List[Fragment]:
    return QueryCompiler(table).compile(text)
