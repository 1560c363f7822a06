# src/service/filter_search_service.py

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from src.compiler.fragments import Fragment
from src.compiler.pattern_table import PatternTable
from src.compiler.query_compiler import QueryCompiler
from src.compiler.reducer import CONTENT_TYPES, FilterPatch, merge_patch, reduce_fragments, remove_fragment

logger = logging.getLogger(__name__)


class FilterSearchService:
    """
    High-level facade used by the Streamlit UI.

    Responsibilities:
    - Hold one QueryCompiler for the default pattern table so it is built
      only once per process.
    - Keep one editing session: the current text and the detected chips,
      which the user may remove one by one before applying.
    - Own the filter state the chips are applied to.
    - Track lightweight parse statistics for the Pattern Table page.
    """

    _compiler: Optional[QueryCompiler] = None

    def __init__(
        self,
        table: Optional[PatternTable] = None,
        content_type: str = "movie",
        filter_state: Optional[Dict[str, Any]] = None,
    ):
        if content_type not in CONTENT_TYPES:
            raise ValueError(f"Unknown content type {content_type!r}, expected one of {CONTENT_TYPES}")

        if table is not None:
            self.compiler = QueryCompiler(table)
        else:
            if FilterSearchService._compiler is None:
                FilterSearchService._compiler = QueryCompiler()
            self.compiler = FilterSearchService._compiler

        self.content_type = content_type
        self.query: str = ""
        self.chips: List[Fragment] = []

        self._filter_state: Dict[str, Any] = dict(filter_state or {})
        self._kind_counts: Counter[str] = Counter()

    # ------------------- Public API -------------------

    def parse(self, query: Optional[str]) -> List[Fragment]:
        """
        Recompile the chips from scratch for a new query text.
        Older chips are discarded, even ones the user removed.
        """
        self.query = query or ""
        self.chips = self.compiler.compile(self.query)

        for chip in self.chips:
            self._kind_counts[chip.kind.value] += 1

        return list(self.chips)

    def remove_chip(self, chip_id: str) -> List[Fragment]:
        before = len(self.chips)
        self.chips = remove_fragment(self.chips, chip_id)
        if len(self.chips) == before:
            logger.debug("No chip with id %s to remove", chip_id)
        return list(self.chips)

    def clear(self) -> None:
        self.query = ""
        self.chips = []

    def set_content_type(self, content_type: str) -> None:
        if content_type not in CONTENT_TYPES:
            raise ValueError(f"Unknown content type {content_type!r}, expected one of {CONTENT_TYPES}")
        self.content_type = content_type

    def build_patch(self) -> FilterPatch:
        return reduce_fragments(self.chips, self.content_type)

    def apply(self) -> FilterPatch:
        """
        Reduce the current chips and merge the patch into the filter state.

        Applying with no chips leaves the state as it was.
        """
        patch = self.build_patch()
        if patch.is_empty():
            return patch

        self._filter_state = merge_patch(self._filter_state, patch)
        if patch.content_type is not None:
            self.content_type = patch.content_type

        logger.info("Applied %d chip(s): %s", len(self.chips), patch.to_dict())
        return patch

    # ------------------- Analytics helpers -------------------

    def get_filter_state(self) -> Dict[str, Any]:
        return dict(self._filter_state)

    def reset_filter_state(self) -> None:
        self._filter_state = {}

    def get_parse_stats(self) -> Dict[str, int]:
        return dict(self._kind_counts)
