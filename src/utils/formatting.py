# src/utils/formatting.py

"""
Formatting utilities for:
- listing detected fragments ("chips") as plain text
- printing a filter-state patch in a stable, readable way

Used by the scripts and the debug panels of the UI.
"""

import json
from typing import Any, Dict, List

from src.compiler.fragments import Fragment
from src.compiler.reducer import FilterPatch


def format_fragments(fragments: List[Fragment], show_source: bool = True) -> str:
    """
    Convert fragments into a numbered list, one per line:

    1. Movies  <- "movies"
    2. Rating: 7+  <- "rated above 7"

    An empty list gives "(no filters detected)".
    """
    if not fragments:
        return "(no filters detected)"

    lines = []
    for i, fragment in enumerate(fragments, start=1):
        line = f"{i}. {fragment.label}"
        if show_source:
            line += f'  <- "{fragment.source_span.strip()}"'
        lines.append(line)

    return "\n".join(lines)


def fragment_rows(fragments: List[Fragment]) -> List[Dict[str, Any]]:
    """
    Flat dict rows (id, kind, label, matched text) for tables and JSONL logs.
    """
    rows = []
    for fragment in fragments:
        rows.append({
            "id": fragment.id,
            "kind": fragment.kind.value,
            "label": fragment.label,
            "source": fragment.source_span,
        })
    return rows


def format_patch(patch: FilterPatch) -> str:
    data = patch.to_dict()
    if not data:
        return "{}"
    return json.dumps(data, indent=2, sort_keys=True)
