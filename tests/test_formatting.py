"""Unit tests for text formatting helpers."""

from __future__ import annotations

import json

from src.compiler.query_compiler import QueryCompiler
from src.compiler.reducer import FilterPatch, reduce_fragments
from src.utils.formatting import format_fragments, format_patch, fragment_rows


def test_format_fragments_numbers_each_chip() -> None:
    """Each fragment gets a numbered line with its source text."""
    fragments = QueryCompiler().compile("movies rated 7+")

    assert format_fragments(fragments) == '1. Movies  <- "movies"\n2. Rating: 7+  <- "rated 7+"'
    assert format_fragments(fragments, show_source=False) == "1. Movies\n2. Rating: 7+"


def test_format_fragments_empty() -> None:
    """No fragments gives a readable placeholder."""
    assert format_fragments([]) == "(no filters detected)"


def test_fragment_rows_are_flat() -> None:
    """Rows carry the kind as its plain string value."""
    fragment = QueryCompiler().compile("on Netflix")[0]

    assert fragment_rows([fragment]) == [{
        "id": fragment.id,
        "kind": "provider",
        "label": "On: Netflix",
        "source": "on Netflix",
    }]


def test_format_patch_is_json() -> None:
    """Patches print as sorted JSON; empty ones as {}."""
    patch = reduce_fragments(QueryCompiler().compile("action in Japan"), "movie")

    assert json.loads(format_patch(patch)) == {"with_genres": [28], "watch_region": "JP"}
    assert format_patch(FilterPatch()) == "{}"
