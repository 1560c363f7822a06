"""Unit tests for the evaluation runner."""

from __future__ import annotations

from scripts.run_eval import evaluate
from src.compiler.query_compiler import QueryCompiler


def test_bad_record_is_reported_and_the_run_continues(capsys) -> None:
    """A record with an unknown content type is scored 0 without stopping the run."""
    records = [
        {"query": "action movies", "content_type": "anime", "expected": []},
        {
            "query": "comedies",
            "content_type": "movie",
            "expected": [{"kind": "genre", "label": "Genre: comedies"}],
        },
    ]

    df = evaluate(records, QueryCompiler())

    assert list(df["query"]) == ["action movies", "comedies"]
    assert list(df["exact_match"]) == [0.0, 1.0]
    assert "error" in df["output"][0]
    assert "[ERROR] Failed on query #1" in capsys.readouterr().out
