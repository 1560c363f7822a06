# scripts/run_eval.py

import os
import sys
import json
from pathlib import Path
from typing import List, Dict, Any

this_file_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(this_file_dir)

if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pandas as pd

from src.compiler.query_compiler import QueryCompiler
from src.compiler.reducer import reduce_fragments
from src.eval.metrics import exact_match, f1, precision, recall
from src.utils.formatting import fragment_rows


def load_eval_queries(path: Path) -> List[Dict[str, Any]]:
    """
    Load evaluation queries from a JSON file.

    Expected format (eval_queries.json):

    [
      {
        "query": "horror movies before 2010 rated 7+",
        "content_type": "movie",
        "expected": [
          {"kind": "content_type", "label": "Movies"},
          {"kind": "year_to", "label": "Until: 2010"},
          ...
        ]
      },
      ...
    ]
    """
    if not path.exists():
        raise FileNotFoundError(f"Could not find evaluation file at: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError("Expected eval_queries.json to contain a list of objects.")

    return data


def _pairs(items: List[Dict[str, Any]]) -> List[tuple]:
    return [(item.get("kind", ""), item.get("label", "")) for item in items]


def evaluate(records: List[Dict[str, Any]], compiler: QueryCompiler) -> pd.DataFrame:
    """
    Compile every query and score its (kind, label) pairs against the gold ones.

    Returns one row per query, plus an "output" column with what was extracted.
    """
    rows = []

    for idx, rec in enumerate(records, start=1):
        query = rec.get("query", "")
        content_type = rec.get("content_type", "movie")
        gold = _pairs(rec.get("expected") or [])

        try:
            fragments = compiler.compile(query)
            patch = reduce_fragments(fragments, content_type)
        except Exception as e:
            print(f"[ERROR] Failed on query #{idx}: {e}")
            rows.append({
                "query": query,
                "precision": 0.0,
                "recall": 0.0,
                "f1": 0.0,
                "exact_match": 0.0,
                "output": {"error": str(e)},
            })
            continue

        predicted = [(f.kind.value, f.label) for f in fragments]

        rows.append({
            "query": query,
            "precision": precision(predicted, gold),
            "recall": recall(predicted, gold),
            "f1": f1(predicted, gold),
            "exact_match": exact_match(predicted, gold),
            "output": {
                "fragments": fragment_rows(fragments),
                "patch": patch.to_dict(),
            },
        })

    return pd.DataFrame(rows)


def main():
    eval_dir = Path(project_root) / "data" / "eval"
    queries_path = eval_dir / "eval_queries.json"
    outputs_path = eval_dir / "parse_outputs.jsonl"

    print(f"[INFO] Loading evaluation queries from: {queries_path}")
    records = load_eval_queries(queries_path)
    print(f"[INFO] Loaded {len(records)} evaluation queries")

    df = evaluate(records, QueryCompiler())

    with outputs_path.open("w", encoding="utf-8") as out_f:
        for row in df.to_dict(orient="records"):
            out_f.write(json.dumps(row, ensure_ascii=False) + "\n")

    scores = df[["precision", "recall", "f1", "exact_match"]]
    print("\nPer-query scores:")
    print(pd.concat([df["query"], scores], axis=1).to_string(index=False))
    print("\nMean scores:")
    print(scores.mean().round(3).to_string())

    failures = df[df["exact_match"] < 1.0]
    if not failures.empty:
        print(f"\n[ERROR] {len(failures)} query(ies) did not match the gold fragments:")
        for q in failures["query"]:
            print(f"  - {q}")

    print(f"\n[INFO] Saved parse outputs to:\n  - {outputs_path}")


if __name__ == "__main__":
    main()
