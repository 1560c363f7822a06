# ui/pages/1_Pattern_Table.py

import os
import sys
import json
from collections import Counter
from pathlib import Path
from typing import List, Dict, Any

import streamlit as st
import matplotlib.pyplot as plt
import pandas as pd

this_file_dir = os.path.dirname(os.path.abspath(__file__))
ui_dir = os.path.dirname(this_file_dir)
project_root = os.path.dirname(ui_dir)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from src.compiler.pattern_table import DEFAULT_PATTERN_TABLE
from src.service.filter_search_service import FilterSearchService

if "service" not in st.session_state:
    st.session_state["service"] = FilterSearchService()

service: FilterSearchService = st.session_state["service"]

EVAL_OUTPUTS = Path(project_root) / "data" / "eval" / "parse_outputs.jsonl"


@st.cache_data(show_spinner=False)
def load_eval_outputs(path: str) -> List[Dict[str, Any]]:
    """
    Read the JSONL written by scripts/run_eval.py; missing or broken files give [].
    """
    p = Path(path)
    if not p.exists():
        return []

    rows: List[Dict[str, Any]] = []
    try:
        with p.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    rows.append(json.loads(line))
    except (OSError, json.JSONDecodeError):
        return []
    return rows


st.title("🧩 Pattern Table")
st.write(
    """
Every phrase shape the search box understands, in evaluation order.
Earlier rules claim their text first, so order decides overlaps.
"""
)

st.dataframe(pd.DataFrame(DEFAULT_PATTERN_TABLE.describe()), use_container_width=True)

st.markdown("---")

st.subheader("🏷️ Detected fragment kinds (this session)")

parse_stats = service.get_parse_stats()

if not parse_stats:
    st.info(
        "No searches parsed yet in this session. "
        "Type a query in the main app first."
    )
else:
    items = sorted(parse_stats.items(), key=lambda x: x[1], reverse=True)
    df_counts = pd.DataFrame(items, columns=["Kind", "Times detected"])
    st.table(df_counts)

st.markdown("---")

st.subheader("📊 Evaluation run")

outputs = load_eval_outputs(str(EVAL_OUTPUTS))

if not outputs:
    st.info("No evaluation outputs found. Run `python scripts/run_eval.py` first.")
else:
    df = pd.DataFrame(outputs)
    scores = df[["precision", "recall", "f1", "exact_match"]]

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Queries", len(df))
        st.metric("Exact matches", int(scores["exact_match"].sum()))
    with col2:
        st.metric("Mean precision", f"{scores['precision'].mean():.2f}")
        st.metric("Mean recall", f"{scores['recall'].mean():.2f}")

    kind_counter = Counter()
    for out in df["output"]:
        for fragment in (out or {}).get("fragments", []):
            kind_counter[fragment.get("kind", "")] += 1

    if kind_counter:
        labels = [k for k, _ in kind_counter.most_common()]
        values = [c for _, c in kind_counter.most_common()]

        fig, ax = plt.subplots(figsize=(8, 4))
        ax.bar(labels, values)
        ax.set_ylabel("Count")
        ax.set_title("Fragments per kind in the evaluation set")
        ax.tick_params(axis="x", rotation=45, labelsize=8)
        st.pyplot(fig)

    st.dataframe(pd.concat([df["query"], scores], axis=1), use_container_width=True)
