# ui/app.py

from __future__ import annotations

import os
import sys
from typing import List

THIS_FILE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_FILE_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st

from src.compiler.fragments import Fragment
from src.compiler.pattern_table import SAMPLE_QUERIES
from src.service.filter_search_service import FilterSearchService
from src.utils.formatting import format_patch, fragment_rows

st.set_page_config(
    page_title="Smart Search",
    page_icon="🎬",
    layout="wide",
)

if "service" not in st.session_state:
    st.session_state["service"] = FilterSearchService()
service: FilterSearchService = st.session_state["service"]

st.session_state.setdefault("query", "")
st.session_state.setdefault("last_patch", None)

st.sidebar.header("⚙️ Settings")

st.session_state.setdefault("content_label", "Movies" if service.content_type == "movie" else "TV Shows")

content_label = st.sidebar.radio(
    "Searching",
    ["Movies", "TV Shows"],
    key="content_label",
)
service.set_content_type("movie" if content_label == "Movies" else "tv")

show_debug = st.sidebar.checkbox("Show debug panels", value=False)

st.sidebar.markdown(
    """
**You can type things like:**
- *"action movies from 2020 on Netflix rated above 7"*
- *"comedy series since 2010 no horror"*
- *"films rated between 6 and 8 in Japan"*
"""
)

if st.sidebar.button("🔄 Reset filters"):
    service.reset_filter_state()
    st.session_state["last_patch"] = None


def _use_sample(sample: str) -> None:
    st.session_state["query"] = sample


def _apply() -> None:
    st.session_state["last_patch"] = service.apply()
    st.session_state["content_label"] = "Movies" if service.content_type == "movie" else "TV Shows"


def _clear_all() -> None:
    st.session_state["query"] = ""
    service.clear()


def render_chips(chips: List[Fragment]) -> None:
    """
    One small button per chip; clicking it removes the chip.
    """
    cols = st.columns(min(len(chips), 4))
    for i, chip in enumerate(chips):
        with cols[i % len(cols)]:
            if st.button(f"✕ {chip.label}", key=f"remove-chip-{chip.id}", help=f'from "{chip.source_span.strip()}"'):
                service.remove_chip(chip.id)
                st.rerun()


st.title("🎬 Smart Search")
st.write("Describe what you want to watch and the detected filters will show up below.")

query = st.text_input(
    "Search",
    key="query",
    placeholder='Search like: "action movies from 2020 on Netflix rated above 7"',
)

if not query:
    st.caption("Try:")
    sample_cols = st.columns(3)
    for i, sample in enumerate(SAMPLE_QUERIES[:3]):
        with sample_cols[i]:
            st.button(f'"{sample}"', key=f"suggestion-{i}", on_click=_use_sample, args=(sample,))

# text_input only commits on enter / blur, which is enough of a debounce here
if query != service.query:
    try:
        service.parse(query)
    except Exception:
        st.error("Sorry, something went wrong while reading your search.")

chips = service.chips

if chips:
    with st.container(border=True):
        st.markdown("**✨ Detected Filters**")
        render_chips(chips)

        col_apply, col_clear, _ = st.columns([1, 1, 6])
        with col_apply:
            st.button("Apply", key="apply-filters", type="primary", on_click=_apply)
        with col_clear:
            st.button("Clear", key="clear-all-chips", on_click=_clear_all)
elif query:
    st.info("No filters detected in this search.")

st.markdown("---")
st.subheader("🎛️ Current filters")

state = service.get_filter_state()
if not state:
    st.info("No filters applied yet.")
else:
    st.json(state)

last_patch = st.session_state.get("last_patch")

if show_debug:
    st.markdown("---")
    st.subheader("🔍 Compiler output (debug)")

    if chips:
        st.table(fragment_rows(chips))
    else:
        st.info("No fragments for the current text.")

    if last_patch is not None:
        with st.expander("Last applied patch"):
            st.code(format_patch(last_patch), language="json")
