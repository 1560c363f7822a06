"""Shared fixtures for the query compiler tests."""

from __future__ import annotations

import itertools
from typing import Callable

import pytest

from src.compiler.fragments import Fragment, FragmentKind, FragmentValue
from src.compiler.query_compiler import QueryCompiler
from src.service.filter_search_service import FilterSearchService

_ids = itertools.count()


@pytest.fixture
def compiler() -> QueryCompiler:
    return QueryCompiler()


@pytest.fixture
def service() -> FilterSearchService:
    return FilterSearchService()


@pytest.fixture
def make_fragment() -> Callable[..., Fragment]:
    """Build a fragment by hand, the way the compiler would label it."""

    def _make(kind: FragmentKind, value: FragmentValue, label: str = "", source: str = "") -> Fragment:
        return Fragment(
            id=f"{kind.value}-test-{next(_ids)}",
            kind=kind,
            value=value,
            label=label or kind.value,
            source_span=source or kind.value,
        )

    return _make
