"""Unit tests for the evaluation metrics."""

from __future__ import annotations

import pytest

from src.eval.metrics import exact_match, f1, precision, recall

GOLD = [("content_type", "Movies"), ("genre", "Genre: action")]


def test_perfect_prediction() -> None:
    """Identical multisets score 1 everywhere."""
    predicted = list(reversed(GOLD))

    assert precision(predicted, GOLD) == 1.0
    assert recall(predicted, GOLD) == 1.0
    assert f1(predicted, GOLD) == 1.0
    assert exact_match(predicted, GOLD) == 1.0


def test_partial_prediction() -> None:
    """One right, one wrong."""
    predicted = [("content_type", "Movies"), ("genre", "Genre: drama")]

    assert precision(predicted, GOLD) == 0.5
    assert recall(predicted, GOLD) == 0.5
    assert f1(predicted, GOLD) == pytest.approx(0.5)
    assert exact_match(predicted, GOLD) == 0.0


def test_duplicates_only_count_once_per_gold_item() -> None:
    """A repeated prediction cannot match the same gold item twice."""
    predicted = [("content_type", "Movies"), ("content_type", "Movies")]

    assert precision(predicted, GOLD) == 0.5


def test_empty_cases() -> None:
    """Nothing expected and nothing predicted is a perfect score."""
    assert precision([], []) == 1.0
    assert recall([], []) == 1.0
    assert exact_match([], []) == 1.0
    assert precision([], GOLD) == 0.0
    assert recall([], GOLD) == 0.0
    assert f1([], GOLD) == 0.0
