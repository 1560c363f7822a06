"""Unit tests for the filter search session facade."""

from __future__ import annotations

import pytest

from src.compiler.fragments import FragmentKind
from src.service.filter_search_service import FilterSearchService


def test_parse_then_apply_merges_into_filter_state(service: FilterSearchService) -> None:
    """Applying detected chips updates the owned filter state."""
    chips = service.parse("horror movies before 2010 rated 7+")
    assert [c.label for c in chips] == ["Movies", "Until: 2010", "Rating: 7+", "Genre: horror"]

    patch = service.apply()

    assert patch.content_type == "movie"
    assert service.get_filter_state() == {
        "content_type": "movie",
        "primary_release_date": {"end": "2010"},
        "vote_average": {"min": 7},
        "with_genres": [27],
    }


def test_removed_chip_is_not_applied(service: FilterSearchService) -> None:
    """A chip the user discarded never reaches the patch."""
    chips = service.parse("action movies on Netflix")
    provider = next(c for c in chips if c.kind is FragmentKind.PROVIDER)

    remaining = service.remove_chip(provider.id)
    service.apply()

    assert provider not in remaining
    assert "with_watch_providers" not in service.get_filter_state()


def test_removing_unknown_chip_is_harmless(service: FilterSearchService) -> None:
    """Removing an id that is not there leaves the chips alone."""
    chips = service.parse("comedies")

    assert service.remove_chip("nope") == chips


def test_new_text_replaces_chips(service: FilterSearchService) -> None:
    """Chips are rebuilt from scratch whenever the text changes."""
    service.parse("comedies")
    chips = service.parse("on Netflix")

    assert [c.label for c in chips] == ["On: Netflix"]
    assert service.query == "on Netflix"


def test_apply_adopts_content_type_from_patch() -> None:
    """A TV chip switches the session to TV for later year chips."""
    service = FilterSearchService(content_type="movie")
    service.parse("series")
    service.apply()

    assert service.content_type == "tv"

    service.parse("since 2018")
    service.apply()

    assert service.get_filter_state()["first_air_date"] == {"start": "2018"}


def test_apply_without_chips_is_a_no_op() -> None:
    """Nothing understood means no filters change."""
    service = FilterSearchService(filter_state={"with_genres": [18]})
    service.parse("the quick brown fox")

    patch = service.apply()

    assert patch.is_empty()
    assert service.get_filter_state() == {"with_genres": [18]}


def test_apply_unions_with_existing_lists() -> None:
    """Existing genre filters are kept when new ones are applied."""
    service = FilterSearchService(filter_state={"with_genres": [18], "watch_region": "GB"})
    service.parse("action in Japan")
    service.apply()

    assert service.get_filter_state() == {"with_genres": [18, 28], "watch_region": "JP"}


def test_clear_resets_text_and_chips(service: FilterSearchService) -> None:
    """Clear empties the session but keeps applied filters."""
    service.parse("action")
    service.apply()
    service.clear()

    assert service.query == ""
    assert service.chips == []
    assert service.get_filter_state() == {"with_genres": [28]}


def test_reset_filter_state(service: FilterSearchService) -> None:
    """Reset drops every applied filter."""
    service.parse("action")
    service.apply()
    service.reset_filter_state()

    assert service.get_filter_state() == {}


def test_filter_state_copy_is_detached(service: FilterSearchService) -> None:
    """Callers cannot mutate the owned state through the returned dict."""
    service.parse("action")
    service.apply()

    state = service.get_filter_state()
    state["watch_region"] = "US"

    assert "watch_region" not in service.get_filter_state()


def test_parse_stats_count_kinds(service: FilterSearchService) -> None:
    """Every parse adds the detected kinds to the session statistics."""
    service.parse("action movies")
    service.parse("comedy")

    assert service.get_parse_stats() == {"content_type": 1, "genre": 2}


@pytest.mark.parametrize("content_type", ["anime", ""])
def test_invalid_content_type_is_rejected(content_type: str) -> None:
    """Only movie and tv contexts exist."""
    with pytest.raises(ValueError):
        FilterSearchService(content_type=content_type)

    with pytest.raises(ValueError):
        FilterSearchService().set_content_type(content_type)


def test_default_compiler_is_shared() -> None:
    """Services without a custom table reuse one compiler."""
    assert FilterSearchService().compiler is FilterSearchService().compiler
