"""Tests for catalog search and hierarchical tags."""
import pytest

from synergo.errors import ValidationError
from synergo.search import (
    available_tags, extract_category_tree, filter_by_category_prefix, filter_media,
    find_similar_by_tag, fuzzy_search, parse_hierarchical_tag, score_item,
)


@pytest.fixture
def catalog(make_media):
    return [
        make_media("a", tags=["R_C_E_3_1"], title="Arms crossed", description="Tense meeting"),
        make_media("b", tags=["R_C_E_3_1", "other"], title="Interview", description="Crossed arms seen"),
        make_media("c", tags=[], title="Landscape", description="Nothing here"),
        make_media("d", tags=["R_M_S_1_1"], title="Smiling crowd", media_type="video"),
    ]


def test_fuzzy_search_blank_query_is_identity(catalog):
    assert fuzzy_search(catalog, "") is catalog
    assert fuzzy_search(catalog, "   ") is catalog


def test_fuzzy_search_results_are_positive_subset(catalog):
    results = fuzzy_search(catalog, "arms")
    assert results
    assert all(item in catalog for item in results)
    assert all(score_item(item, "arms") > 0 for item in results)
    assert [m.id for m in results] == ["a", "b"]


def test_fuzzy_search_drops_non_matches(catalog):
    assert fuzzy_search(catalog, "zebra") == []


def test_fuzzy_search_tag_matches(catalog):
    results = fuzzy_search(catalog, "r_c_e")
    assert {m.id for m in results} == {"a", "b"}


def test_fuzzy_search_sorted_descending(catalog):
    results = fuzzy_search(catalog, "cr")
    scores = [score_item(m, "cr") for m in results]
    assert scores == sorted(scores, reverse=True)


def test_score_item_title_weighting(make_media):
    item = make_media("x", title="nod", description="")
    # title weight 3, starts-with bonus 2, length bonus 1 + 3/3
    assert score_item(item, "nod") == pytest.approx(12)


def test_fuzzy_search_custom_fields(catalog):
    results = fuzzy_search(catalog, "tense", fields=["description"])
    assert [m.id for m in results] == ["a"]


def test_fuzzy_search_unknown_field(catalog):
    with pytest.raises(ValidationError):
        fuzzy_search(catalog, "x", fields=["title", "colour"])


def test_parse_hierarchical_tag():
    parts = parse_hierarchical_tag("R_C_E_3_1")
    assert (parts.category, parts.subcategory, parts.type, parts.level, parts.variant) == (
        "R", "C", "E", "3", "1")
    assert parts.is_hierarchical is True


def test_parse_flat_tag():
    parts = parse_hierarchical_tag("flat")
    assert parts.category == "flat"
    assert parts.subcategory == parts.type == parts.level == parts.variant == ""
    assert parts.is_hierarchical is False


def test_parse_two_part_tag_is_not_hierarchical():
    assert parse_hierarchical_tag("R_C").is_hierarchical is False


def test_parse_empty_tag_rejected():
    with pytest.raises(ValidationError):
        parse_hierarchical_tag("  ")


def test_extract_category_tree(catalog):
    tree = extract_category_tree(catalog)
    assert tree == {"R": {"C": {"E"}, "M": {"S"}}}


def test_extract_category_tree_ignores_flat_tags(make_media):
    assert extract_category_tree([make_media("x", tags=["nod", "A_B"])]) == {}


def test_filter_by_category_prefix(catalog):
    assert [m.id for m in filter_by_category_prefix(catalog, "R_C")] == ["a", "b"]
    assert filter_by_category_prefix(catalog, "") is catalog
    assert filter_by_category_prefix(catalog, None) is catalog


def test_find_similar_by_tag(catalog):
    results = find_similar_by_tag("R_C_E_3_1", catalog)
    assert [m.id for m in results] == ["a", "b", "d"]


def test_filter_media_type_and_tags(catalog):
    assert [m.id for m in filter_media(catalog, media_type="video")] == ["d"]
    assert [m.id for m in filter_media(catalog, tags=["OTHER"])] == ["b"]


def test_filter_media_sort_by_title(catalog):
    titles = [m.title for m in filter_media(catalog, sort_by="title", descending=False)]
    assert titles == sorted(titles, key=str.lower)


def test_filter_media_rejects_unknown_values(catalog):
    with pytest.raises(ValidationError):
        filter_media(catalog, media_type="audio")
    with pytest.raises(ValidationError):
        filter_media(catalog, sort_by="colour")


def test_available_tags_counts(catalog):
    counts = dict(available_tags(catalog))
    assert counts["R_C_E_3_1"] == 2
    assert available_tags(catalog)[0] == ("R_C_E_3_1", 2)
