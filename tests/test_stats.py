"""Tests for collection statistics and grading."""
import pytest

from synergo.stats import collection_stats, get_grade, get_grade_color


@pytest.mark.parametrize("percentage,grade", [
    (100, "excellent"), (80, "excellent"), (79, "good"), (60, "good"),
    (59, "average"), (40, "average"), (39, "poor"), (0, "poor"),
])
def test_get_grade(percentage, grade):
    assert get_grade(percentage) == grade


def test_get_grade_color():
    assert get_grade_color("excellent") == "green"
    assert get_grade_color("poor") == "red"


def test_collection_stats(make_media, vocabulary):
    media = [
        make_media("a", tags=["R_C_E_3_1", "nod"]),
        make_media("b", tags=["R_C_E_3_1"]),
        make_media("v", media_type="video", annotations=[(1.0, "shrug"), (2.0, "nod")]),
    ]
    stats = collection_stats(media, vocabulary)
    assert stats["total_media"] == 3
    assert stats["total_tags"] == 3
    assert stats["total_annotations"] == 2
    assert stats["type_distribution"] == {"video": 1, "photo": 2}
    assert stats["most_used_tags"][0] == ("R_C_E_3_1", 2)
    assert dict(stats["category_distribution"]) == {"R": 2, "nod": 1}
    assert [n.label for n in stats["unused_nomenclatures"]] == ["R_C_E_3_2", "R_M_S_1_1"]
    assert stats["usage_rate"] == 60.0
    assert stats["avg_tags_per_media"] == 1.0
    assert stats["avg_annotations_per_video"] == 2.0


def test_collection_stats_empty():
    stats = collection_stats([], [])
    assert stats["total_media"] == 0
    assert stats["avg_tags_per_media"] == 0.0
    assert stats["usage_rate"] == 0.0
