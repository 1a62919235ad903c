"""Tests for data model classes."""
import dataclasses

import pytest

from synergo.models import (
    DESCRIPTION, IDENTIFICATION, INTERPRETATION, Annotation, DescriptionQuestion,
    IdentificationQuestion, InterpretationQuestion, MediaItem, Nomenclature, TypeScore,
)


def test_media_defaults():
    m = MediaItem(id="m1", type="photo", title="Smile", src="smile.jpg")
    assert m.tags == []
    assert m.annotations == []
    assert m.fps == 30
    assert m.description == ""
    assert m.source == ""


def test_media_labels_combine_tags_and_annotations():
    m = MediaItem(id="m1", type="video", title="Clip", src="clip.mp4", tags=["nod"],
                  annotations=[Annotation(time=2.5, label="shrug")])
    assert m.labels == ["nod", "shrug"]


def test_media_dict_round_trip_uses_camel_case_keys():
    m = MediaItem(id="m1", type="video", title="Clip", src="clip.mp4", tags=["nod"],
                  annotations=[Annotation(time=2.5, label="shrug")],
                  added_at=10, updated_at=20, publication_date="2024-01-01")
    data = m.to_dict()
    assert data["addedAt"] == 10
    assert data["publicationDate"] == "2024-01-01"
    assert data["annotations"] == [{"time": 2.5, "label": "shrug"}]
    assert MediaItem.from_dict(data) == m


def test_media_from_dict_fills_defaults():
    m = MediaItem.from_dict({"id": "x", "type": "photo", "title": "T", "addedAt": 5})
    assert m.updated_at == 5
    assert m.fps == 30
    assert m.tags == []


def test_nomenclature_defaults():
    n = Nomenclature(id="n1", label="nod")
    assert n.description == ""
    assert n.interpretation == ""


def test_question_types_are_fixed():
    n = Nomenclature(id="n1", label="nod")
    m = MediaItem(id="m1", type="photo", title="T", src="t.jpg")
    assert IdentificationQuestion(media=m, correct_answers=("nod",), options=("nod",)).type == IDENTIFICATION
    assert DescriptionQuestion(nomenclature=n, correct_answer="a", options=("a",)).type == DESCRIPTION
    assert InterpretationQuestion(nomenclature=n, correct_answer="a", options=("a",)).type == INTERPRETATION


def test_questions_are_immutable():
    n = Nomenclature(id="n1", label="nod")
    q = DescriptionQuestion(nomenclature=n, correct_answer="a", options=("a", "b"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        q.correct_answer = "b"


def test_type_score_defaults():
    s = TypeScore()
    assert (s.correct, s.total) == (0, 0)
