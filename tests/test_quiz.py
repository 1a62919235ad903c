"""Tests for quiz deck generation."""
import random

import pytest

from synergo.models import (
    DESCRIPTION, IDENTIFICATION, INTERPRETATION, DescriptionQuestion,
    IdentificationQuestion, Nomenclature,
)
from synergo.quiz import generate_quiz_questions, max_question_count


@pytest.fixture
def items(make_media):
    return [
        make_media("a", tags=["R_C_E_3_1"]),
        make_media("b", tags=["R_C_E_3_2", "nod"]),
        make_media("c", tags=["R_M_S_1_1", "shrug"]),
        make_media("d"),
    ]


def test_empty_items_give_empty_deck(vocabulary, rng):
    assert generate_quiz_questions([], vocabulary, 10, rng=rng) == []


def test_zero_count_gives_empty_deck(items, vocabulary, rng):
    assert generate_quiz_questions(items, vocabulary, 0, rng=rng) == []


def test_max_question_count(items, vocabulary):
    # 3 tagged items + 5 description-eligible + 5 interpretation-eligible
    assert max_question_count(items, vocabulary) == 13


def test_deck_respects_requested_count(items, vocabulary, rng):
    deck = generate_quiz_questions(items, vocabulary, 5, rng=rng)
    assert len(deck) == 5


def test_deck_never_exceeds_theoretical_max(items, vocabulary):
    for seed in range(10):
        deck = generate_quiz_questions(items, vocabulary, 100, rng=random.Random(seed))
        assert len(deck) == max_question_count(items, vocabulary)


def test_full_deck_contains_every_type(items, vocabulary, rng):
    deck = generate_quiz_questions(items, vocabulary, 100, rng=rng)
    types = [q.type for q in deck]
    assert types.count(IDENTIFICATION) == 3
    assert types.count(DESCRIPTION) == 5
    assert types.count(INTERPRETATION) == 5


def test_identification_options(items, vocabulary, rng):
    deck = generate_quiz_questions(items, vocabulary, 100, rng=rng)
    for q in deck:
        if not isinstance(q, IdentificationQuestion):
            continue
        assert list(q.correct_answers) == q.media.tags
        assert set(q.correct_answers) <= set(q.options)
        distractors = [o for o in q.options if o not in q.correct_answers]
        assert len(distractors) <= max(3, 6 - len(q.correct_answers))
        assert len(set(o.lower() for o in q.options)) == len(q.options)


def test_identification_distractors_are_similar(make_media, rng):
    labels = ["R_C_E_3_1", "R_C_E_3_2", "R_C_E_3_3", "R_C_E_4_1", "zzzzzzzzzz", "qqqqqqqqqq"]
    vocab = [Nomenclature(id=str(i), label=label) for i, label in enumerate(labels)]
    deck = generate_quiz_questions([make_media("a", tags=["R_C_E_3_1"])], vocab, 1, rng=rng)
    assert len(deck) == 1
    options = set(deck[0].options)
    assert options == {"R_C_E_3_1", "R_C_E_3_2", "R_C_E_3_3", "R_C_E_4_1", "zzzzzzzzzz"} or \
        options == {"R_C_E_3_1", "R_C_E_3_2", "R_C_E_3_3", "R_C_E_4_1", "qqqqqqqqqq"}


def test_description_options(items, vocabulary, rng):
    deck = generate_quiz_questions(items, vocabulary, 100, rng=rng)
    for q in deck:
        if isinstance(q, DescriptionQuestion):
            assert len(q.options) == 4
            assert q.correct_answer == q.nomenclature.description
            assert q.correct_answer in q.options
            assert len(set(q.options)) == 4


def test_text_questions_need_three_other_texts(items, vocabulary, rng):
    vocabulary[0].description = ""
    vocabulary[1].description = "   "
    deck = generate_quiz_questions(items, vocabulary, 100, rng=rng)
    assert not [q for q in deck if q.type == DESCRIPTION]
    assert len([q for q in deck if q.type == INTERPRETATION]) == 5
    assert max_question_count(items, vocabulary) == 8


def test_unused_nomenclatures_are_ignored(make_media, vocabulary, rng):
    deck = generate_quiz_questions([make_media("a", tags=["nod"])], vocabulary, 100, rng=rng)
    assert [q.type for q in deck] == [IDENTIFICATION]


def test_no_tagged_items_gives_empty_deck(make_media, vocabulary, rng):
    deck = generate_quiz_questions([make_media("a")], vocabulary, 10, rng=rng)
    assert deck == []


def test_same_seed_same_deck(items, vocabulary):
    first = generate_quiz_questions(items, vocabulary, 6, rng=random.Random(7))
    second = generate_quiz_questions(items, vocabulary, 6, rng=random.Random(7))
    assert [(q.type, q.options) for q in first] == [(q.type, q.options) for q in second]
