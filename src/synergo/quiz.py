"""Quiz deck generation from the tagged corpus.

Three question archetypes are pooled separately:

* identification: shown a media item, pick all of its tags among options
  that mix the correct tags with the most similar other labels;
* description / interpretation: shown a nomenclature, pick its text among
  four options.

The deck is built by repeatedly drawing from a randomly chosen non-empty
pool, so the type mix varies from one deck to the next.
"""
import random

from synergo.models import (
    DescriptionQuestion,
    IdentificationQuestion,
    InterpretationQuestion,
    MediaItem,
    Nomenclature,
)
from synergo.similarity import most_similar_to_set

TEXT_OPTION_COUNT = 4


def _quiz_tags(items: list[MediaItem]) -> set[str]:
    return {tag.lower() for item in items for tag in item.tags}


def _used_nomenclatures(items, nomenclatures) -> list[Nomenclature]:
    tags = _quiz_tags(items)
    return [n for n in nomenclatures if n.label.lower() in tags]


def _all_labels(items, nomenclatures) -> list[str]:
    """Vocabulary labels followed by quiz tags, deduplicated case-insensitively."""
    seen = set()
    labels = []
    for label in [n.label for n in nomenclatures] + [t for i in items for t in i.tags]:
        if label.lower() not in seen:
            seen.add(label.lower())
            labels.append(label)
    return labels


def _text_of(nomenclature: Nomenclature, attr: str) -> str:
    return (getattr(nomenclature, attr) or "").strip()


def _eligible(used: list[Nomenclature], attr: str) -> list[tuple[Nomenclature, list[str]]]:
    """Nomenclatures with a non-blank ``attr`` and at least 3 distinct other texts."""
    with_text = [n for n in used if _text_of(n, attr)]
    eligible = []
    for n in with_text:
        correct = getattr(n, attr)
        others = []
        for other in with_text:
            text = getattr(other, attr)
            if other is not n and text != correct and text not in others:
                others.append(text)
        if len(others) >= TEXT_OPTION_COUNT - 1:
            eligible.append((n, others))
    return eligible


def _identification_pool(items, labels, rng) -> list[IdentificationQuestion]:
    pool = []
    for item in items:
        if not item.tags:
            continue
        correct = list(item.tags)
        distractors = most_similar_to_set(correct, labels, max(4, len(correct) + 3))
        options = correct + distractors[:max(3, 6 - len(correct))]
        rng.shuffle(options)
        pool.append(IdentificationQuestion(
            media=item, correct_answers=tuple(correct), options=tuple(options),
        ))
    return pool


def _text_pool(used, attr, question_cls, rng) -> list:
    pool = []
    for nomenclature, others in _eligible(used, attr):
        correct = getattr(nomenclature, attr)
        options = [correct] + rng.sample(others, TEXT_OPTION_COUNT - 1)
        rng.shuffle(options)
        pool.append(question_cls(
            nomenclature=nomenclature, correct_answer=correct, options=tuple(options),
        ))
    return pool


def max_question_count(items: list[MediaItem], nomenclatures: list[Nomenclature]) -> int:
    """Upper bound on the deck size this corpus can produce."""
    used = _used_nomenclatures(items, nomenclatures)
    return (
        sum(1 for item in items if item.tags)
        + len(_eligible(used, "description"))
        + len(_eligible(used, "interpretation"))
    )


def generate_quiz_questions(items: list[MediaItem], nomenclatures: list[Nomenclature],
                            question_count: int, rng: random.Random | None = None) -> list:
    """Build a shuffled deck of at most ``question_count`` questions.

    An empty list means the corpus cannot support a quiz.
    """
    rng = rng or random.Random()
    if not items or question_count <= 0:
        return []

    used = _used_nomenclatures(items, nomenclatures)
    pools = [
        _identification_pool(items, _all_labels(items, nomenclatures), rng),
        _text_pool(used, "description", DescriptionQuestion, rng),
        _text_pool(used, "interpretation", InterpretationQuestion, rng),
    ]
    for pool in pools:
        rng.shuffle(pool)

    deck = []
    while len(deck) < question_count:
        available = [pool for pool in pools if pool]
        if not available:
            break
        deck.append(rng.choice(available).pop())
    rng.shuffle(deck)
    return deck
