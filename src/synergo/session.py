"""Interactive quiz session: answer capture, scoring and completion."""
from synergo.errors import QuizStateError
from synergo.models import (
    IDENTIFICATION,
    QUESTION_TYPES,
    AnswerRecord,
    QuizResult,
    TypeScore,
)


def _percentage(score: int, total: int) -> int:
    if total == 0:
        return 0
    # Round half up.
    return int(100 * score / total + 0.5)


class QuizSession:
    """Walks a question deck from the first question to completion.

    A question must be answered (or skipped) before ``advance`` moves on.
    Advancing past the last question completes the session; after that only
    ``result`` is allowed.
    """

    def __init__(self, questions: list) -> None:
        self._questions = tuple(questions)
        self._index = 0
        self._answered = False
        self._answers: list[AnswerRecord] = []
        self._scores = {t: TypeScore() for t in QUESTION_TYPES}
        self._result: QuizResult | None = None
        if not self._questions:
            self._complete()

    @property
    def questions(self) -> tuple:
        return self._questions

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self):
        if self.is_completed:
            return None
        return self._questions[self._index]

    @property
    def is_completed(self) -> bool:
        return self._result is not None

    @property
    def is_answered(self) -> bool:
        return self._answered

    @property
    def answers(self) -> list[AnswerRecord]:
        return list(self._answers)

    @property
    def scores(self) -> dict:
        return {t: TypeScore(s.correct, s.total) for t, s in self._scores.items()}

    def _require_unanswered(self, action: str) -> None:
        if self.is_completed:
            raise QuizStateError(f"Cannot {action}: the quiz is completed")
        if self._answered:
            raise QuizStateError(f"Cannot {action}: the current question was already answered")

    def _record(self, selected: tuple, is_correct: bool, skipped: bool) -> None:
        question = self._questions[self._index]
        score = self._scores[question.type]
        score.total += 1
        if is_correct:
            score.correct += 1
        self._answers.append(AnswerRecord(
            question=question,
            selected_answers=selected,
            is_correct=is_correct,
            skipped=skipped,
        ))
        self._answered = True

    def answer(self, selection) -> bool:
        """Record an answer for the current question and return its correctness.

        Identification questions take an iterable of labels and are correct
        only when the selection equals the set of correct tags exactly.
        Description and interpretation questions take a single string that
        must match the stored text exactly.
        """
        self._require_unanswered("answer")
        question = self._questions[self._index]
        if question.type == IDENTIFICATION:
            if isinstance(selection, str):
                selection = [selection]
            selected = tuple(selection)
            is_correct = set(selected) == set(question.correct_answers)
        else:
            selected = (selection,)
            is_correct = selection == question.correct_answer
        self._record(selected, is_correct, skipped=False)
        return is_correct

    def skip(self) -> QuizResult | None:
        """Count the current question as wrong and move on."""
        self._require_unanswered("skip")
        self._record((), False, skipped=True)
        return self.advance()

    def advance(self) -> QuizResult | None:
        """Go to the next question; returns the result when the deck is exhausted."""
        if self.is_completed:
            raise QuizStateError("Cannot advance: the quiz is completed")
        if not self._answered:
            raise QuizStateError("Cannot advance before answering or skipping")
        if self._index < len(self._questions) - 1:
            self._index += 1
            self._answered = False
            return None
        self._index = len(self._questions)
        return self._complete()

    def _complete(self) -> QuizResult:
        total_score = sum(s.correct for s in self._scores.values())
        total = len(self._questions)
        self._result = QuizResult(
            scores=self.scores,
            total_score=total_score,
            total=total,
            answers=tuple(self._answers),
            percentage=_percentage(total_score, total),
        )
        return self._result

    def result(self) -> QuizResult:
        if self._result is None:
            raise QuizStateError("The quiz is not finished yet")
        return self._result
