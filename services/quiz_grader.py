# services/quiz_grader.py
"""Scoring of quiz attempts.

Answers are matched to questions by position. Grading is permissive: a missing,
``None`` or wrongly shaped answer makes its question incorrect instead of
raising, so any well-typed submission produces a result.
"""
import math
from fractions import Fraction
from typing import Any, Sequence, Union

from models.quiz_result import GradeResult, QuestionResult

_UNANSWERED = object()

Number = Union[int, float, Fraction]

def round_half_up(value: Number) -> int:
    return math.floor(Fraction(value) + Fraction(1, 2))

def percentage(part: Number, whole: Number) -> int:
    """``part / whole`` as a whole percentage, rounded half up on the exact ratio."""
    if whole <= 0:
        return 0
    return round_half_up(Fraction(part) * 100 / Fraction(whole))

def _selected_options(answer: Any) -> frozenset:
    # Anything other than a list of strings selects nothing
    if isinstance(answer, (list, tuple, set, frozenset)) and all(isinstance(a, str) for a in answer):
        return frozenset(answer)
    return frozenset()

def is_answer_correct(question, answer: Any) -> bool:
    """Exact comparison for one question; no trimming or case folding."""
    if answer is _UNANSWERED or answer is None:
        return False
    if question.type == "multiple":
        correct = question.correctAnswers
        if isinstance(correct, str):
            correct = [correct]
        return _selected_options(answer) == frozenset(correct)
    if question.type in ("single", "text"):
        return isinstance(answer, str) and answer == question.correctAnswers
    return False

def grade(quiz, answers: Sequence[Any]) -> GradeResult:
    """Grade ``answers`` against ``quiz.questions`` and ``quiz.passingScore``."""
    answers = list(answers or [])
    score = 0
    max_score = 0
    results = []
    for index, question in enumerate(quiz.questions):
        answer = answers[index] if index < len(answers) else _UNANSWERED
        is_correct = is_answer_correct(question, answer)
        points = question.points if is_correct else 0
        score += points
        max_score += question.points
        results.append(QuestionResult(
            questionIndex=index,
            questionId=question.id,
            submittedAnswer=None if answer is _UNANSWERED else answer,
            isCorrect=is_correct,
            pointsAwarded=points,
        ))

    percent = percentage(score, max_score)
    return GradeResult(
        score=score,
        maxScore=max_score,
        percentage=percent,
        passed=percent >= quiz.passingScore,
        answers=results,
    )
