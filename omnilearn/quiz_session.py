"""
QuizSession - answers and score for one attempt at a generated quiz.

A session is an immutable value; select() and submit() return the next
session. Once submitted, further selections are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from omnilearn.schemas import Quiz, QuizSessionView


def score_quiz(quiz: Quiz, answers: Mapping[int, str]) -> int:
    """Number of questions whose selected option is the correct one."""
    return sum(1 for q in quiz.questions if answers.get(q.id) == q.correctOptionId)


@dataclass(frozen=True)
class QuizSession:
    selected_answers: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))
    submitted: bool = False
    score: int = 0

    def select(self, quiz: Quiz, question_id: int, option_id: str) -> QuizSession:
        if self.submitted:
            return self
        question = next((q for q in quiz.questions if q.id == question_id), None)
        if question is None or option_id not in {o.id for o in question.options}:
            return self
        answers = {**self.selected_answers, question_id: option_id}
        return replace(self, selected_answers=MappingProxyType(answers))

    def can_submit(self, quiz: Quiz) -> bool:
        return not self.submitted and all(q.id in self.selected_answers for q in quiz.questions)

    def submit(self, quiz: Quiz) -> QuizSession:
        """Score the attempt. Returns self unchanged if already submitted or incomplete."""
        if not self.can_submit(quiz):
            return self
        return replace(self, submitted=True, score=score_quiz(quiz, self.selected_answers))

    def view(self, quiz: Quiz | None) -> QuizSessionView:
        return QuizSessionView(
            selectedAnswers=dict(self.selected_answers),
            submitted=self.submitted,
            score=self.score,
            canSubmit=quiz is not None and self.can_submit(quiz),
        )
