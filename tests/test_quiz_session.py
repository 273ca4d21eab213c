"""Quiz attempt scoring and submission rules."""

from fakes import CORRECT, make_quiz

from omnilearn.quiz_session import QuizSession, score_quiz


def _answer_all(session: QuizSession, quiz, labels) -> QuizSession:
    for q, label in zip(quiz.questions, labels):
        session = session.select(quiz, q.id, label)
    return session


class TestScoring:
    def test_all_correct(self):
        quiz = make_quiz()
        assert score_quiz(quiz, {q.id: q.correctOptionId for q in quiz.questions}) == 5

    def test_counts_exact_matches(self):
        quiz = make_quiz()
        answers = {1: "A", 2: "A", 3: "C", 4: "A", 5: "A"}  # 1, 3 and 5 correct
        assert score_quiz(quiz, answers) == 3

    def test_missing_answers_score_zero(self):
        assert score_quiz(make_quiz(), {}) == 0


class TestSession:
    def test_submit_requires_every_answer(self):
        quiz = make_quiz()
        session = QuizSession().select(quiz, 1, "A")
        assert not session.can_submit(quiz)
        assert session.submit(quiz) is session

    def test_reselect_before_submit(self):
        quiz = make_quiz()
        session = _answer_all(QuizSession(), quiz, ["D"] * 5)
        session = _answer_all(session, quiz, CORRECT)
        submitted = session.submit(quiz)
        assert submitted.submitted
        assert submitted.score == 5

    def test_selection_after_submit_ignored(self):
        quiz = make_quiz()
        submitted = _answer_all(QuizSession(), quiz, CORRECT).submit(quiz)
        assert submitted.select(quiz, 1, "D") is submitted
        assert submitted.selected_answers[1] == "A"

    def test_second_submit_ignored(self):
        quiz = make_quiz()
        submitted = _answer_all(QuizSession(), quiz, CORRECT).submit(quiz)
        assert submitted.submit(quiz) is submitted

    def test_unknown_question_or_option_ignored(self):
        quiz = make_quiz()
        session = QuizSession()
        assert session.select(quiz, 99, "A") is session
        assert session.select(quiz, 1, "E") is session

    def test_select_returns_new_session(self):
        quiz = make_quiz()
        session = QuizSession()
        after = session.select(quiz, 2, "B")
        assert dict(session.selected_answers) == {}
        assert dict(after.selected_answers) == {2: "B"}

    def test_view(self):
        quiz = make_quiz()
        view = _answer_all(QuizSession(), quiz, CORRECT).view(quiz)
        assert view.canSubmit
        assert view.selectedAnswers == {1: "A", 2: "B", 3: "C", 4: "D", 5: "A"}
        assert not QuizSession().view(None).canSubmit
