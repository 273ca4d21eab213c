"""Course progress, lesson position and narration text."""

from omnilearn.progress import course_progress, is_passing, lesson_position, narration_text
from omnilearn.schemas import Course, Difficulty


def _course(**kw) -> Course:
    return Course(id="c", topic="T", difficulty=Difficulty.basic, **kw)


class TestCourseProgress:
    def test_empty(self):
        p = course_progress(_course(subtopicCount=3, lessonCount=2))
        assert (p.completed, p.total, p.percent) == (0, 6, 0)

    def test_rounds_percent(self):
        p = course_progress(_course(subtopicCount=3, lessonCount=1, completedQuizzes={"a": 5}))
        assert p.percent == 33

    def test_default_counts(self):
        assert course_progress(_course()).total == 100

    def test_capped_at_hundred(self):
        quizzes = {f"l{i}": 1 for i in range(3)}
        assert course_progress(_course(subtopicCount=1, lessonCount=1, completedQuizzes=quizzes)).percent == 100


def test_pass_threshold():
    assert is_passing(3)
    assert not is_passing(2)


class TestLessonPosition:
    def test_middle(self):
        pos = lesson_position(["a", "b", "c"], "b")
        assert (pos.number, pos.total, pos.has_previous, pos.has_next) == (2, 3, True, True)

    def test_edges(self):
        assert not lesson_position(["a", "b"], "a").has_previous
        assert not lesson_position(["a", "b"], "b").has_next

    def test_unknown_lesson(self):
        assert lesson_position(["a"], "z") is None


class TestNarration:
    def test_strips_markup(self):
        md = "## Title\n\nSome **bold** and `code` with a [link](https://x.y) here.\n\n---\n![img](https://x/y.png)End"
        assert narration_text(md) == "Title. Some bold and code with a link here.. End"

    def test_plain_text_untouched(self):
        assert narration_text("Hello world") == "Hello world"


def test_progress_reports_pass_per_lesson():
    p = course_progress(_course(subtopicCount=2, lessonCount=2, completedQuizzes={"a": 3, "b": 2, "c": 0}))
    assert p.passed == {"a": True, "b": False, "c": False}
    assert p.completed == 3
