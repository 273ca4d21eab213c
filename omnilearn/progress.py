from __future__ import annotations

import re
from dataclasses import dataclass

from omnilearn.schemas import DEFAULT_COUNT, Course, CourseProgress

PASSING_SCORE = 3


def course_progress(course: Course) -> CourseProgress:
    """Share of expected lessons whose quiz has been taken at least once, plus pass/fail per lesson."""
    completed = len(course.completedQuizzes)
    total = (course.subtopicCount or DEFAULT_COUNT) * (course.lessonCount or DEFAULT_COUNT)
    percent = min(100, round(completed / total * 100))
    passed = {lesson: is_passing(score) for lesson, score in course.completedQuizzes.items()}
    return CourseProgress(completed=completed, total=total, percent=percent, passed=passed)


def is_passing(score: int) -> bool:
    return score >= PASSING_SCORE


@dataclass(frozen=True)
class LessonPosition:
    number: int  # 1-based
    total: int
    has_previous: bool
    has_next: bool


def lesson_position(lessons: list[str], lesson: str) -> LessonPosition | None:
    if lesson not in lessons:
        return None
    idx = lessons.index(lesson)
    return LessonPosition(
        number=idx + 1,
        total=len(lessons),
        has_previous=idx > 0,
        has_next=idx < len(lessons) - 1,
    )


def narration_text(markdown: str) -> str:
    """Plain text for speech synthesis: markup removed, line breaks turned into pauses."""
    text = re.sub(r"!\[[^\]]*\]\([^)]+\)", "", markdown)
    text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", text)
    text = re.sub(r"[#*`_]", "", text)
    text = text.replace("---", "")
    text = re.sub(r"\n+", ". ", text)
    return text.strip()
