"""
Read-through caching of provider results on a Course.

ensure_* look at the course and, on a miss, ask the provider. They return a
fill describing what to write (or None on a hit) and never touch the store;
the caller decides whether the result is still wanted before applying it.
Fills are overwrite-stable: applying one twice equals applying it once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from omnilearn.provider import ContentProvider
from omnilearn.schemas import Course, LessonImage

logger = logging.getLogger(__name__)


def lessons_cached(course: Course, subtopic: str) -> bool:
    # An empty list counts as a miss so a subtopic that once came back empty is retried.
    return bool(course.lessonsCache.get(subtopic))


def material_cached(course: Course, lesson: str) -> bool:
    return bool(course.contentCache.get(lesson)) and lesson in course.imageCache


@dataclass(frozen=True)
class LessonsFill:
    subtopic: str
    lessons: tuple[str, ...]

    def apply(self, course: Course) -> Course:
        return course.model_copy(update={"lessonsCache": {**course.lessonsCache, self.subtopic: list(self.lessons)}})


@dataclass(frozen=True)
class MaterialFill:
    lesson: str
    content: str
    image: LessonImage | None = None

    def apply(self, course: Course) -> Course:
        update: dict = {"contentCache": {**course.contentCache, self.lesson: self.content}}
        if self.image is not None:
            update["imageCache"] = {**course.imageCache, self.lesson: self.image}
        return course.model_copy(update=update)


def with_quiz_score(course: Course, lesson: str, score: int) -> Course:
    """Record the latest score for a lesson, replacing any earlier attempt."""
    return course.model_copy(update={"completedQuizzes": {**course.completedQuizzes, lesson: score}})


async def ensure_lessons(provider: ContentProvider, course: Course, subtopic: str) -> LessonsFill | None:
    if lessons_cached(course, subtopic):
        return None
    lessons = await provider.generate_lessons(course.topic, subtopic, course.difficulty, course.lessonCount)
    return LessonsFill(subtopic=subtopic, lessons=tuple(lessons))


async def ensure_lesson_material(
    provider: ContentProvider, course: Course, subtopic: str, lesson: str
) -> MaterialFill | None:
    """Fetch whichever of content and image is missing. A failed image lookup is just "no image"."""
    if material_cached(course, lesson):
        return None

    content = course.contentCache.get(lesson)
    if not content:
        content = await provider.generate_lesson_content(course.topic, subtopic, lesson, course.difficulty)

    image = course.imageCache.get(lesson)
    if image is None:
        try:
            image = await provider.find_lesson_image(course.topic, lesson)
        except Exception as e:
            logger.warning("No image for lesson %r: %s", lesson, e)
            image = None

    return MaterialFill(lesson=lesson, content=content, image=image)
