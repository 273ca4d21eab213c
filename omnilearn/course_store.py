"""
CourseStore - every course the learner has created, persisted as one blob.

The collection is read once by load() and afterwards lives in memory. Each
mutation rewrites the whole snapshot; there is no partial write.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Callable

from pydantic import ValidationError

from omnilearn import config
from omnilearn.migrations import migrate_courses
from omnilearn.schemas import Course, Difficulty, clamp_count
from omnilearn.storage import KeyValueStorage, make_storage

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return uuid.uuid4().hex


class CourseStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = config.DEFAULT_STORAGE_KEY,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._id_factory = id_factory
        self._courses: list[Course] = []

    @property
    def courses(self) -> tuple[Course, ...]:
        return tuple(self._courses)

    def load(self) -> list[Course]:
        """Read and migrate the persisted collection. Missing or corrupt data yields no courses."""
        self._courses = []
        try:
            raw = self._storage.read(self._key)
        except (OSError, ValueError):
            logger.exception("Failed to read persisted courses")
            return []
        if raw is None:
            return []
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.exception("Failed to parse persisted courses")
            return []
        if not isinstance(parsed, list):
            logger.error("Persisted courses are not a list (got %s); starting empty", type(parsed).__name__)
            return []

        courses: list[Course] = []
        seen: set[str] = set()
        for record in migrate_courses(parsed):
            try:
                course = Course.model_validate(record)
            except ValidationError as e:
                logger.warning("Skipping unreadable course %r: %s", record.get("id"), e.error_count())
                continue
            if course.id in seen:
                logger.warning("Skipping duplicate course id %r", course.id)
                continue
            seen.add(course.id)
            courses.append(course)
        self._courses = courses
        return list(courses)

    def save(self) -> None:
        """Overwrite the persisted blob with the full collection. Failures are logged, never raised."""
        try:
            payload = json.dumps([c.model_dump(mode="json") for c in self._courses], ensure_ascii=False)
            self._storage.write(self._key, payload)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to persist %d course(s)", len(self._courses))

    def get(self, course_id: str) -> Course | None:
        for course in self._courses:
            if course.id == course_id:
                return course
        return None

    def create(
        self,
        topic: str,
        difficulty: Difficulty,
        subtopic_count: int,
        lesson_count: int,
        subtopics: list[str],
    ) -> str:
        course_id = self._id_factory()
        while self.get(course_id) is not None:
            course_id = self._id_factory()
        course = Course(
            id=course_id,
            topic=topic,
            difficulty=difficulty,
            subtopicCount=clamp_count(subtopic_count),
            lessonCount=clamp_count(lesson_count),
            createdAt=self._clock(),
            subtopics=list(subtopics),
        )
        self._courses.append(course)
        self.save()
        return course_id

    def delete(self, course_id: str) -> bool:
        remaining = [c for c in self._courses if c.id != course_id]
        if len(remaining) == len(self._courses):
            return False
        self._courses = remaining
        self.save()
        return True

    def update(self, course_id: str, mutator: Callable[[Course], Course]) -> Course | None:
        """Replace the one course matching course_id with mutator(course). No-op if absent."""
        for idx, course in enumerate(self._courses):
            if course.id != course_id:
                continue
            updated = mutator(course)
            if updated.id != course_id:
                raise ValueError("A course update must not change the course id")
            self._courses[idx] = updated
            self.save()
            return updated
        return None


def make_course_store() -> CourseStore:
    store = CourseStore(make_storage(), key=config.storage_key())
    store.load()
    return store
