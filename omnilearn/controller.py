"""
LearningController - owns the navigation state, the quiz session and the
course store, and runs the learner's actions.

Each action composes three things: a cache check (course_cache), at most one
provider call, and pure navigation transitions. Only one provider call may
be outstanding; forward actions issued while loading are ignored. A call that
resolves after the learner has moved on is discarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from omnilearn.course_cache import (
    ensure_lesson_material,
    ensure_lessons,
    lessons_cached,
    material_cached,
    with_quiz_score,
)
from omnilearn.course_store import CourseStore
from omnilearn.navigation import (
    ContentReady,
    CourseCreated,
    CourseDeleted,
    CourseResumed,
    Event,
    FetchDiscarded,
    FetchFailed,
    FetchStarted,
    GoBack,
    GoToDashboard,
    LessonSelected,
    LessonsReady,
    NavigationState,
    OpenInput,
    QuizReady,
    SubtopicSelected,
    transition,
)
from omnilearn.progress import lesson_position
from omnilearn.provider import ContentProvider
from omnilearn.quiz_session import QuizSession
from omnilearn.schemas import DEFAULT_COUNT, AppSnapshot, Course, Difficulty, Step, clamp_count

logger = logging.getLogger(__name__)

ERROR_SUBTOPICS = "Could not generate subtopics. Please try again."
ERROR_LESSONS = "Could not generate lessons."
ERROR_CONTENT = "Could not generate lesson content."
ERROR_QUIZ = "Could not generate the quiz."

LOADING_SUBTOPICS = "Generating study plan..."
LOADING_LESSONS = "Generating lessons..."
LOADING_CONTENT = "Preparing lesson material and illustrations..."
LOADING_QUIZ = "Designing the quiz..."


@dataclass(frozen=True)
class _Ticket:
    """Where the learner was when a fetch started."""

    step: Step
    course_id: str | None
    subtopic: str | None
    lesson: str | None


class LearningController:
    def __init__(self, store: CourseStore, provider: ContentProvider) -> None:
        self.store = store
        self.provider = provider
        self._state = NavigationState()
        self._quiz = QuizSession()

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def quiz_session(self) -> QuizSession:
        return self._quiz

    def active_course(self) -> Course | None:
        if self._state.active_course_id is None:
            return None
        return self.store.get(self._state.active_course_id)

    def current_lessons(self) -> list[str]:
        course = self.active_course()
        if course is None or self._state.selected_subtopic is None:
            return []
        return list(course.lessonsCache.get(self._state.selected_subtopic) or [])

    def snapshot(self) -> AppSnapshot:
        s = self._state
        return AppSnapshot(
            step=s.step,
            activeCourseId=s.active_course_id,
            selectedSubtopic=s.selected_subtopic,
            selectedLesson=s.selected_lesson,
            currentQuiz=s.current_quiz,
            isLoading=s.is_loading,
            loadingMessage=s.loading_message,
            error=s.error,
            courses=list(self.store.courses),
            quiz=self._quiz.view(s.current_quiz),
        )

    def _apply(self, event: Event) -> None:
        self._state = transition(self._state, event)
        if self._state.step != Step.quiz:
            # Leaving the quiz screen throws the attempt away.
            self._quiz = QuizSession()

    def _ticket(self) -> _Ticket:
        s = self._state
        return _Ticket(s.step, s.active_course_id, s.selected_subtopic, s.selected_lesson)

    def _is_current(self, ticket: _Ticket) -> bool:
        return ticket == self._ticket()

    def _busy(self, action: str) -> bool:
        if self._state.is_loading:
            logger.info("Ignoring %s while a request is in flight", action)
            return True
        return False

    def _fail(self, ticket: _Ticket, message: str, err: Exception) -> None:
        logger.warning("%s (%s)", message, err)
        if self._is_current(ticket):
            self._apply(FetchFailed(message))
        else:
            self._apply(FetchDiscarded())

    def _discard(self, action: str) -> None:
        logger.info("Discarding stale %s result", action)
        self._apply(FetchDiscarded())

    # -------------------------------------------------------------------------
    # Immediate navigation
    # -------------------------------------------------------------------------

    def open_input(self) -> AppSnapshot:
        self._apply(OpenInput())
        return self.snapshot()

    def go_back(self) -> AppSnapshot:
        self._apply(GoBack())
        return self.snapshot()

    def go_to_dashboard(self) -> AppSnapshot:
        self._apply(GoToDashboard())
        return self.snapshot()

    def resume_course(self, course_id: str) -> AppSnapshot:
        if not self._busy("resume") and self.store.get(course_id) is not None:
            self._apply(CourseResumed(course_id))
        return self.snapshot()

    def delete_course(self, course_id: str) -> AppSnapshot:
        if self.store.delete(course_id):
            self._apply(CourseDeleted(course_id))
        return self.snapshot()

    # -------------------------------------------------------------------------
    # Actions that may call the provider
    # -------------------------------------------------------------------------

    async def create_course(
        self,
        topic: str,
        difficulty: Difficulty,
        subtopic_count: int = DEFAULT_COUNT,
        lesson_count: int = DEFAULT_COUNT,
    ) -> AppSnapshot:
        topic = topic.strip()
        if not topic or self._busy("create course"):
            return self.snapshot()
        if self._state.step not in (Step.dashboard, Step.input):
            return self.snapshot()

        subtopic_count = clamp_count(subtopic_count)
        lesson_count = clamp_count(lesson_count)

        self._apply(FetchStarted(LOADING_SUBTOPICS))
        ticket = self._ticket()
        try:
            subtopics = await self.provider.generate_subtopics(topic, difficulty, subtopic_count)
        except Exception as e:
            self._fail(ticket, ERROR_SUBTOPICS, e)
            return self.snapshot()

        if not self._is_current(ticket):
            self._discard("subtopics")
            return self.snapshot()

        course_id = self.store.create(topic, difficulty, subtopic_count, lesson_count, subtopics)
        self._apply(CourseCreated(course_id))
        return self.snapshot()

    async def select_subtopic(self, subtopic: str) -> AppSnapshot:
        course = self.active_course()
        if course is None or self._state.step != Step.subtopics or self._busy("select subtopic"):
            return self.snapshot()
        if subtopic not in course.subtopics:
            return self.snapshot()

        self._apply(SubtopicSelected(subtopic))
        if lessons_cached(course, subtopic):
            self._apply(LessonsReady(subtopic))
            return self.snapshot()

        self._apply(FetchStarted(LOADING_LESSONS))
        ticket = self._ticket()
        try:
            fill = await ensure_lessons(self.provider, course, subtopic)
        except Exception as e:
            self._fail(ticket, ERROR_LESSONS, e)
            return self.snapshot()

        if not self._is_current(ticket):
            self._discard("lessons")
            return self.snapshot()

        if fill is not None:
            self.store.update(course.id, fill.apply)
        self._apply(LessonsReady(subtopic))
        return self.snapshot()

    async def select_lesson(self, lesson: str) -> AppSnapshot:
        if self._state.step not in (Step.lessons, Step.content):
            return self.snapshot()
        return await self._open_lesson(lesson)

    async def next_lesson(self) -> AppSnapshot:
        return await self._step_lesson(1)

    async def previous_lesson(self) -> AppSnapshot:
        return await self._step_lesson(-1)

    async def _step_lesson(self, offset: int) -> AppSnapshot:
        if self._state.step != Step.content or self._state.selected_lesson is None:
            return self.snapshot()
        lessons = self.current_lessons()
        position = lesson_position(lessons, self._state.selected_lesson)
        if position is None:
            return self.snapshot()
        if (offset > 0 and not position.has_next) or (offset < 0 and not position.has_previous):
            return self.snapshot()
        return await self._open_lesson(lessons[position.number - 1 + offset])

    async def _open_lesson(self, lesson: str) -> AppSnapshot:
        course = self.active_course()
        subtopic = self._state.selected_subtopic
        if course is None or subtopic is None or self._busy("select lesson"):
            return self.snapshot()
        if lesson not in (course.lessonsCache.get(subtopic) or []):
            return self.snapshot()

        self._apply(LessonSelected(lesson))
        if material_cached(course, lesson):
            self._apply(ContentReady(lesson))
            return self.snapshot()

        self._apply(FetchStarted(LOADING_CONTENT))
        ticket = self._ticket()
        try:
            fill = await ensure_lesson_material(self.provider, course, subtopic, lesson)
        except Exception as e:
            self._fail(ticket, ERROR_CONTENT, e)
            return self.snapshot()

        if not self._is_current(ticket):
            self._discard("lesson content")
            return self.snapshot()

        if fill is not None:
            self.store.update(course.id, fill.apply)
        self._apply(ContentReady(lesson))
        return self.snapshot()

    async def start_quiz(self) -> AppSnapshot:
        course = self.active_course()
        lesson = self._state.selected_lesson
        if course is None or lesson is None or self._state.step != Step.content:
            return self.snapshot()
        content = course.contentCache.get(lesson)
        if not content or self._busy("start quiz"):
            return self.snapshot()

        self._apply(FetchStarted(LOADING_QUIZ))
        ticket = self._ticket()
        try:
            quiz = await self.provider.generate_quiz(content)
        except Exception as e:
            self._fail(ticket, ERROR_QUIZ, e)
            return self.snapshot()

        if not self._is_current(ticket):
            self._discard("quiz")
            return self.snapshot()

        self._apply(QuizReady(quiz))
        self._quiz = QuizSession()
        return self.snapshot()

    # -------------------------------------------------------------------------
    # Quiz answers
    # -------------------------------------------------------------------------

    def answer_question(self, question_id: int, option_id: str) -> AppSnapshot:
        quiz = self._state.current_quiz
        if self._state.step == Step.quiz and quiz is not None:
            self._quiz = self._quiz.select(quiz, question_id, option_id)
        return self.snapshot()

    def submit_quiz(self) -> AppSnapshot:
        quiz = self._state.current_quiz
        lesson = self._state.selected_lesson
        course_id = self._state.active_course_id
        if self._state.step != Step.quiz or quiz is None or lesson is None or course_id is None:
            return self.snapshot()

        submitted = self._quiz.submit(quiz)
        if submitted is self._quiz:
            return self.snapshot()
        self._quiz = submitted
        self.store.update(course_id, lambda c: with_quiz_score(c, lesson, submitted.score))
        return self.snapshot()
