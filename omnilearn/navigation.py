"""
Navigation - the screen state machine.

transition(state, event) is pure: it never fetches, never touches the store,
and returns the state unchanged when an event is not legal from the current
step. Fetching and caching are composed around it by the controller.

Steps: DASHBOARD (initial) -> INPUT -> SUBTOPICS -> LESSONS -> CONTENT -> QUIZ.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from omnilearn.schemas import Quiz, Step


@dataclass(frozen=True)
class NavigationState:
    step: Step = Step.dashboard
    active_course_id: str | None = None
    selected_subtopic: str | None = None
    selected_lesson: str | None = None
    current_quiz: Quiz | None = None
    is_loading: bool = False
    loading_message: str = ""
    error: str | None = None


# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class OpenInput:
    pass


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class GoToDashboard:
    pass


@dataclass(frozen=True)
class CourseCreated:
    course_id: str


@dataclass(frozen=True)
class CourseResumed:
    course_id: str


@dataclass(frozen=True)
class CourseDeleted:
    course_id: str


@dataclass(frozen=True)
class SubtopicSelected:
    subtopic: str


@dataclass(frozen=True)
class LessonsReady:
    subtopic: str


@dataclass(frozen=True)
class LessonSelected:
    lesson: str


@dataclass(frozen=True)
class ContentReady:
    lesson: str


@dataclass(frozen=True)
class QuizReady:
    quiz: Quiz


@dataclass(frozen=True)
class FetchStarted:
    message: str


@dataclass(frozen=True)
class FetchFailed:
    message: str


@dataclass(frozen=True)
class FetchDiscarded:
    """A fetch resolved after the learner moved on; only the loading flag is cleared."""


Event = (
    OpenInput
    | GoBack
    | GoToDashboard
    | CourseCreated
    | CourseResumed
    | CourseDeleted
    | SubtopicSelected
    | LessonsReady
    | LessonSelected
    | ContentReady
    | QuizReady
    | FetchStarted
    | FetchFailed
    | FetchDiscarded
)


# -----------------------------------------------------------------------------
# Handlers
# -----------------------------------------------------------------------------


def _loaded(state: NavigationState, **changes) -> NavigationState:
    """Successful resolution: loading and any previous error are cleared."""
    return replace(state, is_loading=False, loading_message="", error=None, **changes)


def _open_input(state: NavigationState, event: OpenInput) -> NavigationState:
    if state.step != Step.dashboard:
        return state
    return replace(state, step=Step.input, error=None)


def _go_back(state: NavigationState, event: GoBack) -> NavigationState:
    if state.step == Step.input:
        return replace(state, step=Step.dashboard, error=None)
    if state.step == Step.subtopics:
        return replace(
            state,
            step=Step.dashboard,
            active_course_id=None,
            selected_subtopic=None,
            selected_lesson=None,
            error=None,
        )
    if state.step == Step.lessons:
        return replace(state, step=Step.subtopics, error=None)
    if state.step == Step.content:
        return replace(state, step=Step.lessons, error=None)
    if state.step == Step.quiz:
        return replace(state, step=Step.content, current_quiz=None, error=None)
    return state


def _go_to_dashboard(state: NavigationState, event: GoToDashboard) -> NavigationState:
    return replace(
        state,
        step=Step.dashboard,
        active_course_id=None,
        selected_subtopic=None,
        selected_lesson=None,
        current_quiz=None,
        error=None,
    )


def _course_created(state: NavigationState, event: CourseCreated) -> NavigationState:
    if state.step not in (Step.dashboard, Step.input):
        return state
    return _loaded(
        state,
        step=Step.subtopics,
        active_course_id=event.course_id,
        selected_subtopic=None,
        selected_lesson=None,
    )


def _course_resumed(state: NavigationState, event: CourseResumed) -> NavigationState:
    if state.step != Step.dashboard:
        return state
    return replace(
        state,
        step=Step.subtopics,
        active_course_id=event.course_id,
        selected_subtopic=None,
        selected_lesson=None,
        error=None,
    )


def _course_deleted(state: NavigationState, event: CourseDeleted) -> NavigationState:
    if state.active_course_id != event.course_id:
        return state
    return _go_to_dashboard(state, GoToDashboard())


def _subtopic_selected(state: NavigationState, event: SubtopicSelected) -> NavigationState:
    if state.step != Step.subtopics or state.active_course_id is None:
        return state
    return replace(state, selected_subtopic=event.subtopic, selected_lesson=None)


def _lessons_ready(state: NavigationState, event: LessonsReady) -> NavigationState:
    if state.step != Step.subtopics or state.selected_subtopic != event.subtopic:
        return state
    return _loaded(state, step=Step.lessons)


def _lesson_selected(state: NavigationState, event: LessonSelected) -> NavigationState:
    if state.step not in (Step.lessons, Step.content) or state.selected_subtopic is None:
        return state
    return replace(state, selected_lesson=event.lesson)


def _content_ready(state: NavigationState, event: ContentReady) -> NavigationState:
    # CONTENT -> CONTENT is the lateral next/previous move.
    if state.step not in (Step.lessons, Step.content) or state.selected_lesson != event.lesson:
        return state
    return _loaded(state, step=Step.content)


def _quiz_ready(state: NavigationState, event: QuizReady) -> NavigationState:
    if state.step != Step.content or state.selected_lesson is None:
        return state
    return _loaded(state, step=Step.quiz, current_quiz=event.quiz)


def _fetch_started(state: NavigationState, event: FetchStarted) -> NavigationState:
    return replace(state, is_loading=True, loading_message=event.message, error=None)


def _fetch_failed(state: NavigationState, event: FetchFailed) -> NavigationState:
    return replace(state, is_loading=False, loading_message="", error=event.message)


def _fetch_discarded(state: NavigationState, event: FetchDiscarded) -> NavigationState:
    return replace(state, is_loading=False, loading_message="")


_HANDLERS: dict[type, Callable[[NavigationState, Event], NavigationState]] = {
    OpenInput: _open_input,
    GoBack: _go_back,
    GoToDashboard: _go_to_dashboard,
    CourseCreated: _course_created,
    CourseResumed: _course_resumed,
    CourseDeleted: _course_deleted,
    SubtopicSelected: _subtopic_selected,
    LessonsReady: _lessons_ready,
    LessonSelected: _lesson_selected,
    ContentReady: _content_ready,
    QuizReady: _quiz_ready,
    FetchStarted: _fetch_started,
    FetchFailed: _fetch_failed,
    FetchDiscarded: _fetch_discarded,
}


def transition(state: NavigationState, event: Event) -> NavigationState:
    """Apply one event. Illegal events leave the state unchanged."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown navigation event: {event!r}")
    return handler(state, event)
