from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from omnilearn import __version__
from omnilearn.controller import LearningController
from omnilearn.course_store import make_course_store
from omnilearn.progress import course_progress, narration_text
from omnilearn.provider import make_content_provider
from omnilearn.schemas import (
    AppSnapshot,
    CourseProgress,
    CreateCourseRequest,
    NarrationResponse,
    QuizAnswerRequest,
    SelectLessonRequest,
    SelectSubtopicRequest,
)

app = FastAPI(title="OmniLearn API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

_controller: LearningController | None = None


def get_controller() -> LearningController:
    # Built on first request; the store is read once for the life of the process.
    global _controller
    if _controller is None:
        _controller = LearningController(make_course_store(), make_content_provider())
    return _controller


@app.get("/")
def root() -> dict:
    return {
        "ok": True,
        "service": "omnilearn",
        "endpoints": [
            "/health",
            "/state",
            "/navigation/input",
            "/navigation/back",
            "/navigation/dashboard",
            "/courses",
            "/courses/{course_id}/resume",
            "/courses/{course_id}/progress",
            "/subtopics/select",
            "/lessons/select",
            "/lessons/next",
            "/lessons/previous",
            "/lessons/narration",
            "/quiz/start",
            "/quiz/answer",
            "/quiz/submit",
        ],
        "docs": "/docs",
    }


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.get("/state", response_model=AppSnapshot)
async def get_state(controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return controller.snapshot()


@app.post("/navigation/input", response_model=AppSnapshot)
async def navigation_input(controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return controller.open_input()


@app.post("/navigation/back", response_model=AppSnapshot)
async def navigation_back(controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return controller.go_back()


@app.post("/navigation/dashboard", response_model=AppSnapshot)
async def navigation_dashboard(controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return controller.go_to_dashboard()


@app.post("/courses", response_model=AppSnapshot)
async def create_course(
    req: CreateCourseRequest, controller: LearningController = Depends(get_controller)
) -> AppSnapshot:
    return await controller.create_course(req.topic, req.difficulty, req.subtopicCount, req.lessonCount)


@app.post("/courses/{course_id}/resume", response_model=AppSnapshot)
async def resume_course(course_id: str, controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    if controller.store.get(course_id) is None:
        raise HTTPException(status_code=404, detail="Course not found.")
    return controller.resume_course(course_id)


@app.delete("/courses/{course_id}", response_model=AppSnapshot)
async def delete_course(course_id: str, controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return controller.delete_course(course_id)


@app.get("/courses/{course_id}/progress", response_model=CourseProgress)
async def get_course_progress(course_id: str, controller: LearningController = Depends(get_controller)) -> CourseProgress:
    course = controller.store.get(course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found.")
    return course_progress(course)


@app.post("/subtopics/select", response_model=AppSnapshot)
async def select_subtopic(
    req: SelectSubtopicRequest, controller: LearningController = Depends(get_controller)
) -> AppSnapshot:
    return await controller.select_subtopic(req.subtopic)


@app.post("/lessons/select", response_model=AppSnapshot)
async def select_lesson(
    req: SelectLessonRequest, controller: LearningController = Depends(get_controller)
) -> AppSnapshot:
    return await controller.select_lesson(req.lesson)


@app.post("/lessons/next", response_model=AppSnapshot)
async def next_lesson(controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return await controller.next_lesson()


@app.post("/lessons/previous", response_model=AppSnapshot)
async def previous_lesson(controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return await controller.previous_lesson()


@app.get("/lessons/narration", response_model=NarrationResponse)
async def lesson_narration(controller: LearningController = Depends(get_controller)) -> NarrationResponse:
    course = controller.active_course()
    lesson = controller.state.selected_lesson
    content = course.contentCache.get(lesson) if course is not None and lesson is not None else None
    if not content:
        raise HTTPException(status_code=404, detail="No lesson content to narrate.")
    return NarrationResponse(lesson=lesson, text=narration_text(content))


@app.post("/quiz/start", response_model=AppSnapshot)
async def start_quiz(controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return await controller.start_quiz()


@app.post("/quiz/answer", response_model=AppSnapshot)
async def answer_quiz(req: QuizAnswerRequest, controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return controller.answer_question(req.questionId, req.optionId)


@app.post("/quiz/submit", response_model=AppSnapshot)
async def submit_quiz(controller: LearningController = Depends(get_controller)) -> AppSnapshot:
    return controller.submit_quiz()
